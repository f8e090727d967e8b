from genknap.individual import Individual
from genknap.evo import Evolution, EvolutionResult
from genknap.errors import (
  GeneticAlgorithmError,
  DimensionsError,
  ProbabilityRangeError,
  PopulationSizeError,
  RouletteError,
  InvalidSecondarySelectionError,
)
