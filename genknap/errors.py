class GeneticAlgorithmError(Exception):
  """
  Base class for every failure raised while configuring or running an evolution
  """


class DimensionsError(GeneticAlgorithmError):
  def __init__(self, n_weights : int, n_prices : int):
    self.n_weights = n_weights
    self.n_prices = n_prices
    super().__init__(
      "Weights and prices dimensions are not equal: {} != {}".format(n_weights, n_prices))


class ProbabilityRangeError(GeneticAlgorithmError):
  def __init__(self, name : str, value : float):
    self.name = name
    self.value = value
    super().__init__(
      "The probability of {} ({}) is not in range of [0 - 1]".format(name, value))


class PopulationSizeError(GeneticAlgorithmError):
  """
  Raised for a population size that is odd or zero (`required` is None),
  or for a population smaller than a tournament size or elite count
  """
  def __init__(self, population_size : int, required : int=None):
    self.population_size = population_size
    self.required = required
    if required is None:
      msg = "population_size ({}) must be even and non-zero value".format(population_size)
    else:
      msg = "Population size is smaller than \"tournament size\" or \"elites number\": {} < {}".format(
        population_size, required)
    super().__init__(msg)


class RouletteError(GeneticAlgorithmError):
  def __init__(self, total_fitness : float):
    self.total_fitness = total_fitness
    super().__init__(
      "Roulette selection failed (total fitness: {})".format(total_fitness))


class InvalidSecondarySelectionError(GeneticAlgorithmError):
  def __init__(self):
    super().__init__("Secondary selection cannot be Elitism")
