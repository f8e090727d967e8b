from typing import List

import numpy as np

from genknap.individual import Individual
from genknap.errors import PopulationSizeError, RouletteError, InvalidSecondarySelectionError


def tournament_selection(population : List[Individual], rng : np.random.Generator,
  tournament_size : int=4) -> Individual:
  """
  Draws `tournament_size` distinct individuals uniformly at random and returns the fittest

  Parameters
  ----------
  population : list
    list of scored individuals to select from; it is not modified

  rng : Generator
    the random source of the run

  tournament_size : int, optional
    number of contestants (default is 4)

  Returns
  -------
  Individual
    the first contestant with maximal fitness

  Raises
  ------
  PopulationSizeError
    when the population is smaller than the tournament, or the tournament is empty
  """
  if tournament_size < 1 or len(population) < tournament_size:
    raise PopulationSizeError(len(population), tournament_size)
  contestants = rng.choice(len(population), size=tournament_size, replace=False)
  return max((population[i] for i in contestants), key=lambda t: t.fitness_score)


def roulette_selection(population : List[Individual], rng : np.random.Generator) -> Individual:
  """
  Fitness-proportionate selection: draws a value in [0, total fitness) and returns the first
  individual whose cumulative fitness reaches it

  Raises
  ------
  RouletteError
    when the total fitness is not positive, so there is no range to draw from,
    or when the cumulative walk finds no crossing
  """
  total = sum(t.fitness_score for t in population)
  if not total > 0:
    raise RouletteError(total)

  threshold = rng.random() * total
  cumulative = 0
  for individual in population:
    cumulative += individual.fitness_score
    if cumulative >= threshold:
      return individual
  raise RouletteError(total)


def elitism_selection(population : List[Individual], rng : np.random.Generator,
  secondary : dict, n_elites : int=1) -> Individual:
  """
  Delegates a single parent draw to the `secondary` selection.

  `secondary` uses the same layout as the engine's selection setting, i.e.,
  {"fun": selection function, "kwargs": dict}; it cannot itself be elitism.
  `n_elites` is not used by the draw: the engine reads it to carry that many of the
  best individuals over to the next generation (see `select_elites`)
  """
  if secondary["fun"] is elitism_selection:
    raise InvalidSecondarySelectionError()
  sel_fun = secondary["fun"]
  return sel_fun(population, rng=rng, **secondary.get("kwargs", dict()))


def select_elites(population : List[Individual], n_elites : int) -> List[Individual]:
  """
  Returns clones of the `n_elites` fittest individuals, best first

  Raises
  ------
  PopulationSizeError
    when the population holds fewer than `n_elites` individuals
  """
  if len(population) < n_elites:
    raise PopulationSizeError(len(population), n_elites)
  ranked = sorted(population, key=lambda t: t.fitness_score, reverse=True)
  return [t.clone() for t in ranked[:n_elites]]
