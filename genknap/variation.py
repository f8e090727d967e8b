from typing import Callable, Tuple

import numpy as np

from genknap.individual import Individual


def _check_same_length(parent1 : Individual, parent2 : Individual):
  if len(parent1) != len(parent2):
    raise ValueError("Parents have chromosomes of different lengths: {} != {}".format(
      len(parent1), len(parent2)))


# crossover

def crossover(parent1 : Individual, parent2 : Individual, fun : Callable, rate : float,
  rng : np.random.Generator, **kwargs) -> Tuple[Individual, Individual]:
  """
  Recombines two parents with probability `rate`, otherwise returns clones of them

  Parameters
  ----------
  parent1, parent2 : Individual
    the parents; they are never modified

  fun : function
    the crossover operator, e.g., `single_point_crossover`

  rate : float
    probability of applying `fun`

  rng : Generator
    the random source of the run

  kwargs : dict
    extra arguments for `fun` (e.g., `n_points` for `multi_point_crossover`)

  Returns
  -------
  tuple
    two children
  """
  _check_same_length(parent1, parent2)
  if not rng.random() < rate:
    return parent1.clone(), parent2.clone()
  return fun(parent1, parent2, rng=rng, **kwargs)


def multi_point_crossover(parent1 : Individual, parent2 : Individual,
  rng : np.random.Generator, n_points : int=2) -> Tuple[Individual, Individual]:
  """
  Draws `n_points` cut points in [0, length), possibly repeated, and at each of them
  (in ascending order) swaps the tails of the two children
  """
  _check_same_length(parent1, parent2)
  chromosome1 = parent1.chromosome.copy()
  chromosome2 = parent2.chromosome.copy()
  if len(chromosome1) == 0:
    return Individual(chromosome1), Individual(chromosome2)

  cut_points = np.sort(rng.integers(0, len(chromosome1), size=n_points))
  for cut in cut_points:
    tail1 = chromosome1[cut:].copy()
    chromosome1[cut:] = chromosome2[cut:]
    chromosome2[cut:] = tail1
  return Individual(chromosome1), Individual(chromosome2)


def single_point_crossover(parent1 : Individual, parent2 : Individual,
  rng : np.random.Generator) -> Tuple[Individual, Individual]:
  return multi_point_crossover(parent1, parent2, rng=rng, n_points=1)


def uniform_crossover(parent1 : Individual, parent2 : Individual,
  rng : np.random.Generator) -> Tuple[Individual, Individual]:
  """
  Flips a fair coin per gene: on heads each child keeps the gene of its own parent,
  on tails the two genes are exchanged
  """
  _check_same_length(parent1, parent2)
  heads = rng.random(len(parent1)) < 0.5
  chromosome1 = np.where(heads, parent1.chromosome, parent2.chromosome)
  chromosome2 = np.where(heads, parent2.chromosome, parent1.chromosome)
  return Individual(chromosome1), Individual(chromosome2)


# mutation

def mutate(individual : Individual, fun : Callable, rate : float,
  rng : np.random.Generator, **kwargs) -> Individual:
  """
  Applies the mutation operator `fun` to a clone of `individual`
  """
  return fun(individual, rate, rng=rng, **kwargs)


def bit_flip_mutation(individual : Individual, rate : float,
  rng : np.random.Generator) -> Individual:
  """
  Flips every gene independently with probability `rate`
  """
  mutant = individual.clone()
  flips = rng.random(len(mutant)) < rate
  mutant.chromosome = np.logical_xor(mutant.chromosome, flips)
  return mutant


def swap_mutation(individual : Individual, rate : float,
  rng : np.random.Generator) -> Individual:
  """
  With probability `rate`, exchanges the genes at two random positions (possibly the same one)
  """
  mutant = individual.clone()
  if not rng.random() < rate or len(mutant) == 0:
    return mutant
  i, j = rng.integers(0, len(mutant), size=2)
  mutant.chromosome[i], mutant.chromosome[j] = mutant.chromosome[j], mutant.chromosome[i]
  return mutant


def inversion_mutation(individual : Individual, rate : float,
  rng : np.random.Generator) -> Individual:
  """
  With probability `rate`, reverses the genes in a random range [begin, end]
  """
  mutant = individual.clone()
  if not rng.random() < rate or len(mutant) == 0:
    return mutant
  begin = rng.integers(0, len(mutant))
  end = rng.integers(begin, len(mutant))
  mutant.chromosome[begin:end + 1] = mutant.chromosome[begin:end + 1][::-1].copy()
  return mutant
