from __future__ import annotations
from copy import deepcopy

import numpy as np


class Individual:
  """
  A candidate knapsack solution.

  Parameters
  ----------
  chromosome : array-like of bool
    gene `i` is True when item `i` is taken

  fitness_score : float, optional
    the cached fitness (default is 0); only the evaluation pass of the engine writes it,
    so a freshly cloned or mutated individual carries a stale value until the next evaluation

  Notes
  -----
  Equality and ordering compare `fitness_score` only: two individuals with different
  chromosomes but the same fitness are equal when ranking
  """
  def __init__(self, chromosome, fitness_score=0):
    self.chromosome = np.array(chromosome, dtype=bool)
    self.fitness_score = fitness_score

  def clone(self) -> Individual:
    return deepcopy(self)

  def __len__(self) -> int:
    return len(self.chromosome)

  def __eq__(self, other):
    if not isinstance(other, Individual):
      return NotImplemented
    return self.fitness_score == other.fitness_score

  def __lt__(self, other):
    if not isinstance(other, Individual):
      return NotImplemented
    return self.fitness_score < other.fitness_score

  def __le__(self, other):
    if not isinstance(other, Individual):
      return NotImplemented
    return self.fitness_score <= other.fitness_score

  def __gt__(self, other):
    if not isinstance(other, Individual):
      return NotImplemented
    return self.fitness_score > other.fitness_score

  def __ge__(self, other):
    if not isinstance(other, Individual):
      return NotImplemented
    return self.fitness_score >= other.fitness_score

  __hash__ = None

  def __repr__(self) -> str:
    genes = "".join("1" if gene else "0" for gene in self.chromosome)
    return "Individual(chromosome={}, fitness_score={})".format(genes, self.fitness_score)


def random_individual(n_genes : int, rng : np.random.Generator) -> Individual:
  """
  Generates an individual whose genes are independent fair coin flips; its fitness is left unscored
  """
  return Individual(rng.random(n_genes) < 0.5)
