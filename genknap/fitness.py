import numpy as np

from genknap.individual import Individual


def total_weight(individual : Individual, weights) -> float:
  """
  Returns the summed weight of the items taken by `individual`
  """
  return np.asarray(weights)[individual.chromosome].sum().item()


def evaluate(individual : Individual, weights, prices, capacity) -> float:
  """
  Scores an individual as the total price of the taken items

  Parameters
  ----------
  individual : Individual
    the candidate to score; it is not modified

  weights : array-like
    weight of each item

  prices : array-like
    price of each item, parallel to `weights`

  capacity : float
    maximal total weight of a feasible solution

  Returns
  -------
  float
    the total price, or zero (in the dtype of `prices`) when the taken items exceed `capacity`
  """
  prices = np.asarray(prices)
  taken = individual.chromosome
  if total_weight(individual, weights) > capacity:
    return prices.dtype.type(0).item()
  return prices[taken].sum().item()
