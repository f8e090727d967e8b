from typing import List

import numpy as np
from joblib.parallel import Parallel, delayed

from genknap.evo import Evolution, EvolutionResult


def _run_once(seed, evolution_kwargs : dict) -> EvolutionResult:
  return Evolution(seed=seed, **evolution_kwargs).evolve()


def run_repeated(seeds : list, n_jobs : int=1, **evolution_kwargs) -> List[EvolutionResult]:
  """
  Runs one independent evolution per seed, in parallel across runs

  Parameters
  ----------
  seeds : list
    one seed per run

  n_jobs : int, optional
    number of jobs to use for parallelism (default is 1)

  evolution_kwargs : dict
    settings handed to every `Evolution` (weights, prices, capacity, pop_size, ...)

  Returns
  -------
  list
    the results, in the order of `seeds`
  """
  return Parallel(n_jobs=n_jobs)(delayed(_run_once)(seed, evolution_kwargs) for seed in seeds)


def summarize(results : List[EvolutionResult]) -> dict:
  """
  Mean, standard deviation and maximum of the best fitness reached by each run
  """
  best = np.array([r.best_individual.fitness_score for r in results], dtype=float)
  return {"mean": float(np.mean(best)), "std": float(np.std(best)), "max": float(np.max(best))}
