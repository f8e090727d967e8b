import time, inspect
from typing import List, NamedTuple

import numpy as np

from genknap.individual import Individual, random_individual
from genknap.fitness import evaluate
from genknap.selection import tournament_selection, elitism_selection, select_elites
from genknap.variation import crossover, mutate, single_point_crossover, bit_flip_mutation
from genknap.errors import DimensionsError, ProbabilityRangeError, PopulationSizeError


class EvolutionResult(NamedTuple):
  best_individual : Individual
  score_per_generation : List[float]


class Evolution:
  """
  Class concerning the overall evolution process of a 0/1 knapsack population.

  Parameters
  ----------
  weights : list
    weight of each item

  prices : list
    price of each item, parallel to `weights`

  capacity : float
    maximal total weight of a feasible solution

  pop_size : int, optional
    the population size, must be even and non-zero (default is 50)

  max_gens : int, optional
    number of generations to run (default is 100)

  crossover : dict, optional
    dictionary that contains: "fun": crossover function to be called, "rate": probability of applying it, "kwargs" (optional): kwargs for the chosen crossover function (default is {"fun":single_point_crossover, "rate": 0.5})

  mutation : dict, optional
    similar to `crossover`, but for mutation; "rate" is handed to the mutation function (default is {"fun":bit_flip_mutation, "rate": 0.05})

  selection : dict, optional
    dictionary that contains: "fun": function to be used to select a parent, "kwargs": kwargs for the chosen selection function (default is {"fun":tournament_selection,"kwargs":{"tournament_size":4}});
    with `elitism_selection`, the best "n_elites" individuals are also carried over unmutated to the next generation

  seed : int, optional
    seed of the random number generator of the run (default is None)

  rng : Generator, optional
    random number generator to use instead of one built from `seed` (default is None)

  verbose : bool, optional
    whether to log information during the evolution (default is False)

  Attributes
  ----------
  All of the parameters, plus the following:

  population : list
    list of Individual objects of the current generation

  num_gens : int
    number of generations

  num_evals : int
    number of evaluations

  start_time : time
    start time

  elapsed_time : time
    elapsed time

  best_individual : Individual
    clone of the best individual seen across all generations

  score_per_generation : list
    best fitness of each generation
  """
  def __init__(self,
    # required settings
    weights : list,
    prices : list,
    capacity : float,
    # optional evolution settings
    pop_size : int=50,
    max_gens : int=100,
    crossover : dict=None,
    mutation : dict=None,
    selection : dict=None,
    # other
    seed : int=None,
    rng : np.random.Generator=None,
    verbose : bool=False,
    ):

    # set parameters as attributes
    _, _, _, values = inspect.getargvalues(inspect.currentframe())
    values.pop('self')
    for arg, val in values.items():
      setattr(self, arg, val)

    # fill-in defaults, one fresh dictionary per instance
    if self.crossover is None:
      self.crossover = {"fun":single_point_crossover, "rate": 0.5}
    if self.mutation is None:
      self.mutation = {"fun":bit_flip_mutation, "rate": 0.05}
    if self.selection is None:
      self.selection = {"fun":tournament_selection,"kwargs":{"tournament_size":4}}

    if self.rng is None:
      self.rng = np.random.default_rng(seed)

    # initialize some state variables
    self.population = list()
    self.num_gens = 0
    self.num_evals = 0
    self.start_time, self.elapsed_time = 0, 0
    self.best_individual = None
    self.score_per_generation = list()

  def _validate(self):
    """
    Checks the configuration before any population is created
    """
    if len(self.weights) != len(self.prices):
      raise DimensionsError(len(self.weights), len(self.prices))
    for name, rate in [("crossover_rate", self.crossover["rate"]), ("mutation_rate", self.mutation["rate"])]:
      if not 0.0 <= rate <= 1.0:
        raise ProbabilityRangeError(name, rate)
    if self.pop_size <= 0 or self.pop_size % 2 != 0:
      raise PopulationSizeError(self.pop_size)

  def _must_terminate(self) -> bool:
    """
    Determines whether the generation budget has been used up

    Returns
    -------
    bool
      True if `max_gens` generations have been performed, else False
    """
    self.elapsed_time = time.time() - self.start_time
    return self.num_gens >= self.max_gens

  def _initialize_population(self):
    """
    Generates a random initial population and evaluates it
    """
    self.population = [random_individual(len(self.weights), self.rng) for _ in range(self.pop_size)]
    self._evaluate_population()
    # store best at initialization
    self.best_individual = max(self.population, key=lambda t: t.fitness_score).clone()

  def _evaluate_population(self):
    for individual in self.population:
      individual.fitness_score = evaluate(individual, self.weights, self.prices, self.capacity)
    self.num_evals += len(self.population)

  def _track_best(self):
    best = max(self.population, key=lambda t: t.fitness_score)
    if best > self.best_individual:
      self.best_individual = best.clone()
    self.score_per_generation.append(best.fitness_score)

  def _generate_offspring(self) -> List[Individual]:
    """
    Builds the next population: elites first (when selecting with elitism),
    then mutated children of selected parent pairs
    """
    sel_fun = self.selection["fun"]
    sel_kwargs = self.selection.get("kwargs", dict())

    offspring_population = list()
    if sel_fun is elitism_selection:
      offspring_population.extend(select_elites(self.population, sel_kwargs.get("n_elites", 1)))

    while len(offspring_population) < self.pop_size:
      parent1 = sel_fun(self.population, rng=self.rng, **sel_kwargs)
      parent2 = sel_fun(self.population, rng=self.rng, **sel_kwargs)
      children = crossover(parent1, parent2, self.crossover["fun"], self.crossover["rate"],
        rng=self.rng, **self.crossover.get("kwargs", dict()))
      for child in children:
        offspring_population.append(mutate(child, self.mutation["fun"], self.mutation["rate"],
          rng=self.rng, **self.mutation.get("kwargs", dict())))

    # an odd number of elites leaves one surplus child
    return offspring_population[:self.pop_size]

  def _perform_generation(self):
    """
    Performs one generation, which consists of fitness evaluation, best tracking,
    parent selection, and offspring generation
    """
    self._evaluate_population()
    self._track_best()
    # update the population for the next iteration
    self.population = self._generate_offspring()
    self.num_gens += 1

  def evolve(self) -> EvolutionResult:
    """
    Runs the evolution for `max_gens` generations;
    first, the configuration is validated and a random population is initialized, second the generational loop is started:
    every generation, the population is evaluated, its best is recorded, promising parents are selected,
    and their (recombined, mutated) offspring form the population for the next generation

    Returns
    -------
    EvolutionResult
      the best individual seen across all generations and the best fitness of each generation
    """
    self._validate()

    # set the start time
    self.start_time = time.time()

    self._initialize_population()

    # generational loop
    while not self._must_terminate():
      # perform one generation
      self._perform_generation()
      # log info
      if self.verbose:
        print("gen: {},\tbest of gen fitness: {:.3f},\tbest so far: {:.3f}".format(
            self.num_gens, self.score_per_generation[-1], self.best_individual.fitness_score)
            )

    return EvolutionResult(self.best_individual, list(self.score_per_generation))
