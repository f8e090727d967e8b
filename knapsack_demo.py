from genknap.evo import Evolution
from genknap.errors import GeneticAlgorithmError
from genknap.fitness import total_weight
from genknap.selection import tournament_selection, elitism_selection
from genknap.variation import multi_point_crossover, single_point_crossover, bit_flip_mutation

# Small instance
SMALL_WEIGHTS = [27, 10, 25, 25, 7]
SMALL_PRICES = [13, 19, 7, 16, 3]
SMALL_CAPACITY = 66

# P08 from https://people.sc.fsu.edu/~jburkardt/datasets/knapsack_01/knapsack_01.html
P08_WEIGHTS = [
  382745, 799601, 909247, 729069, 467902, 44328, 34610, 698150, 823460, 903959, 853665, 551830,
  610856, 670702, 488960, 951111, 323046, 446298, 931161, 31385, 496951, 264724, 224916, 169684,
]
P08_PRICES = [
  825594, 1677009, 1676628, 1523970, 943972, 97426, 69666, 1296457, 1679693, 1902996, 1844992,
  1049289, 1252836, 1319836, 953277, 2067538, 675367, 853655, 1826027, 65731, 901489, 577243,
  466257, 369261,
]
P08_CAPACITY = 6404180
P08_OPTIMAL = 13549094


def solve_small(seed=None, verbose=False):
  evo = Evolution(SMALL_WEIGHTS, SMALL_PRICES, SMALL_CAPACITY,
    pop_size=50, max_gens=10,
    crossover={"fun": single_point_crossover, "rate": 0.5},
    mutation={"fun": bit_flip_mutation, "rate": 0.05},
    selection={"fun": tournament_selection, "kwargs": {"tournament_size": 10}},
    seed=seed, verbose=verbose)
  return evo.evolve()


def solve_p08(seed=None, verbose=False):
  evo = Evolution(P08_WEIGHTS, P08_PRICES, P08_CAPACITY,
    pop_size=100, max_gens=1000,
    crossover={"fun": multi_point_crossover, "rate": 0.5, "kwargs": {"n_points": 2}},
    mutation={"fun": bit_flip_mutation, "rate": 0.1},
    selection={"fun": elitism_selection, "kwargs": {"n_elites": 1,
      "secondary": {"fun": tournament_selection, "kwargs": {"tournament_size": 10}}}},
    seed=seed, verbose=verbose)
  return evo.evolve()


def main(solve=solve_p08) -> int:
  try:
    result = solve(verbose=True)
  except GeneticAlgorithmError as e:
    print("Genetic algorithm failed with error: {}".format(e))
    return 1
  best = result.best_individual
  print("Best individual:", best)
  print("Best fitness: {} (optimal: {}), weight: {} / {}".format(
    best.fitness_score, P08_OPTIMAL, total_weight(best, P08_WEIGHTS), P08_CAPACITY))
  return 0


if __name__ == "__main__":
  raise SystemExit(main())
