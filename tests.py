import numpy as np
import pytest

from genknap.individual import Individual, random_individual
from genknap.fitness import evaluate, total_weight
from genknap.selection import tournament_selection, roulette_selection, elitism_selection, select_elites
from genknap.variation import *
from genknap.evo import Evolution
from genknap.experiments import run_repeated, summarize
from genknap.errors import *
from knapsack_demo import *


def make_population(scores):
    return [Individual([True, False], fitness_score=s) for s in scores]


def test_evaluate_sums_prices_of_taken_items():
    t = Individual([True, False, True, False, False])
    assert evaluate(t, SMALL_WEIGHTS, SMALL_PRICES, SMALL_CAPACITY) == 13 + 7
    assert total_weight(t, SMALL_WEIGHTS) == 27 + 25

def test_evaluate_overweight_is_zero():
    t = Individual([True] * 5)
    assert total_weight(t, SMALL_WEIGHTS) > SMALL_CAPACITY
    score = evaluate(t, SMALL_WEIGHTS, SMALL_PRICES, SMALL_CAPACITY)
    assert score == 0

def test_evaluate_exactly_at_capacity_is_feasible():
    assert evaluate(Individual([True, True]), [3, 4], [5, 6], 7) == 11

def test_evaluate_empty_knapsack():
    assert evaluate(Individual([False] * 5), SMALL_WEIGHTS, SMALL_PRICES, SMALL_CAPACITY) == 0

def test_individual_ordering_uses_fitness_only():
    a = Individual([True, False], fitness_score=3)
    b = Individual([False, True], fitness_score=3)
    c = Individual([True, True], fitness_score=5)
    assert a == b
    assert c > a and a < c
    assert max([a, c, b]) is c

def test_clone_keeps_stale_fitness_until_evaluated():
    t = Individual([True, True, True, True, True], fitness_score=42)
    clone = t.clone()
    clone.chromosome[0] = False
    clone.chromosome[2] = False
    assert t.chromosome[0] and t.chromosome[2]
    assert clone.fitness_score == 42
    clone.fitness_score = evaluate(clone, SMALL_WEIGHTS, SMALL_PRICES, SMALL_CAPACITY)
    assert clone.fitness_score == 19 + 16 + 3

def test_random_individual_is_unscored():
    t = random_individual(24, np.random.default_rng(0))
    assert len(t) == 24
    assert t.chromosome.dtype == bool
    assert t.fitness_score == 0


def test_crossover_rate_zero_returns_clones():
    rng = np.random.default_rng(1)
    p1 = Individual([True, False, True, True])
    p2 = Individual([False, True, False, False])
    for fun in [single_point_crossover, multi_point_crossover, uniform_crossover]:
        c1, c2 = crossover(p1, p2, fun, 0.0, rng=rng)
        assert np.array_equal(c1.chromosome, p1.chromosome)
        assert np.array_equal(c2.chromosome, p2.chromosome)
        assert c1 is not p1 and c2 is not p2

def test_single_point_crossover_alters_complementary_parents():
    p1 = Individual([True] * 8)
    p2 = Individual([False] * 8)
    for seed in range(20):
        c1, c2 = crossover(p1, p2, single_point_crossover, 1.0, rng=np.random.default_rng(seed))
        # the cut point is below the length, so at least the last gene comes from the other parent
        assert not np.array_equal(c1.chromosome, p1.chromosome)
        assert not np.array_equal(c2.chromosome, p2.chromosome)
        assert np.all(c1.chromosome != c2.chromosome)

def test_multi_point_crossover_zero_points_is_clone():
    p1 = Individual([True, True, False])
    p2 = Individual([False, False, True])
    c1, c2 = multi_point_crossover(p1, p2, rng=np.random.default_rng(0), n_points=0)
    assert np.array_equal(c1.chromosome, p1.chromosome)
    assert np.array_equal(c2.chromosome, p2.chromosome)

def test_multi_point_crossover_exchanges_genes_between_children():
    rng = np.random.default_rng(3)
    p1 = Individual(rng.random(30) < 0.5)
    p2 = Individual(rng.random(30) < 0.5)
    for _ in range(20):
        c1, c2 = multi_point_crossover(p1, p2, rng=rng, n_points=3)
        assert len(c1) == len(c2) == 30
        pairs = np.sort(np.stack([c1.chromosome, c2.chromosome]), axis=0)
        expected = np.sort(np.stack([p1.chromosome, p2.chromosome]), axis=0)
        assert np.array_equal(pairs, expected)

def test_uniform_crossover_each_parent_gene_goes_to_exactly_one_child():
    rng = np.random.default_rng(5)
    p1 = Individual([True] * 16)
    p2 = Individual([False] * 16)
    c1, c2 = uniform_crossover(p1, p2, rng=rng)
    assert len(c1) == len(c2) == 16
    assert np.all(c1.chromosome != c2.chromosome)
    assert p1.chromosome.all() and not p2.chromosome.any()

def test_crossover_rejects_length_mismatch():
    with pytest.raises(ValueError):
        crossover(Individual([True]), Individual([True, False]), uniform_crossover, 1.0,
            rng=np.random.default_rng(0))


def test_mutation_rate_zero_is_identity():
    rng = np.random.default_rng(2)
    t = Individual(rng.random(20) < 0.5)
    for fun in [bit_flip_mutation, swap_mutation, inversion_mutation]:
        mutant = mutate(t, fun, 0.0, rng=rng)
        assert np.array_equal(mutant.chromosome, t.chromosome)
        assert mutant is not t

def test_bit_flip_rate_one_flips_every_gene_of_a_copy():
    t = Individual([True, False, True])
    mutant = bit_flip_mutation(t, 1.0, rng=np.random.default_rng(0))
    assert list(mutant.chromosome) == [False, True, False]
    assert list(t.chromosome) == [True, False, True]

def test_swap_and_inversion_only_rearrange_genes():
    rng = np.random.default_rng(4)
    t = Individual(rng.random(25) < 0.5)
    for fun in [swap_mutation, inversion_mutation]:
        for _ in range(10):
            mutant = fun(t, 1.0, rng=rng)
            assert mutant.chromosome.sum() == t.chromosome.sum()

def test_inversion_reverses_a_contiguous_range():
    t = Individual([True, True, True, False, False, False])
    for seed in range(10):
        mutant = inversion_mutation(t, 1.0, rng=np.random.default_rng(seed))
        changed = np.flatnonzero(mutant.chromosome != t.chromosome)
        if len(changed):
            begin, end = changed[0], changed[-1]
            assert np.array_equal(mutant.chromosome[begin:end + 1], t.chromosome[begin:end + 1][::-1])


def test_tournament_larger_than_population_fails():
    with pytest.raises(PopulationSizeError) as err:
        tournament_selection(make_population([1, 2, 3]), rng=np.random.default_rng(0), tournament_size=4)
    assert err.value.population_size == 3
    assert err.value.required == 4

def test_tournament_of_whole_population_returns_fittest():
    population = make_population([4, 9, 1, 9])
    winner = tournament_selection(population, rng=np.random.default_rng(0), tournament_size=4)
    assert winner.fitness_score == 9
    assert any(winner is t for t in population)

def test_roulette_zero_fitness_population_fails():
    with pytest.raises(RouletteError):
        roulette_selection(make_population([0, 0, 0, 0]), rng=np.random.default_rng(0))

def test_roulette_picks_only_individual_with_fitness():
    population = make_population([0, 0, 5, 0])
    rng = np.random.default_rng(6)
    for _ in range(20):
        assert roulette_selection(population, rng=rng) is population[2]

def test_elitism_cannot_wrap_elitism():
    secondary = {"fun": elitism_selection, "kwargs": {"n_elites": 1,
        "secondary": {"fun": tournament_selection, "kwargs": {"tournament_size": 2}}}}
    for scores in [[1, 2], [0, 0, 0, 0], [7]]:
        with pytest.raises(InvalidSecondarySelectionError):
            elitism_selection(make_population(scores), rng=np.random.default_rng(0), secondary=secondary)

def test_elitism_delegates_to_secondary():
    population = make_population([3, 8, 5])
    secondary = {"fun": tournament_selection, "kwargs": {"tournament_size": 3}}
    assert elitism_selection(population, rng=np.random.default_rng(0), secondary=secondary, n_elites=2) is population[1]

def test_select_elites_returns_best_clones():
    population = make_population([3, 8, 5, 1])
    elites = select_elites(population, 2)
    assert [t.fitness_score for t in elites] == [8, 5]
    assert all(e is not t for e in elites for t in population)
    with pytest.raises(PopulationSizeError):
        select_elites(population, 5)


def test_validation_population_size():
    for pop_size in [7, 0, -2]:
        with pytest.raises(PopulationSizeError):
            Evolution(SMALL_WEIGHTS, SMALL_PRICES, SMALL_CAPACITY, pop_size=pop_size, max_gens=1).evolve()
    result = Evolution(SMALL_WEIGHTS, SMALL_PRICES, SMALL_CAPACITY, pop_size=50, max_gens=1, seed=0).evolve()
    assert len(result.score_per_generation) == 1

def test_validation_dimensions():
    with pytest.raises(DimensionsError):
        Evolution([1, 2, 3], [1, 2], 5).evolve()

def test_validation_names_offending_rate():
    with pytest.raises(ProbabilityRangeError) as err:
        Evolution(SMALL_WEIGHTS, SMALL_PRICES, SMALL_CAPACITY,
            mutation={"fun": bit_flip_mutation, "rate": 1.5}).evolve()
    assert err.value.name == "mutation_rate"
    with pytest.raises(ProbabilityRangeError) as err:
        Evolution(SMALL_WEIGHTS, SMALL_PRICES, SMALL_CAPACITY,
            crossover={"fun": uniform_crossover, "rate": -0.1}).evolve()
    assert err.value.name == "crossover_rate"

def test_validation_happens_before_population_is_created():
    evo = Evolution([1, 2], [1], 5)
    with pytest.raises(DimensionsError):
        evo.evolve()
    assert evo.population == []

def test_selection_error_aborts_run():
    # nothing fits, so every individual but the empty one scores zero
    evo = Evolution([5, 5, 5, 5], [1, 1, 1, 1], 0, pop_size=10, max_gens=5, seed=0,
        selection={"fun": roulette_selection})
    with pytest.raises(RouletteError):
        evo.evolve()

def test_tournament_larger_than_population_aborts_run():
    with pytest.raises(PopulationSizeError):
        Evolution(SMALL_WEIGHTS, SMALL_PRICES, SMALL_CAPACITY, pop_size=4, max_gens=2,
            selection={"fun": tournament_selection, "kwargs": {"tournament_size": 10}}).evolve()

def test_small_instance_end_to_end():
    result = solve_small(seed=11)
    assert len(result.score_per_generation) == 10
    best = result.best_individual
    assert total_weight(best, SMALL_WEIGHTS) <= SMALL_CAPACITY
    assert best.fitness_score >= max(result.score_per_generation)
    assert best.fitness_score == evaluate(best, SMALL_WEIGHTS, SMALL_PRICES, SMALL_CAPACITY)

def test_same_seed_same_run():
    a = solve_small(seed=3)
    b = solve_small(seed=3)
    assert a.score_per_generation == b.score_per_generation
    assert np.array_equal(a.best_individual.chromosome, b.best_individual.chromosome)

def test_roulette_and_uniform_run():
    evo = Evolution(SMALL_WEIGHTS, SMALL_PRICES, SMALL_CAPACITY, pop_size=20, max_gens=15, seed=8,
        crossover={"fun": uniform_crossover, "rate": 0.9},
        mutation={"fun": swap_mutation, "rate": 0.3},
        selection={"fun": roulette_selection})
    result = evo.evolve()
    assert len(result.score_per_generation) == 15
    assert evo.num_gens == 15
    # the initial population is evaluated once more before the first generation
    assert evo.num_evals == 20 * 16
    assert len(evo.population) == 20

def test_elites_survive_heavy_mutation():
    # every child has all its genes flipped, only the carried-over elites keep the best score
    evo = Evolution(P08_WEIGHTS, P08_PRICES, P08_CAPACITY, pop_size=10, max_gens=30, seed=2,
        mutation={"fun": bit_flip_mutation, "rate": 1.0},
        selection={"fun": elitism_selection, "kwargs": {"n_elites": 3,
            "secondary": {"fun": tournament_selection, "kwargs": {"tournament_size": 3}}}})
    result = evo.evolve()
    assert np.all(np.diff(result.score_per_generation) >= 0)
    assert len(evo.population) == 10

def test_p08_end_to_end():
    result = solve_p08(seed=0)
    scores = result.score_per_generation
    assert len(scores) == 1000
    assert result.best_individual.fitness_score <= P08_OPTIMAL
    assert max(scores) <= P08_OPTIMAL
    assert total_weight(result.best_individual, P08_WEIGHTS) <= P08_CAPACITY
    assert result.best_individual.fitness_score == max(scores)
    running_best = np.maximum.accumulate(scores)
    assert np.all(np.diff(running_best) >= 0)
    assert np.all(np.diff(scores) >= 0)

def test_verbose_prints_each_generation(capsys):
    Evolution(SMALL_WEIGHTS, SMALL_PRICES, SMALL_CAPACITY, pop_size=10, max_gens=3, seed=0, verbose=True).evolve()
    out = capsys.readouterr().out
    assert "gen: 1," in out and "gen: 3," in out


def test_run_repeated_is_reproducible():
    kwargs = dict(weights=SMALL_WEIGHTS, prices=SMALL_PRICES, capacity=SMALL_CAPACITY, pop_size=10, max_gens=5)
    results = run_repeated([7, 7, 9], n_jobs=1, **kwargs)
    assert len(results) == 3
    assert results[0].score_per_generation == results[1].score_per_generation
    stats = summarize(results)
    assert stats["max"] >= stats["mean"] >= 0
    assert stats["max"] == max(r.best_individual.fitness_score for r in results)


def test_zero_generations_returns_best_of_initial_population():
    evo = Evolution(SMALL_WEIGHTS, SMALL_PRICES, SMALL_CAPACITY, pop_size=10, max_gens=0, seed=0)
    result = evo.evolve()
    assert result.score_per_generation == []
    best = result.best_individual
    assert best.fitness_score == max(t.fitness_score for t in evo.population)
    assert best.fitness_score == evaluate(best, SMALL_WEIGHTS, SMALL_PRICES, SMALL_CAPACITY)
    assert all(best is not t for t in evo.population)

def test_empty_tournament_fails():
    with pytest.raises(PopulationSizeError):
        tournament_selection(make_population([1, 2]), rng=np.random.default_rng(0), tournament_size=0)
    with pytest.raises(PopulationSizeError):
        Evolution(SMALL_WEIGHTS, SMALL_PRICES, SMALL_CAPACITY, pop_size=4, max_gens=2, seed=0,
            selection={"fun": tournament_selection, "kwargs": {"tournament_size": 0}}).evolve()

def test_individual_does_not_share_genes_with_its_source():
    source = Individual([True, False, True])
    copy = Individual(source.chromosome)
    copy.chromosome[0] = False
    assert source.chromosome[0]

def test_default_operators_are_not_shared_between_runs():
    a = Evolution(SMALL_WEIGHTS, SMALL_PRICES, SMALL_CAPACITY)
    b = Evolution(SMALL_WEIGHTS, SMALL_PRICES, SMALL_CAPACITY)
    a.selection["kwargs"]["tournament_size"] = 50
    a.mutation["rate"] = 0.5
    assert b.selection["kwargs"]["tournament_size"] == 4
    assert b.mutation["rate"] == 0.05
    assert b.crossover == {"fun": single_point_crossover, "rate": 0.5}

def test_demo_reports_failed_run(capsys):
    def failing_solve(verbose=False):
        return Evolution(SMALL_WEIGHTS, SMALL_PRICES, SMALL_CAPACITY, pop_size=7, verbose=verbose).evolve()
    assert main(failing_solve) == 1
    out = capsys.readouterr().out
    assert "Genetic algorithm failed with error: population_size (7) must be even and non-zero value" in out
