#  Copyright (c) 2025 AIRBUS and its affiliates.
#  This source code is licensed under the MIT license found in the
#  LICENSE file in the root directory of this source tree.

import pytest

from binpack_tabu.binpack.packing import validate_packing
from binpack_tabu.binpack.problem import BinPackProblem, BinPackSolution
from binpack_tabu.binpack.solvers.greedy import GreedyBinPackSolver
from binpack_tabu.binpack.solvers.tabu import (
    TabuBinPackSolver,
    TabuParams,
    tabu_search,
)
from binpack_tabu.generic_tools.callbacks.callback import Callback
from binpack_tabu.generic_tools.do_solver import StatusSolver
from binpack_tabu.generic_tools.ls.tabu_search import TabuSearchTracer

SMALL_PARAMS = TabuParams(
    nb_iteration_max=60, neighborhood_samples=20, tabu_tenure=5, stagnation_limit=15
)


class RecordingTracer(TabuSearchTracer):
    def __init__(self):
        self.candidates = []
        self.accepted = []
        self.restarts = []
        self.iteration_starts = []
        self.new_bests = []
        self.time_limits = []

    def on_restart(self, iteration, solution):
        self.restarts.append(iteration)

    def on_iteration_start(self, iteration, current_fitness, best_fitness, tabu_size):
        self.iteration_starts.append((iteration, tabu_size))

    def on_candidate(
        self, sample, move, candidate, fitness, is_tabu, aspiration, allowed
    ):
        self.candidates.append((move.key, fitness, is_tabu, aspiration, allowed))

    def on_move_accepted(self, iteration, move, solution, fitness):
        self.accepted.append((iteration, move.key, fitness))

    def on_new_best(self, iteration, solution, fitness):
        self.new_bests.append((iteration, fitness))

    def on_time_limit(self, iteration):
        self.time_limits.append(iteration)


class BestFitnessRecorder(Callback):
    def __init__(self):
        self.best_fitnesses = []

    def on_step_end(self, step, res, solver):
        self.best_fitnesses.append(solver.best_fitness)


def test_tabu_search(problem):
    result = tabu_search(problem, seed=0, params=SMALL_PARAMS)
    assert result.best_nb_bins == 4
    assert result.best_unused == 60
    assert result.best_packing.nb_bins == result.best_nb_bins
    assert sorted(result.best_permutation) == list(range(problem.nb_items))
    assert result.nb_iterations == SMALL_PARAMS.nb_iteration_max
    assert result.elapsed >= 0.0
    validate_packing(problem, result.best_packing)


def test_improves_on_greedy(improvable_problem):
    problem = improvable_problem
    greedy_sol = GreedyBinPackSolver(problem=problem).solve().get_best_solution()
    assert greedy_sol.packing.nb_bins == 3
    result = tabu_search(problem, seed=1, params=SMALL_PARAMS)
    validate_packing(problem, result.best_packing)
    assert result.nb_iterations > 0
    assert result.best_nb_bins == problem.lower_bound_nb_bins() == 2
    assert result.best_unused == 0


@pytest.mark.parametrize("fixture_name", ["improvable_problem", "not_tight_problem"])
def test_reproducible(fixture_name, request):
    problem = request.getfixturevalue(fixture_name)
    results = [tabu_search(problem, seed=7, params=SMALL_PARAMS) for _ in range(2)]
    assert results[0].nb_iterations > 0
    assert results[0].best_permutation == results[1].best_permutation
    assert results[0].best_packing == results[1].best_packing
    assert results[0].nb_iterations == results[1].nb_iterations


@pytest.mark.parametrize("fixture_name", ["improvable_problem", "not_tight_problem"])
def test_solve_twice_gives_same_result(fixture_name, request):
    problem = request.getfixturevalue(fixture_name)
    solver = TabuBinPackSolver(problem=problem, seed=3)
    kwargs = SMALL_PARAMS.as_kwargs()
    runs = []
    for _ in range(2):
        tracer = RecordingTracer()
        solver.solve(tracer=tracer, **kwargs)
        result = solver.get_tabu_result()
        runs.append((result.best_permutation, result.nb_iterations, tracer.accepted))
    assert runs[0][1] > 0
    assert runs[0] == runs[1]


def test_best_is_monotone(improvable_problem):
    recorder = BestFitnessRecorder()
    tracer = RecordingTracer()
    solver = TabuBinPackSolver(problem=improvable_problem, seed=0)
    res = solver.solve(callbacks=[recorder], tracer=tracer, **SMALL_PARAMS.as_kwargs())
    best = recorder.best_fitnesses
    assert len(best) == solver.nb_iterations > 0
    assert all(best[i + 1] <= best[i] for i in range(len(best) - 1))
    assert len(tracer.new_bests) > 0
    fits = [fit for _, fit in res]
    assert fits[0] == (3, 15)
    assert fits[-1] == (2, 0)
    assert all(fits[i + 1] < fits[i] for i in range(len(fits) - 1))
    assert [fit for _, fit in tracer.new_bests] == fits[1:]
    assert res.get_best_solution_fit()[1] == solver.best_fitness
    assert improvable_problem.satisfy(res.get_best_solution())
    # reaching the lower bound ends the search
    assert solver.nb_iterations == tracer.new_bests[-1][0]
    assert solver.status_solver == StatusSolver.OPTIMAL


def test_runs_all_iterations_when_lower_bound_unreachable(not_tight_problem):
    params = TabuParams(nb_iteration_max=7, neighborhood_samples=5)
    result = tabu_search(not_tight_problem, seed=0, params=params)
    assert result.nb_iterations == 7
    assert result.best_nb_bins == 3


def test_stops_at_lower_bound():
    problem = BinPackProblem.from_sizes(sizes=[5, 5, 5, 5], capacity_bin=10)
    solver = TabuBinPackSolver(problem=problem, seed=0)
    solver.solve(nb_iteration_max=100)
    assert solver.nb_iterations == 0
    assert solver.status_solver == StatusSolver.OPTIMAL
    assert solver.is_optimal()
    assert solver.get_tabu_result().best_nb_bins == 2


def test_status_when_not_proven(problem):
    solver = TabuBinPackSolver(problem=problem, seed=0)
    solver.solve(nb_iteration_max=3, neighborhood_samples=5)
    assert solver.status_solver == StatusSolver.SATISFIED


def test_zero_time_limit(problem):
    params = TabuParams(time_limit=0.0)
    result = tabu_search(problem, seed=0, params=params)
    assert result.nb_iterations == 0
    assert result.best_nb_bins == 4


def test_negative_time_limit(problem):
    solver = TabuBinPackSolver(problem=problem, seed=0)
    with pytest.raises(ValueError):
        solver.solve(time_limit=-1.0)


def test_invalid_hyperparameter(problem):
    solver = TabuBinPackSolver(problem=problem, seed=0)
    with pytest.raises(ValueError):
        solver.solve(tabu_tenure=-1)


def test_tabu_result_needs_solve(problem):
    solver = TabuBinPackSolver(problem=problem, seed=0)
    with pytest.raises(RuntimeError):
        solver.get_tabu_result()


def test_initial_solution_sorted_by_size(problem):
    solver = TabuBinPackSolver(problem=problem, seed=0)
    sol = solver.build_initial_solution()
    sizes = [problem.sizes[i] for i in sol.permutation]
    assert sizes == sorted(problem.sizes, reverse=True)


def test_warm_start(problem):
    solver = TabuBinPackSolver(problem=problem, seed=0)
    solver.set_warm_start(problem.get_dummy_solution())
    res = solver.solve(nb_iteration_max=0)
    assert res[0][0].permutation == list(range(problem.nb_items))
    initial = BinPackSolution(problem=problem, permutation=[6, 5, 4, 3, 2, 1, 0])
    res = solver.solve(initial_variable=initial, nb_iteration_max=0)
    assert res[0][0].permutation == [6, 5, 4, 3, 2, 1, 0]


def test_tabu_and_aspiration_rules(improvable_problem):
    tracer = RecordingTracer()
    solver = TabuBinPackSolver(problem=improvable_problem, seed=5)
    solver.solve(tracer=tracer, **SMALL_PARAMS.as_kwargs())
    assert solver.nb_iterations > 0
    assert len(tracer.candidates) > 0
    for key, fitness, is_tabu, aspiration, allowed in tracer.candidates:
        assert allowed == (not is_tabu or aspiration)
        assert aspiration == (fitness < (3, 15))
    # a move is accepted at most once per iteration
    iterations = [iteration for iteration, _, _ in tracer.accepted]
    assert len(iterations) == len(set(iterations))
    assert len(tracer.new_bests) > 0
    for iteration, fitness in tracer.new_bests:
        assert iteration in iterations


def test_recent_moves_are_tabu(not_tight_problem):
    tracer = RecordingTracer()
    solver = TabuBinPackSolver(problem=not_tight_problem, seed=5)
    solver.solve(
        tracer=tracer, nb_iteration_max=20, neighborhood_samples=10, tabu_tenure=3
    )
    assert any(is_tabu for _, _, is_tabu, _, _ in tracer.candidates)
    # 3 bins is optimal here: nothing ever beats the best
    assert not any(aspiration for _, _, _, aspiration, _ in tracer.candidates)
    assert max(tabu_size for _, tabu_size in tracer.iteration_starts) <= 3


def test_zero_tenure_never_forbids(not_tight_problem):
    tracer = RecordingTracer()
    solver = TabuBinPackSolver(problem=not_tight_problem, seed=5)
    solver.solve(
        tracer=tracer, nb_iteration_max=20, neighborhood_samples=10, tabu_tenure=0
    )
    assert solver.nb_iterations == 20
    assert len(tracer.candidates) > 0
    assert not any(is_tabu for _, _, is_tabu, _, _ in tracer.candidates)
    assert all(tabu_size == 0 for _, tabu_size in tracer.iteration_starts)


def test_time_limit_is_reported_to_the_tracer(problem):
    tracer = RecordingTracer()
    solver = TabuBinPackSolver(problem=problem, seed=0)
    solver.solve(tracer=tracer, time_limit=0.0, nb_iteration_max=10)
    assert solver.nb_iterations == 0
    assert tracer.time_limits == [1]


def test_diversification(problem):
    # the example is never improved: once stagnating, every iteration restarts
    tracer = RecordingTracer()
    solver = TabuBinPackSolver(problem=problem, seed=0)
    solver.solve(
        tracer=tracer,
        nb_iteration_max=6,
        neighborhood_samples=5,
        tabu_tenure=4,
        stagnation_limit=3,
    )
    assert tracer.restarts == [3, 4, 5, 6]
    assert solver.restart_handler.nb_restarts == 4
    tabu_sizes = dict(tracer.iteration_starts)
    assert all(tabu_sizes[iteration] == 0 for iteration in tracer.restarts)
    assert tabu_sizes[1] == 0


def test_swap_probability(problem):
    solver = TabuBinPackSolver(problem=problem, seed=0, swap_probability=1.0)
    assert solver.mutator.swap_probability == 1.0
    solver.solve(nb_iteration_max=1)
    assert solver.mutator.swap_probability == 1.0
    solver.solve(nb_iteration_max=1, swap_probability=0.0)
    assert solver.mutator.swap_probability == 0.0


def test_bounds(not_tight_problem):
    solver = TabuBinPackSolver(problem=not_tight_problem, seed=0)
    assert solver.get_current_best_internal_objective_value() is None
    assert solver.get_current_absolute_gap() is None
    solver.solve(nb_iteration_max=2)
    assert solver.get_current_best_internal_objective_bound() == 2.0
    assert solver.get_current_best_internal_objective_value() == 3.0
