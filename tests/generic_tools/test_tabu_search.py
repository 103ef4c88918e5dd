#  Copyright (c) 2025 AIRBUS and its affiliates.
#  This source code is licensed under the MIT license found in the
#  LICENSE file in the root directory of this source tree.

from dataclasses import dataclass

import pytest

from binpack_tabu.generic_tools.do_mutation import LocalMove, Mutation
from binpack_tabu.generic_tools.do_problem import (
    ObjectiveDoc,
    ObjectiveRegister,
    Problem,
    Solution,
)
from binpack_tabu.generic_tools.do_solver import StatusSolver
from binpack_tabu.generic_tools.ls.tabu_search import TabuSearch, TabuSearchTracer


class ValueSolution(Solution):
    def __init__(self, problem, value):
        super().__init__(problem=problem)
        self.value = value

    def copy(self):
        return ValueSolution(problem=self.problem, value=self.value)


class ValueProblem(Problem):
    """Minimize a single number carried by the solution."""

    def evaluate(self, variable):
        return {"value": variable.value}

    def satisfy(self, variable):
        return True

    def get_solution_type(self):
        return ValueSolution

    def get_objective_register(self):
        return ObjectiveRegister(
            dict_objective_to_doc={"value": ObjectiveDoc(default_weight=1)}
        )


@dataclass(frozen=True)
class ScriptedMove(LocalMove):
    name: str
    value: int

    @property
    def key(self):
        return self.name

    def apply_local_move(self, solution):
        return ValueSolution(problem=solution.problem, value=self.value)


class ScriptedMutation(Mutation):
    """Return the scripted moves in order, whatever the current solution."""

    def __init__(self, problem, script):
        super().__init__(problem=problem)
        self.moves = [ScriptedMove(name, value) for name, value in script]

    def sample_local_move(self, solution):
        return self.moves.pop(0)


class RecordingTracer(TabuSearchTracer):
    def __init__(self):
        self.candidates = []
        self.accepted = []
        self.new_bests = []
        self.no_admissible = []
        self.time_limits = []

    def on_candidate(
        self, sample, move, candidate, fitness, is_tabu, aspiration, allowed
    ):
        self.candidates.append((move.key, fitness, is_tabu, aspiration, allowed))

    def on_move_accepted(self, iteration, move, solution, fitness):
        self.accepted.append((iteration, move.key, fitness))

    def on_new_best(self, iteration, solution, fitness):
        self.new_bests.append((iteration, fitness))

    def on_no_admissible_candidate(self, iteration):
        self.no_admissible.append(iteration)

    def on_time_limit(self, iteration):
        self.time_limits.append(iteration)


@pytest.fixture
def problem():
    return ValueProblem()


def build_solver(problem, script):
    return TabuSearch(
        problem=problem, mutator=ScriptedMutation(problem=problem, script=script)
    )


def test_tabu_move_allowed_by_aspiration_only(problem):
    # 10 -> 12 -> 11 -> 5: move "a" is tabu when drawn again, but leads to a
    # new best; move "b" is tabu again afterwards and worse than the best.
    solver = build_solver(problem, [("a", 12), ("b", 11), ("a", 5), ("b", 20)])
    tracer = RecordingTracer()
    res = solver.solve(
        initial_variable=ValueSolution(problem, 10),
        nb_iteration_max=4,
        neighborhood_samples=1,
        tabu_tenure=5,
        tracer=tracer,
    )
    assert tracer.candidates == [
        ("a", (12,), False, False, True),
        ("b", (11,), False, False, True),
        ("a", (5,), True, True, True),
        ("b", (20,), True, False, False),
    ]
    assert [it for it, _, _ in tracer.accepted] == [1, 2, 3]
    assert tracer.new_bests == [(3, (5,))]
    assert tracer.no_admissible == [4]
    assert solver.nb_iterations == 4
    assert solver.best_iteration == 3
    assert solver.best_fitness == (5,)
    assert [fit for _, fit in res] == [(10,), (5,)]
    assert res.get_best_solution().value == 5
    assert solver.status_solver == StatusSolver.SATISFIED


def test_worse_move_is_accepted_when_nothing_else_is_admissible(problem):
    solver = build_solver(problem, [("a", 15)])
    tracer = RecordingTracer()
    solver.solve(
        initial_variable=ValueSolution(problem, 10),
        nb_iteration_max=1,
        neighborhood_samples=1,
        tabu_tenure=5,
        tracer=tracer,
    )
    assert tracer.accepted == [(1, "a", (15,))]
    assert tracer.new_bests == []
    assert solver.best_fitness == (10,)


def test_time_limit_hook(problem):
    solver = build_solver(problem, [])
    tracer = RecordingTracer()
    res = solver.solve(
        initial_variable=ValueSolution(problem, 10),
        nb_iteration_max=4,
        time_limit=0.0,
        tracer=tracer,
    )
    assert tracer.time_limits == [1]
    assert tracer.candidates == []
    assert solver.nb_iterations == 0
    assert len(res) == 1
