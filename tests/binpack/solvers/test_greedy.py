#  Copyright (c) 2025 AIRBUS and its affiliates.
#  This source code is licensed under the MIT license found in the
#  LICENSE file in the root directory of this source tree.

from binpack_tabu.binpack.problem import BinPackProblem
from binpack_tabu.binpack.solvers.greedy import (
    GreedyBinPackSolver,
    decreasing_size_order,
)
from binpack_tabu.generic_tools.do_solver import StatusSolver


def test_greedy(problem):
    solver = GreedyBinPackSolver(problem=problem)
    res = solver.solve()
    sol = res[-1][0]
    assert problem.satisfy(sol)
    assert problem.evaluate(sol) == {"nb_bins": 4, "unused_capacity": 60}
    assert res[-1][1] == (4, 60)
    assert solver.status_solver == StatusSolver.SATISFIED
    assert not solver.is_optimal()


def test_greedy_at_lower_bound():
    problem = BinPackProblem.from_sizes(sizes=[5, 5, 5, 5], capacity_bin=10)
    solver = GreedyBinPackSolver(problem=problem)
    sol = solver.solve().get_best_solution()
    assert sol.packing.nb_bins == 2
    assert solver.is_optimal()


def test_decreasing_size_order():
    problem = BinPackProblem.from_sizes(sizes=[3, 8, 3, 9], capacity_bin=10)
    assert decreasing_size_order(problem) == [3, 1, 0, 2]
