#  Copyright (c) 2025 AIRBUS and its affiliates.
#  This source code is licensed under the MIT license found in the
#  LICENSE file in the root directory of this source tree.

import logging

from binpack_tabu.binpack.generator import synthetic_instance
from binpack_tabu.binpack.solvers.greedy import GreedyBinPackSolver

logging.basicConfig(level=logging.INFO)


def run_greedy():
    problem = synthetic_instance("synthetic-120", 120, 150, 10, 100, seed=2)
    solver = GreedyBinPackSolver(problem=problem)
    res = solver.solve()
    sol = res[-1][0]
    print(problem.evaluate(sol))
    print(problem.satisfy(sol))
    print("lower bound", problem.lower_bound_nb_bins())


if __name__ == "__main__":
    run_greedy()
