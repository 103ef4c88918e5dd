#  Copyright (c) 2025 AIRBUS and its affiliates.
#  This source code is licensed under the MIT license found in the
#  LICENSE file in the root directory of this source tree.

import logging
import sys

from binpack_tabu.binpack.experiments import compare_against_exact
from binpack_tabu.binpack.generator import example_instance, synthetic_instance
from binpack_tabu.binpack.reference import exact_reference
from binpack_tabu.binpack.solvers.exact import BranchAndBoundBinPackSolver
from binpack_tabu.binpack.solvers.tabu import TabuParams

logging.basicConfig(level=logging.INFO)


def run_branch_and_bound():
    problem = synthetic_instance("synthetic-20", 20, 100, 10, 60, seed=7)
    solver = BranchAndBoundBinPackSolver(problem=problem)
    sol = solver.solve().get_best_solution()
    print("Status", solver.status_solver, "nodes", solver.nb_nodes)
    print(problem.evaluate(sol))
    print(exact_reference(problem))


def run_compare_exact():
    params = TabuParams(nb_iteration_max=500, time_limit=2.0)
    for problem in [
        example_instance(),
        synthetic_instance("synthetic-25", 25, 100, 10, 60, seed=11),
    ]:
        compare_against_exact(problem, runs=5, seed0=0, params=params, stream=sys.stdout)


if __name__ == "__main__":
    run_branch_and_bound()
    run_compare_exact()
