#  Copyright (c) 2025 AIRBUS and its affiliates.
#  This source code is licensed under the MIT license found in the
#  LICENSE file in the root directory of this source tree.

import logging

import matplotlib.pyplot as plt

from binpack_tabu.binpack.generator import example_instance
from binpack_tabu.binpack.packing import validate_packing
from binpack_tabu.binpack.plot import plot_packing
from binpack_tabu.binpack.solvers.exact import exact_min_bins
from binpack_tabu.binpack.solvers.tabu import (
    TabuBinPackSolver,
    TabuParams,
    tabu_search,
)
from binpack_tabu.generic_tools.callbacks.early_stoppers import TimerStopper
from binpack_tabu.generic_tools.callbacks.loggers import ObjectiveLogger

logging.basicConfig(level=logging.INFO)


def run_tabu_example():
    problem = example_instance()
    params = TabuParams(
        nb_iteration_max=2000,
        neighborhood_samples=150,
        tabu_tenure=20,
        stagnation_limit=400,
    )
    res = tabu_search(problem, seed=0, params=params)
    print(
        f"Instance: {problem.name} (capacity={problem.capacity_bin}, n={problem.nb_items})"
    )
    print(f"Exact optimum (small-instance check): {exact_min_bins(problem)} bins")
    print(
        f"Best found: {res.best_nb_bins} bins (unused={res.best_unused})  "
        f"iters={res.nb_iterations}  time(s)={res.elapsed:.4f}"
    )
    validate_packing(problem, res.best_packing)
    print("Bins (item_id:size):")
    for bin_, load in zip(res.best_packing.bins, res.best_packing.bin_loads):
        items = ", ".join(f"{i + 1}:{problem.sizes[i]}" for i in bin_)
        print(f"  load={load:3}  [{items}]")
    plot_packing(problem, res.best_packing)
    plt.show()


def run_tabu_solver_api():
    problem = example_instance()
    solver = TabuBinPackSolver(problem=problem, seed=42)
    res = solver.solve(
        nb_iteration_max=1000,
        tabu_tenure=10,
        callbacks=[TimerStopper(total_seconds=10), ObjectiveLogger()],
    )
    sol, fit = res.get_best_solution_fit()
    print("Status", solver.status_solver)
    print(problem.evaluate(sol), fit)
    print(problem.satisfy(sol))


if __name__ == "__main__":
    run_tabu_example()
