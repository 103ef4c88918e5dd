#  Copyright (c) 2025 AIRBUS and its affiliates.
#  This source code is licensed under the MIT license found in the
#  LICENSE file in the root directory of this source tree.

from binpack_tabu.binpack.generator import example_instance
from binpack_tabu.binpack.solvers.tabu import TabuParams
from binpack_tabu.binpack.trace import tabu_search_trace


def run_trace():
    problem = example_instance()
    params = TabuParams(
        nb_iteration_max=30,
        neighborhood_samples=12,
        tabu_tenure=7,
        stagnation_limit=10,
    )
    tabu_search_trace(problem, seed=0, params=params, show_packings=True)


if __name__ == "__main__":
    run_trace()
