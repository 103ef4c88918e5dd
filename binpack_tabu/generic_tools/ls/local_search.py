#  Copyright (c) 2025 AIRBUS and its affiliates.
#  This source code is licensed under the MIT license found in the
#  LICENSE file in the root directory of this source tree.

from __future__ import annotations

from typing import Optional

from binpack_tabu.generic_tools.do_problem import Solution
from binpack_tabu.generic_tools.result_storage.result_storage import fitness_class
from binpack_tabu.generic_tools.rng import XorShift64


class RestartHandler:
    """Keep track of the best solution of a local search and decide when to restart.

    The base handler never restarts.

    """

    solution_best: Optional[Solution]
    best_fitness: Optional[fitness_class]

    def __init__(self) -> None:
        self.start_search()

    def start_search(
        self,
        solution: Optional[Solution] = None,
        fitness: Optional[fitness_class] = None,
    ) -> None:
        self.solution_best = None if solution is None else solution.copy()
        self.best_fitness = fitness
        self.nb_iteration = 0
        self.last_global_improve_iteration = 0
        self.nb_restarts = 0

    def update(
        self,
        iteration: int,
        nv: Solution,
        fitness: fitness_class,
        improved_global: bool,
    ) -> None:
        self.nb_iteration = iteration
        if improved_global:
            self.last_global_improve_iteration = iteration
            self.best_fitness = fitness
            self.solution_best = nv.copy()

    def nb_iteration_no_global_improve(self, iteration: int) -> int:
        return max(iteration - self.last_global_improve_iteration, 0)

    def should_restart(self, iteration: int) -> bool:
        return False

    def restart(self, cur_solution: Solution) -> Solution:
        return cur_solution


class RestartHandlerLimit(RestartHandler):
    """Restart from the best solution once the search stagnates.

    Stagnation is measured from the last global improvement and is not reset
    by a restart: as long as no improvement is found, every further iteration
    restarts again.

    """

    def __init__(self, nb_iteration_no_improvement: int):
        self.nb_iteration_no_improvement = nb_iteration_no_improvement
        super().__init__()

    def should_restart(self, iteration: int) -> bool:
        return (
            self.nb_iteration_no_global_improve(iteration)
            >= self.nb_iteration_no_improvement
        )

    def restart(self, cur_solution: Solution) -> Solution:
        self.nb_restarts += 1
        return self.solution_best.copy()


class RestartHandlerShuffle(RestartHandlerLimit):
    """Restart from a random shuffle of the best solution permutation."""

    def __init__(
        self,
        nb_iteration_no_improvement: int,
        rng: XorShift64,
        attribute: str = "permutation",
    ):
        super().__init__(nb_iteration_no_improvement=nb_iteration_no_improvement)
        self.rng = rng
        self.attribute = attribute

    def restart(self, cur_solution: Solution) -> Solution:
        self.nb_restarts += 1
        permutation = list(getattr(self.solution_best, self.attribute))
        self.rng.shuffle(permutation)
        sol = self.solution_best.lazy_copy()
        setattr(sol, self.attribute, permutation)
        return sol
