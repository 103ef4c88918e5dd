#  Copyright (c) 2025 AIRBUS and its affiliates.
#  This source code is licensed under the MIT license found in the
#  LICENSE file in the root directory of this source tree.
from typing import Any, Optional

from binpack_tabu.binpack.problem import BinPackProblem, BinPackSolution
from binpack_tabu.generic_tools.callbacks.callback import Callback, CallbackList
from binpack_tabu.generic_tools.do_solver import SolverDO, StatusSolver
from binpack_tabu.generic_tools.result_storage.result_storage import ResultStorage


def decreasing_size_order(problem: BinPackProblem) -> list[int]:
    """Items sorted by decreasing size, smaller index first on ties."""
    return sorted(range(problem.nb_items), key=lambda i: -problem.sizes[i])


class GreedyBinPackSolver(SolverDO):
    """Best-fit decreasing, followed by the consolidation pass."""

    problem: BinPackProblem

    def __init__(self, problem: BinPackProblem, **kwargs: Any):
        super().__init__(problem, **kwargs)

    def solve(
        self, callbacks: Optional[list[Callback]] = None, **kwargs: Any
    ) -> ResultStorage:
        callback = CallbackList(callbacks=callbacks)
        callback.on_solve_start(self)
        sol = BinPackSolution(
            problem=self.problem, permutation=decreasing_size_order(self.problem)
        )
        fit = self.aggreg_from_sol(sol)
        res = self.create_result_storage([(sol, fit)])
        if sol.packing.nb_bins == self.problem.lower_bound_nb_bins():
            self.status_solver = StatusSolver.OPTIMAL
        else:
            self.status_solver = StatusSolver.SATISFIED
        callback.on_solve_end(res, self)
        return res
