"""Exact branch-and-bound for small bin packing instances."""

#  Copyright (c) 2025 AIRBUS and its affiliates.
#  This source code is licensed under the MIT license found in the
#  LICENSE file in the root directory of this source tree.

from __future__ import annotations

import logging
from typing import Any, Optional

from binpack_tabu.binpack.packing import Packing, lower_bound_nb_bins
from binpack_tabu.binpack.problem import BinPackProblem, BinPackSolution
from binpack_tabu.generic_tools.callbacks.callback import Callback, CallbackList
from binpack_tabu.generic_tools.do_solver import SolverDO, StatusSolver
from binpack_tabu.generic_tools.exceptions import (
    InfeasibleProblemError,
    SolveEarlyStop,
)
from binpack_tabu.generic_tools.result_storage.result_storage import ResultStorage

logger = logging.getLogger(__name__)


def check_feasibility(problem: BinPackProblem) -> None:
    for item in problem.list_items:
        if item.weight > problem.capacity_bin:
            raise InfeasibleProblemError(
                "Instance contains an item larger than bin capacity: "
                f"item {item.index} has size {item.weight} > capacity {problem.capacity_bin}."
            )


class BranchAndBoundBinPackSolver(SolverDO):
    """Depth-first branch-and-bound giving the minimal number of bins.

    Items are assigned from the largest to the smallest. At each node the
    current item goes into every open bin with enough room (bins with equal
    loads are symmetric, only the first one is tried), then into a new bin.
    A branch is cut as soon as it uses as many bins as the best packing found.

    Exponential in the worst case: meant for instances of a few dozens items.

    """

    problem: BinPackProblem

    def __init__(self, problem: BinPackProblem, **kwargs: Any):
        super().__init__(problem, **kwargs)
        self.nb_nodes = 0

    def solve(
        self, callbacks: Optional[list[Callback]] = None, **kwargs: Any
    ) -> ResultStorage:
        check_feasibility(self.problem)
        callbacks_list = CallbackList(callbacks=callbacks)
        callbacks_list.on_solve_start(solver=self)

        sizes = self.problem.sizes
        capacity = self.problem.capacity_bin
        order = sorted(range(self.problem.nb_items), key=lambda i: -sizes[i])
        lower_bound = lower_bound_nb_bins(self.problem)
        res = self.create_result_storage()
        # one item per bin is always feasible
        self._best_bins = [[item] for item in order]
        self._store_incumbent(res)
        bins: list[list[int]] = []
        loads: list[int] = []
        self.nb_nodes = 0

        def dfs(k: int) -> None:
            self.nb_nodes += 1
            if k == len(order):
                if len(bins) < len(self._best_bins):
                    self._best_bins = [list(bin_) for bin_ in bins]
                    self._store_incumbent(res)
                    if callbacks_list.on_step_end(
                        step=len(res), res=res, solver=self
                    ):
                        raise SolveEarlyStop("Stopped by a callback")
                return
            if len(bins) >= len(self._best_bins) or len(self._best_bins) == lower_bound:
                return
            item = order[k]
            size = sizes[item]
            tried_loads = set()
            for index_bin in range(len(bins)):
                load = loads[index_bin]
                if load in tried_loads:
                    continue
                if load + size <= capacity:
                    tried_loads.add(load)
                    loads[index_bin] += size
                    bins[index_bin].append(item)
                    dfs(k + 1)
                    bins[index_bin].pop()
                    loads[index_bin] -= size
            bins.append([item])
            loads.append(size)
            dfs(k + 1)
            bins.pop()
            loads.pop()

        try:
            dfs(0)
        except SolveEarlyStop as e:
            logger.info(f"{e}, optimality not proven")
            self.status_solver = StatusSolver.SATISFIED
        else:
            self.status_solver = StatusSolver.OPTIMAL
        logger.debug(
            f"Branch-and-bound: {len(self._best_bins)} bins, {self.nb_nodes} nodes explored"
        )
        callbacks_list.on_solve_end(res=res, solver=self)
        return res

    def _store_incumbent(self, res: ResultStorage) -> None:
        packing = Packing.from_bins(self.problem, self._best_bins)
        sol = BinPackSolution(problem=self.problem, packing=packing)
        res.append((sol, self.aggreg_from_sol(sol)))


def exact_min_bins(problem: BinPackProblem) -> int:
    """Minimal number of bins of the problem.

    Raises:
        InfeasibleProblemError: if an item is larger than the bin capacity.

    """
    solver = BranchAndBoundBinPackSolver(problem=problem)
    sol = solver.solve().get_best_solution()
    return sol.packing.nb_bins
