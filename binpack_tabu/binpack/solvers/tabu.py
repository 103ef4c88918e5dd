#  Copyright (c) 2025 AIRBUS and its affiliates.
#  This source code is licensed under the MIT license found in the
#  LICENSE file in the root directory of this source tree.

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Optional

from binpack_tabu.binpack.packing import Packing
from binpack_tabu.binpack.problem import BinPackProblem, BinPackSolution
from binpack_tabu.generic_tools.callbacks.callback import Callback
from binpack_tabu.generic_tools.do_problem import ParamsObjectiveFunction
from binpack_tabu.generic_tools.do_solver import BoundsProviderMixin
from binpack_tabu.generic_tools.hyperparameters.hyperparameter import (
    FloatHyperparameter,
    IntegerHyperparameter,
)
from binpack_tabu.generic_tools.ls.local_search import RestartHandlerShuffle
from binpack_tabu.generic_tools.ls.tabu_search import TabuSearch, TabuSearchTracer
from binpack_tabu.generic_tools.mutations.permutation_mutations import (
    PermutationSwapInsertMutation,
)
from binpack_tabu.generic_tools.result_storage.result_storage import (
    ResultStorage,
    fitness_class,
)
from binpack_tabu.generic_tools.rng import XorShift64

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TabuParams:
    """Settings of a tabu search run on bin packing."""

    nb_iteration_max: int = 5000
    neighborhood_samples: int = 200
    tabu_tenure: int = 25
    stagnation_limit: int = 600
    time_limit: Optional[float] = None
    """Wall-clock limit in seconds, None for no limit."""

    def as_kwargs(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class TabuResult:
    best_permutation: list[int]
    best_packing: Packing
    best_nb_bins: int
    best_unused: int
    elapsed: float
    """Wall-clock duration of the search, in seconds."""
    nb_iterations: int


class TabuBinPackSolver(TabuSearch, BoundsProviderMixin):
    """Tabu search over item orders, each order decoded by best-fit and consolidation.

    The search starts from the items sorted by decreasing size, ties broken by
    one random draw per item. Moves swap two items of the order or move one
    item to another position. After `stagnation_limit` iterations without
    improving the best packing, the search restarts from a random shuffle of
    the best order. It stops early when the best packing reaches the capacity
    lower bound, which proves its optimality.

    All the randomness comes from a XorShift64 generator reseeded at each
    `solve()`, so that a seed always gives the same search.

    """

    problem: BinPackProblem
    hyperparameters = TabuSearch.hyperparameters + [
        IntegerHyperparameter(name="stagnation_limit", low=0, default=600),
        FloatHyperparameter(name="swap_probability", low=0.0, high=1.0, default=0.6),
    ]

    def __init__(
        self,
        problem: BinPackProblem,
        seed: int = 0,
        params_objective_function: Optional[ParamsObjectiveFunction] = None,
        **kwargs: Any,
    ):
        kwargs = self.complete_with_default_hyperparameters(
            kwargs, names=["swap_probability"]
        )
        self.seed = seed
        self.rng = XorShift64(seed)
        mutator = PermutationSwapInsertMutation(
            problem=problem,
            rng=self.rng,
            swap_probability=kwargs["swap_probability"],
        )
        super().__init__(
            problem=problem,
            mutator=mutator,
            params_objective_function=params_objective_function,
        )
        self.lower_bound = problem.lower_bound_nb_bins()

    def build_initial_solution(self) -> BinPackSolution:
        sizes = self.problem.sizes
        tiebreak = [self.rng.next_u64() for _ in range(self.problem.nb_items)]
        order = sorted(
            range(self.problem.nb_items), key=lambda i: (-sizes[i], tiebreak[i])
        )
        return BinPackSolution(problem=self.problem, permutation=order)

    def is_proven_optimal(
        self, solution: BinPackSolution, fitness: fitness_class
    ) -> bool:
        return solution.packing.nb_bins <= self.lower_bound

    def solve(
        self,
        initial_variable: Optional[BinPackSolution] = None,
        time_limit: Optional[float] = None,
        callbacks: Optional[list[Callback]] = None,
        tracer: Optional[TabuSearchTracer] = None,
        **kwargs: Any,
    ) -> ResultStorage:
        if kwargs.get("swap_probability") is None:
            kwargs["swap_probability"] = self.mutator.swap_probability
        kwargs = self.complete_with_default_hyperparameters(kwargs)
        self.mutator.swap_probability = kwargs["swap_probability"]
        self.rng.seed(self.seed)
        self.restart_handler = RestartHandlerShuffle(
            nb_iteration_no_improvement=kwargs["stagnation_limit"], rng=self.rng
        )
        return super().solve(
            initial_variable=initial_variable,
            time_limit=time_limit,
            callbacks=callbacks,
            tracer=tracer,
            **kwargs,
        )

    def get_current_best_internal_objective_bound(self) -> Optional[float]:
        return float(self.lower_bound)

    def get_current_best_internal_objective_value(self) -> Optional[float]:
        if self.best_solution is None:
            return None
        return float(self.best_solution.packing.nb_bins)

    def get_tabu_result(self) -> TabuResult:
        """Summary of the last call to `solve()`."""
        if self.best_solution is None:
            raise RuntimeError("solve() must be called before get_tabu_result()")
        packing = self.best_solution.packing
        return TabuResult(
            best_permutation=list(self.best_solution.permutation),
            best_packing=packing,
            best_nb_bins=packing.nb_bins,
            best_unused=packing.unused_capacity,
            elapsed=self.elapsed_time,
            nb_iterations=self.nb_iterations,
        )


def tabu_search(
    problem: BinPackProblem,
    seed: int = 0,
    params: Optional[TabuParams] = None,
    callbacks: Optional[list[Callback]] = None,
    tracer: Optional[TabuSearchTracer] = None,
) -> TabuResult:
    """Run a tabu search on the problem and summarize its best packing."""
    if params is None:
        params = TabuParams()
    solver = TabuBinPackSolver(problem=problem, seed=seed)
    solver.solve(callbacks=callbacks, tracer=tracer, **params.as_kwargs())
    result = solver.get_tabu_result()
    logger.info(
        f"{problem.name}: seed={seed} bins={result.best_nb_bins} "
        f"unused={result.best_unused} iters={result.nb_iterations} "
        f"time={result.elapsed:.4f}s"
    )
    return result
