"""Base classes shared by the solvers."""

#  Copyright (c) 2025 AIRBUS and its affiliates.
#  This source code is licensed under the MIT license found in the
#  LICENSE file in the root directory of this source tree.
from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Optional

from binpack_tabu.generic_tools.callbacks.callback import Callback
from binpack_tabu.generic_tools.do_problem import (
    ParamsObjectiveFunction,
    Problem,
    Solution,
    build_aggreg_function_and_params_objective,
)
from binpack_tabu.generic_tools.hyperparameters.hyperparametrizable import (
    Hyperparametrizable,
)
from binpack_tabu.generic_tools.result_storage.result_storage import (
    ResultStorage,
    fitness_class,
)


class StatusSolver(Enum):
    UNKNOWN = "UNKNOWN"
    SATISFIED = "SATISFIED"
    """A feasible solution was found, without optimality proof."""
    OPTIMAL = "OPTIMAL"


class SolverDO(Hyperparametrizable, ABC):
    """Solver of a `Problem`.

    The fitness used by the solver is derived from the problem objective
    register, unless `params_objective_function` overrides it. After
    `solve()`, `status_solver` tells whether the best solution is proven
    optimal.

    """

    problem: Problem
    status_solver: StatusSolver = StatusSolver.UNKNOWN

    def __init__(
        self,
        problem: Problem,
        params_objective_function: Optional[ParamsObjectiveFunction] = None,
        **kwargs: Any,
    ):
        self.problem = problem
        (
            self.aggreg_from_sol,
            self.params_objective_function,
        ) = build_aggreg_function_and_params_objective(
            problem=problem, params_objective_function=params_objective_function
        )

    @abstractmethod
    def solve(
        self, callbacks: Optional[list[Callback]] = None, **kwargs: Any
    ) -> ResultStorage:
        """Run the solver.

        Args:
            callbacks: notified at the start, after each step and at the end of the run
            **kwargs: hyperparameters of the solver

        Returns:
            the solutions found, the best one according to the solver fitness
            being given by `get_best_solution()`.

        """
        ...

    def create_result_storage(
        self, list_solution_fits: Optional[list[tuple[Solution, fitness_class]]] = None
    ) -> ResultStorage:
        return ResultStorage(list_solution_fits=list_solution_fits)

    def is_better(self, fitness: fitness_class, other: fitness_class) -> bool:
        """Strict improvement of `fitness` over `other`, fitnesses being minimized."""
        return fitness < other

    def is_optimal(self) -> Optional[bool]:
        """Whether the last solve proved optimality, None if unknown."""
        if self.status_solver == StatusSolver.UNKNOWN:
            return None
        return self.status_solver == StatusSolver.OPTIMAL


class WarmstartMixin(ABC):
    """Solver able to start from a given solution."""

    @abstractmethod
    def set_warm_start(self, solution: Solution) -> None: ...


class BoundsProviderMixin(ABC):
    """Solver knowing a bound on its objective while running.

    Values are expressed on the main objective, e.g. the number of bins.

    """

    @abstractmethod
    def get_current_best_internal_objective_bound(self) -> Optional[float]: ...

    @abstractmethod
    def get_current_best_internal_objective_value(self) -> Optional[float]: ...

    def get_current_absolute_gap(self) -> Optional[float]:
        bound = self.get_current_best_internal_objective_bound()
        value = self.get_current_best_internal_objective_value()
        if bound is None or value is None:
            return None
        return abs(value - bound)
