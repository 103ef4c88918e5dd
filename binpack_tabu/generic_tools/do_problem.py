"""Problem and solution interfaces, and how their KPIs become a fitness.

Fitnesses are tuples of weighted KPIs, taken in the order of the objective
register, minimized and compared lexicographically.
"""

#  Copyright (c) 2025 AIRBUS and its affiliates.
#  This source code is licensed under the MIT license found in the
#  LICENSE file in the root directory of this source tree.

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

LexicoFitness = tuple[float, ...]
"""Fitness compared lexicographically, first component first."""


@dataclass(frozen=True)
class ObjectiveDoc:
    default_weight: float


@dataclass
class ObjectiveRegister:
    """Default objective of a problem.

    Attributes:
        dict_objective_to_doc: one entry per key of `Problem.evaluate()` output,
            the most important KPI first.

    """

    dict_objective_to_doc: dict[str, ObjectiveDoc]

    def get_objective_names(self) -> list[str]:
        return list(self.dict_objective_to_doc)

    def get_list_objective_and_default_weight(self) -> tuple[list[str], list[float]]:
        names = self.get_objective_names()
        return names, [self.dict_objective_to_doc[name].default_weight for name in names]


class Solution(ABC):
    def __init__(self, problem: Problem):
        self.problem = problem

    @abstractmethod
    def copy(self) -> Solution:
        """Independent copy: modifying the copy in place leaves the original untouched."""
        ...

    def lazy_copy(self) -> Solution:
        """Copy that may share mutable attributes with the original.

        Meant for moves that assign a fresh attribute to the copy right away.

        """
        return self.copy()


class Problem(ABC):
    @abstractmethod
    def evaluate(self, variable: Solution) -> dict[str, float]:
        """KPIs of the solution, keyed as in the objective register."""
        ...

    @abstractmethod
    def satisfy(self, variable: Solution) -> bool:
        """Tell whether the solution respects every constraint of the problem."""
        ...

    @abstractmethod
    def get_solution_type(self) -> type[Solution]: ...

    @abstractmethod
    def get_objective_register(self) -> ObjectiveRegister: ...

    def get_objective_names(self) -> list[str]:
        return self.get_objective_register().get_objective_names()

    def get_dummy_solution(self) -> Solution:
        """Trivial solution, when the problem has one."""
        raise NotImplementedError()


@dataclass
class ParamsObjectiveFunction:
    """Objective actually used by a solver, possibly overriding the problem default."""

    objectives: list[str]
    weights: list[float]


def get_default_objective_setup(problem: Problem) -> ParamsObjectiveFunction:
    objectives, weights = (
        problem.get_objective_register().get_list_objective_and_default_weight()
    )
    logger.debug(
        f"Default objective of {type(problem).__name__}: {objectives}, {weights}"
    )
    return ParamsObjectiveFunction(objectives=objectives, weights=weights)


def build_aggreg_function_and_params_objective(
    problem: Problem,
    params_objective_function: Optional[ParamsObjectiveFunction] = None,
) -> tuple[
    Callable[[Solution], LexicoFitness],
    ParamsObjectiveFunction,
]:
    """Fitness function of a solver.

    Returns:
        the fitness of a solution, and the objective parameters used
        (the problem default when None is given)

    """
    if params_objective_function is None:
        params_objective_function = get_default_objective_setup(problem)
    weighted_objectives = list(
        zip(params_objective_function.objectives, params_objective_function.weights)
    )

    def eval_sol(solution: Solution) -> LexicoFitness:
        kpis = problem.evaluate(solution)
        return tuple(kpis[name] * weight for name, weight in weighted_objectives)

    return eval_sol, params_objective_function
