#  Copyright (c) 2025 AIRBUS and its affiliates.
#  This source code is licensed under the MIT license found in the
#  LICENSE file in the root directory of this source tree.

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Hashable
from typing import Any, Optional

from binpack_tabu.generic_tools.do_problem import Problem, Solution


class LocalMove(ABC):
    """Elementary modification of a solution.

    Moves never modify the solution they are applied to: they return a new one,
    so that several moves can be evaluated from the same current solution.

    """

    @property
    @abstractmethod
    def key(self) -> Hashable:
        """Identity of the move, as stored in a tabu list."""
        ...

    @abstractmethod
    def apply_local_move(self, solution: Solution) -> Solution: ...


class Mutation(ABC):
    def __init__(self, problem: Problem, **kwargs: Any):
        self.problem = problem

    @abstractmethod
    def sample_local_move(self, solution: Solution) -> Optional[LocalMove]:
        """Draw a random move around the solution.

        Returns None when the draw is degenerate (e.g. a move with no effect).

        """
        ...
