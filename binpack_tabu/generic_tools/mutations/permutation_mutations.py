#  Copyright (c) 2025 AIRBUS and its affiliates.
#  This source code is licensed under the MIT license found in the
#  LICENSE file in the root directory of this source tree.

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Union

from binpack_tabu.generic_tools.do_mutation import LocalMove, Mutation
from binpack_tabu.generic_tools.do_problem import Problem, Solution
from binpack_tabu.generic_tools.rng import XorShift64


@dataclass(frozen=True)
class SwapKey:
    """Swap of two elements, whatever their positions. Always built with a < b."""

    a: int
    b: int

    @classmethod
    def from_elements(cls, element_1: int, element_2: int) -> SwapKey:
        if element_1 < element_2:
            return cls(a=element_1, b=element_2)
        return cls(a=element_2, b=element_1)


@dataclass(frozen=True)
class InsertKey:
    """Element moved to a given destination position."""

    item: int
    position: int


MoveKey = Union[SwapKey, InsertKey]


class PermutationSwapMove(LocalMove):
    """Exchange the elements found at two positions of the permutation."""

    def __init__(self, attribute: str, position_1: int, position_2: int):
        self.attribute = attribute
        self.position_1 = position_1
        self.position_2 = position_2
        self.element_1: Optional[int] = None
        self.element_2: Optional[int] = None

    @classmethod
    def from_solution(
        cls, solution: Solution, attribute: str, position_1: int, position_2: int
    ) -> PermutationSwapMove:
        move = cls(attribute=attribute, position_1=position_1, position_2=position_2)
        permutation = getattr(solution, attribute)
        move.element_1 = permutation[position_1]
        move.element_2 = permutation[position_2]
        return move

    @property
    def key(self) -> SwapKey:
        return SwapKey.from_elements(self.element_1, self.element_2)

    def apply_local_move(self, solution: Solution) -> Solution:
        permutation = list(getattr(solution, self.attribute))
        i, j = self.position_1, self.position_2
        permutation[i], permutation[j] = permutation[j], permutation[i]
        sol = solution.lazy_copy()
        setattr(sol, self.attribute, permutation)
        return sol

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.position_1}<->{self.position_2})"


class PermutationInsertMove(LocalMove):
    """Remove the element at a position and insert it back at another one."""

    def __init__(self, attribute: str, from_position: int, to_position: int):
        self.attribute = attribute
        self.from_position = from_position
        self.to_position = to_position
        self.item: Optional[int] = None

    @classmethod
    def from_solution(
        cls, solution: Solution, attribute: str, from_position: int, to_position: int
    ) -> PermutationInsertMove:
        move = cls(
            attribute=attribute, from_position=from_position, to_position=to_position
        )
        move.item = getattr(solution, attribute)[from_position]
        return move

    @property
    def key(self) -> InsertKey:
        return InsertKey(item=self.item, position=self.to_position)

    def apply_local_move(self, solution: Solution) -> Solution:
        permutation = list(getattr(solution, self.attribute))
        permutation.insert(self.to_position, permutation.pop(self.from_position))
        sol = solution.lazy_copy()
        setattr(sol, self.attribute, permutation)
        return sol

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.from_position}->{self.to_position})"


class PermutationSwapInsertMutation(Mutation):
    """Random swap or insert move on a permutation attribute.

    Each draw consumes exactly three numbers from the generator: one float to
    choose the kind of move (swap with probability `swap_probability`), then
    two positions. Equal positions give no move.

    """

    def __init__(
        self,
        problem: Problem,
        rng: XorShift64,
        swap_probability: float = 0.6,
        attribute: str = "permutation",
        **kwargs: Any,
    ):
        super().__init__(problem, **kwargs)
        self.rng = rng
        self.swap_probability = swap_probability
        self.attribute = attribute

    def sample_local_move(
        self, solution: Solution
    ) -> Optional[Union[PermutationSwapMove, PermutationInsertMove]]:
        n = len(getattr(solution, self.attribute))
        is_swap = self.rng.random() < self.swap_probability
        i = self.rng.randbelow(n)
        j = self.rng.randbelow(n)
        if i == j:
            return None
        if is_swap:
            return PermutationSwapMove.from_solution(
                solution, attribute=self.attribute, position_1=i, position_2=j
            )
        return PermutationInsertMove.from_solution(
            solution, attribute=self.attribute, from_position=i, to_position=j
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(attribute='{self.attribute}', swap_probability={self.swap_probability})"
