#  Copyright (c) 2025 AIRBUS and its affiliates.
#  This source code is licensed under the MIT license found in the
#  LICENSE file in the root directory of this source tree.

from __future__ import annotations

from collections.abc import MutableSequence
from typing import Optional, Union

from binpack_tabu.generic_tools.do_problem import LexicoFitness, Solution

fitness_class = LexicoFitness


class ResultStorage(MutableSequence):
    """Solutions found by a solver, each with its fitness, in order of discovery.

    Behaves as a list of (solution, fitness) tuples. The best entry is the one
    with the smallest fitness, in tuple order.

    """

    list_solution_fits: list[tuple[Solution, fitness_class]]

    def __init__(
        self,
        list_solution_fits: Optional[list[tuple[Solution, fitness_class]]] = None,
    ):
        self.list_solution_fits = (
            [] if list_solution_fits is None else list_solution_fits
        )

    def __getitem__(self, index):
        return self.list_solution_fits[index]

    def __setitem__(self, index, value):
        self.list_solution_fits[index] = value

    def __delitem__(self, index):
        del self.list_solution_fits[index]

    def __len__(self) -> int:
        return len(self.list_solution_fits)

    def insert(self, index: int, value: tuple[Solution, fitness_class]) -> None:
        self.list_solution_fits.insert(index, value)

    def _ranked(self) -> list[tuple[Solution, fitness_class]]:
        # sorted() is stable: among equal fitnesses the earliest stays first
        return sorted(self.list_solution_fits, key=lambda x: x[1])

    def get_best_solution_fit(
        self,
    ) -> Union[tuple[Solution, fitness_class], tuple[None, None]]:
        """Best (solution, fitness), (None, None) when empty."""
        if len(self.list_solution_fits) == 0:
            return None, None
        return self._ranked()[0]

    def get_best_solution(self) -> Optional[Solution]:
        return self.get_best_solution_fit()[0]
