#  Copyright (c) 2025 AIRBUS and its affiliates.
#  This source code is licensed under the MIT license found in the
#  LICENSE file in the root directory of this source tree.

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from binpack_tabu.binpack.packing import (
    Packing,
    is_valid_packing,
    lower_bound_nb_bins,
    pack,
)
from binpack_tabu.generic_tools.do_problem import (
    ObjectiveDoc,
    ObjectiveRegister,
    Problem,
    Solution,
)


class BinPackSolution(Solution):
    """Solution encoded by an order of the items, or directly by a packing.

    When only the order is known, the packing is decoded lazily (best-fit then
    consolidation) and cached until the order changes.

    """

    problem: BinPackProblem

    def __init__(
        self,
        problem: BinPackProblem,
        permutation: Optional[list[int]] = None,
        packing: Optional[Packing] = None,
    ):
        if permutation is None and packing is None:
            raise ValueError("permutation and packing cannot be both None")
        self.problem = problem
        if permutation is None:
            permutation = packing.items_order()
        self._permutation = permutation
        self._packing = packing

    @property
    def permutation(self) -> list[int]:
        return self._permutation

    @permutation.setter
    def permutation(self, value: list[int]) -> None:
        self._permutation = value
        self._packing = None

    @property
    def packing(self) -> Packing:
        if self._packing is None:
            self._packing = pack(self.problem, self._permutation)
        return self._packing

    def copy(self) -> BinPackSolution:
        # packings are immutable, they can be shared
        return BinPackSolution(
            problem=self.problem,
            permutation=list(self._permutation),
            packing=self._packing,
        )

    def lazy_copy(self) -> BinPackSolution:
        return BinPackSolution(
            problem=self.problem, permutation=self._permutation, packing=self._packing
        )

    def __str__(self) -> str:
        return f"BinPackSolution(nb_bins={self.packing.nb_bins}, permutation={self._permutation})"


@dataclass(frozen=True)
class ItemBinPack:
    index: int = field(init=True)
    weight: int = field(init=True)

    def __str__(self) -> str:
        return "ind: " + str(self.index) + " weight: " + str(self.weight)


class BinPackProblem(Problem):
    """One-dimensional bin packing: put all items in the fewest bins of equal capacity.

    Args:
        list_items: items, their index must match their position in the list
        capacity_bin: capacity of every bin
        name: instance name, used in reports
        opt_bins: optimal number of bins when known (e.g. from a benchmark file)

    """

    def __init__(
        self,
        list_items: list[ItemBinPack],
        capacity_bin: int,
        name: str = "",
        opt_bins: Optional[int] = None,
    ):
        for position, item in enumerate(list_items):
            if item.index != position:
                raise ValueError(
                    f"item at position {position} has index {item.index}"
                )
        self.list_items = list_items
        self.nb_items = len(self.list_items)
        self.capacity_bin = capacity_bin
        self.name = name
        self.opt_bins = opt_bins
        self.sizes = tuple(item.weight for item in self.list_items)
        self.total_size = sum(self.sizes)

    @classmethod
    def from_sizes(
        cls,
        sizes: list[int],
        capacity_bin: int,
        name: str = "",
        opt_bins: Optional[int] = None,
    ) -> BinPackProblem:
        return cls(
            list_items=[ItemBinPack(index=i, weight=w) for i, w in enumerate(sizes)],
            capacity_bin=capacity_bin,
            name=name,
            opt_bins=opt_bins,
        )

    def lower_bound_nb_bins(self) -> int:
        return lower_bound_nb_bins(self)

    def evaluate(self, variable: BinPackSolution) -> dict[str, float]:
        packing = variable.packing
        return {
            "nb_bins": packing.nb_bins,
            "unused_capacity": packing.unused_capacity,
        }

    def satisfy(self, variable: BinPackSolution) -> bool:
        return is_valid_packing(self, variable.packing)

    def get_dummy_solution(self) -> BinPackSolution:
        return BinPackSolution(problem=self, permutation=list(range(self.nb_items)))

    def get_solution_type(self) -> type[Solution]:
        return BinPackSolution

    def get_objective_register(self) -> ObjectiveRegister:
        return ObjectiveRegister(
            dict_objective_to_doc={
                "nb_bins": ObjectiveDoc(default_weight=1),
                "unused_capacity": ObjectiveDoc(default_weight=1),
            }
        )

    def __str__(self) -> str:
        return (
            f"BinPackProblem(name={self.name!r}, capacity={self.capacity_bin}, "
            f"nb_items={self.nb_items}, opt_bins={self.opt_bins})"
        )
