"""Packings of items into bins, and the decoder from item orders to packings.

A packing is built from an order of the items by a best-fit placement,
then improved by a consolidation pass that tries to empty whole bins.
"""

#  Copyright (c) 2025 AIRBUS and its affiliates.
#  This source code is licensed under the MIT license found in the
#  LICENSE file in the root directory of this source tree.

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, NamedTuple, Optional

if TYPE_CHECKING:  # avoid cycling imports due solely to annotations
    from binpack_tabu.binpack.problem import BinPackProblem


class InvalidPackingError(ValueError):
    """Raised when a packing breaks one of its invariants."""


class PackingObjective(NamedTuple):
    """Lexicographic objective: fewer bins first, then less unused capacity."""

    nb_bins: int
    unused_capacity: int


@dataclass(frozen=True)
class Packing:
    """Items grouped in bins, with the load of each bin.

    Attributes:
        capacity: capacity of every bin
        bins: item indices of each bin, in placement order
        bin_loads: total size of each bin

    """

    capacity: int
    bins: tuple[tuple[int, ...], ...]
    bin_loads: tuple[int, ...]

    @property
    def nb_bins(self) -> int:
        return len(self.bins)

    @property
    def unused_capacity(self) -> int:
        return sum(self.capacity - load for load in self.bin_loads)

    def objective(self) -> PackingObjective:
        return PackingObjective(
            nb_bins=self.nb_bins, unused_capacity=self.unused_capacity
        )

    def items_order(self) -> list[int]:
        """Items listed bin after bin."""
        return [item for bin_ in self.bins for item in bin_]

    def allocation(self) -> list[int]:
        """Bin index of each item."""
        allocation = [0] * sum(len(bin_) for bin_ in self.bins)
        for index_bin, bin_ in enumerate(self.bins):
            for item in bin_:
                allocation[item] = index_bin
        return allocation

    @classmethod
    def from_bins(
        cls, problem: BinPackProblem, bins: Sequence[Sequence[int]]
    ) -> Packing:
        sizes = problem.sizes
        return cls(
            capacity=problem.capacity_bin,
            bins=tuple(tuple(bin_) for bin_ in bins),
            bin_loads=tuple(sum(sizes[i] for i in bin_) for bin_ in bins),
        )


def _best_fit_bin(
    loads: Sequence[int], size: int, capacity: int, excluded: Optional[int] = None
) -> Optional[int]:
    """Bin leaving the least room after adding the item, first one on ties."""
    best_bin = None
    best_room = None
    for index_bin, load in enumerate(loads):
        if index_bin == excluded:
            continue
        room = capacity - load - size
        if room >= 0 and (best_room is None or room < best_room):
            best_bin = index_bin
            best_room = room
    return best_bin


def best_fit_pack(problem: BinPackProblem, order: Sequence[int]) -> Packing:
    """Place the items one by one, in the given order, with the best-fit rule.

    Each item goes to the open bin where it leaves the smallest remaining
    capacity; a new bin is opened when it fits nowhere.

    """
    sizes = problem.sizes
    capacity = problem.capacity_bin
    bins: list[list[int]] = []
    loads: list[int] = []
    for item in order:
        size = sizes[item]
        index_bin = _best_fit_bin(loads, size, capacity)
        if index_bin is None:
            bins.append([item])
            loads.append(size)
        else:
            bins[index_bin].append(item)
            loads[index_bin] += size
    return Packing(
        capacity=capacity,
        bins=tuple(tuple(bin_) for bin_ in bins),
        bin_loads=tuple(loads),
    )


def consolidate(problem: BinPackProblem, packing: Packing) -> Packing:
    """Try to empty bins by moving all their items into the other bins.

    Bins are considered from the lightest to the heaviest. The items of the
    source bin are moved largest first with the best-fit rule. If one of them
    does not fit, all the tentative moves of that bin are undone and the next
    bin is tried. After every successful emptying, the scan starts over, until
    no bin can be emptied.

    The bin count never increases and no bin is ever overloaded.

    """
    sizes = problem.sizes
    capacity = packing.capacity
    bins = [list(bin_) for bin_ in packing.bins]
    loads = list(packing.bin_loads)
    improved = True
    while improved:
        improved = False
        for source in sorted(range(len(bins)), key=lambda b: loads[b]):
            if len(bins[source]) == 0:
                continue
            items = sorted(bins[source], key=lambda i: -sizes[i])
            placements: list[tuple[int, int]] = []
            for item in items:
                target = _best_fit_bin(loads, sizes[item], capacity, excluded=source)
                if target is None:
                    break
                loads[target] += sizes[item]
                placements.append((item, target))
            if len(placements) < len(items):
                for item, target in placements:
                    loads[target] -= sizes[item]
                continue
            for item, target in placements:
                bins[target].append(item)
            bins[source] = []
            loads[source] = 0
            kept = [b for b in range(len(bins)) if len(bins[b]) > 0]
            bins = [bins[b] for b in kept]
            loads = [loads[b] for b in kept]
            improved = True
            break
    return Packing(
        capacity=capacity,
        bins=tuple(tuple(bin_) for bin_ in bins),
        bin_loads=tuple(loads),
    )


def pack(problem: BinPackProblem, order: Sequence[int]) -> Packing:
    """Decode an order of the items into a consolidated packing."""
    return consolidate(problem, best_fit_pack(problem, order))


def packing_objective(packing: Packing) -> PackingObjective:
    return packing.objective()


def lower_bound_nb_bins(problem: BinPackProblem) -> int:
    """Capacity lower bound ceil(total size / capacity), 0 for a null capacity."""
    if problem.capacity_bin == 0:
        return 0
    return -(-problem.total_size // problem.capacity_bin)


def validate_packing(problem: BinPackProblem, packing: Packing) -> None:
    """Check every invariant of a packing against its problem.

    Raises:
        InvalidPackingError: describing the first violation found.

    """
    if packing.capacity != problem.capacity_bin:
        raise InvalidPackingError(
            f"Capacity mismatch: packing has {packing.capacity}, problem has {problem.capacity_bin}"
        )
    if len(packing.bins) != len(packing.bin_loads):
        raise InvalidPackingError("bins/bin_loads length mismatch")
    sizes = problem.sizes
    seen = [False] * problem.nb_items
    for bin_, load in zip(packing.bins, packing.bin_loads):
        for item in bin_:
            if not 0 <= item < problem.nb_items:
                raise InvalidPackingError(f"Invalid item id: {item}")
            if seen[item]:
                raise InvalidPackingError(f"Item appears more than once: {item}")
            seen[item] = True
        expected = sum(sizes[item] for item in bin_)
        if expected != load:
            raise InvalidPackingError(
                f"Bin load mismatch: expected {expected}, got {load}"
            )
        if load > packing.capacity:
            raise InvalidPackingError(
                f"Infeasible bin: load {load} > capacity {packing.capacity}"
            )
    for item, found in enumerate(seen):
        if not found:
            raise InvalidPackingError(f"Missing item in packing: {item}")


def is_valid_packing(problem: BinPackProblem, packing: Packing) -> bool:
    try:
        validate_packing(problem, packing)
    except InvalidPackingError:
        return False
    return True
