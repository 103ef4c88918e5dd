#  Copyright (c) 2025 AIRBUS and its affiliates.
#  This source code is licensed under the MIT license found in the
#  LICENSE file in the root directory of this source tree.

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from binpack_tabu.binpack.problem import BinPackProblem
from binpack_tabu.binpack.solvers.exact import exact_min_bins

logger = logging.getLogger(__name__)

MAX_NB_ITEMS_BRANCH_AND_BOUND = 30


class ReferenceSource(Enum):
    """Where a reference number of bins comes from."""

    DATASET_OPTIMUM = "dataset-opt"
    BRANCH_AND_BOUND = "bruteforce"
    LOWER_BOUND = "lower-bound"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ExactRef:
    """Reference number of bins to compare a heuristic result against."""

    bins: int
    source: ReferenceSource

    @property
    def is_exact(self) -> bool:
        """False when the reference is only a lower bound on the optimum."""
        return self.source != ReferenceSource.LOWER_BOUND


def exact_reference(
    problem: BinPackProblem,
    max_nb_items: int = MAX_NB_ITEMS_BRANCH_AND_BOUND,
    allow_lower_bound: bool = True,
) -> Optional[ExactRef]:
    """Best available reference for the optimal number of bins.

    In order of preference: the optimum given with the instance, the
    branch-and-bound optimum when the instance has at most `max_nb_items`
    items, and finally the capacity lower bound.

    Returns:
        None if no exact value is available and `allow_lower_bound` is False.

    Raises:
        InfeasibleProblemError: if the branch-and-bound finds an item larger than the capacity.

    """
    if problem.opt_bins is not None:
        return ExactRef(bins=problem.opt_bins, source=ReferenceSource.DATASET_OPTIMUM)
    if problem.nb_items <= max_nb_items:
        return ExactRef(
            bins=exact_min_bins(problem), source=ReferenceSource.BRANCH_AND_BOUND
        )
    if allow_lower_bound:
        logger.debug(
            f"{problem.name}: {problem.nb_items} items, falling back to the lower bound"
        )
        return ExactRef(
            bins=problem.lower_bound_nb_bins(), source=ReferenceSource.LOWER_BOUND
        )
    return None


def gap_percent(found: int, exact: int) -> float:
    """Relative excess of bins over the reference, in percent."""
    if exact == 0:
        return 0.0
    return (found - exact) / exact * 100.0
