#  Copyright (c) 2025 AIRBUS and its affiliates.
#  This source code is licensed under the MIT license found in the
#  LICENSE file in the root directory of this source tree.

from binpack_tabu.binpack.problem import BinPackProblem
from binpack_tabu.generic_tools.rng import XorShift64


def example_instance() -> BinPackProblem:
    """Small worked example: 7 items, capacity 60, optimum 4 bins."""
    return BinPackProblem.from_sizes(
        sizes=[22, 17, 45, 12, 38, 27, 19],
        capacity_bin=60,
        name="TP2-example",
        opt_bins=4,
    )


def synthetic_instance(
    name: str,
    nb_items: int,
    capacity: int,
    min_size: int,
    max_size: int,
    seed: int,
) -> BinPackProblem:
    """Random instance with sizes drawn uniformly in [min_size, max_size].

    The same seed always gives the same instance.

    """
    if not 0 < min_size <= max_size <= capacity:
        raise ValueError(
            f"expected 0 < min_size <= max_size <= capacity, "
            f"got {min_size}, {max_size}, {capacity}"
        )
    rng = XorShift64(seed)
    sizes = [rng.randint(min_size, max_size) for _ in range(nb_items)]
    return BinPackProblem.from_sizes(sizes=sizes, capacity_bin=capacity, name=name)


def default_batch_instances() -> list[BinPackProblem]:
    return [
        example_instance(),
        synthetic_instance("synthetic-60", 60, 150, 10, 100, seed=1),
        synthetic_instance("synthetic-120", 120, 150, 10, 100, seed=2),
        synthetic_instance("synthetic-200", 200, 150, 10, 100, seed=3),
    ]
