#  Copyright (c) 2025 AIRBUS and its affiliates.
#  This source code is licensed under the MIT license found in the
#  LICENSE file in the root directory of this source tree.

import pytest

from binpack_tabu.binpack.generator import (
    default_batch_instances,
    example_instance,
    synthetic_instance,
)


def test_example_instance():
    problem = example_instance()
    assert problem.name == "TP2-example"
    assert problem.capacity_bin == 60
    assert problem.sizes == (22, 17, 45, 12, 38, 27, 19)


def test_synthetic_instance_is_reproducible():
    problem1 = synthetic_instance("a", 50, 150, 10, 100, seed=5)
    problem2 = synthetic_instance("b", 50, 150, 10, 100, seed=5)
    problem3 = synthetic_instance("c", 50, 150, 10, 100, seed=6)
    assert problem1.sizes == problem2.sizes
    assert problem1.sizes != problem3.sizes
    assert problem1.nb_items == 50
    assert all(10 <= size <= 100 for size in problem1.sizes)
    assert problem1.opt_bins is None


@pytest.mark.parametrize(
    "min_size, max_size, capacity", [(0, 10, 20), (12, 10, 20), (5, 25, 20)]
)
def test_synthetic_instance_bad_range(min_size, max_size, capacity):
    with pytest.raises(ValueError):
        synthetic_instance("x", 10, capacity, min_size, max_size, seed=0)


def test_default_batch():
    problems = default_batch_instances()
    assert [p.name for p in problems] == [
        "TP2-example",
        "synthetic-60",
        "synthetic-120",
        "synthetic-200",
    ]
    assert [p.nb_items for p in problems] == [7, 60, 120, 200]
