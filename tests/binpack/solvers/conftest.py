#  Copyright (c) 2025 AIRBUS and its affiliates.
#  This source code is licensed under the MIT license found in the
#  LICENSE file in the root directory of this source tree.

import pytest

from binpack_tabu.binpack.generator import example_instance
from binpack_tabu.binpack.problem import BinPackProblem


@pytest.fixture
def problem():
    return example_instance()


@pytest.fixture
def improvable_problem():
    # best-fit decreasing packs 6+6 | 5+5+4 | 4 (3 bins) while 6+5+4 | 6+5+4 fills
    # 2 bins, the lower bound: any order putting a 5 or a 4 between the two 6
    # reaches it
    return BinPackProblem.from_sizes(
        sizes=[6, 6, 5, 5, 4, 4], capacity_bin=15, name="paired-6"
    )


@pytest.fixture
def not_tight_problem():
    # lower bound 2 but 3 bins are needed
    return BinPackProblem.from_sizes(sizes=[6, 6, 6], capacity_bin=10)
