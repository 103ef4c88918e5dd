#  Copyright (c) 2025 AIRBUS and its affiliates.
#  This source code is licensed under the MIT license found in the
#  LICENSE file in the root directory of this source tree.

import pytest

from binpack_tabu.generic_tools.ls.tabu_search import TabuList
from binpack_tabu.generic_tools.mutations.permutation_mutations import (
    InsertKey,
    SwapKey,
)


def test_fifo_eviction():
    tabu_list = TabuList(tenure=2)
    tabu_list.push(SwapKey(0, 1))
    tabu_list.push(InsertKey(item=3, position=0))
    assert SwapKey(0, 1) in tabu_list
    assert len(tabu_list) == 2
    tabu_list.push(SwapKey(2, 5))
    assert SwapKey(0, 1) not in tabu_list
    assert InsertKey(item=3, position=0) in tabu_list
    assert list(tabu_list) == [InsertKey(item=3, position=0), SwapKey(2, 5)]


def test_keys_compare_by_value():
    tabu_list = TabuList(tenure=5)
    tabu_list.push(SwapKey.from_elements(4, 1))
    assert SwapKey(1, 4) in tabu_list
    assert InsertKey(item=1, position=4) not in tabu_list


def test_zero_tenure_records_nothing():
    tabu_list = TabuList(tenure=0)
    tabu_list.push(SwapKey(0, 1))
    assert len(tabu_list) == 0
    assert SwapKey(0, 1) not in tabu_list


def test_clear():
    tabu_list = TabuList(tenure=3)
    tabu_list.push(SwapKey(0, 1))
    tabu_list.push(SwapKey(0, 2))
    tabu_list.clear()
    assert len(tabu_list) == 0
    assert SwapKey(0, 1) not in tabu_list


def test_negative_tenure():
    with pytest.raises(ValueError):
        TabuList(tenure=-1)


def test_key_pushed_twice_is_forgotten_with_its_older_copy():
    key = SwapKey(0, 1)
    tabu_list = TabuList(tenure=3)
    tabu_list.push(key)
    tabu_list.push(SwapKey(2, 3))
    tabu_list.push(key)
    assert len(tabu_list) == 2
    tabu_list.push(SwapKey(4, 5))
    assert list(tabu_list) == [SwapKey(2, 3), key, SwapKey(4, 5)]
    assert key not in tabu_list
    assert len(tabu_list) == 2
