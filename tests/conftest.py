#  Copyright (c) 2025 AIRBUS and its affiliates.
#  This source code is licensed under the MIT license found in the
#  LICENSE file in the root directory of this source tree.

from pytest import fixture

from binpack_tabu.datasets import BT_DEFAULT_DATAHOME_ENVVARNAME


@fixture
def fake_data_home(monkeypatch):
    data_home = "~/binpack_tabu_data_not_existing"
    monkeypatch.setenv(BT_DEFAULT_DATAHOME_ENVVARNAME, data_home)
