#  Copyright (c) 2025 AIRBUS and its affiliates.
#  This source code is licensed under the MIT license found in the
#  LICENSE file in the root directory of this source tree.

import os

from binpack_tabu.datasets import (
    BT_DEFAULT_DATAHOME_ENVVARNAME,
    ORLIB_BINPACK_FILES,
    get_data_home,
)


def test_get_data_home_explicit(tmp_path):
    data_home = str(tmp_path / "data")
    assert get_data_home(data_home=data_home) == data_home
    assert os.path.isdir(data_home)


def test_get_data_home_from_env(tmp_path, monkeypatch):
    data_home = str(tmp_path / "from_env")
    monkeypatch.setenv(BT_DEFAULT_DATAHOME_ENVVARNAME, data_home)
    assert get_data_home() == data_home
    assert os.path.isdir(data_home)


def test_orlib_files():
    assert ORLIB_BINPACK_FILES[0] == "binpack1.txt"
    assert len(ORLIB_BINPACK_FILES) == 8
