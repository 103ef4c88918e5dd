"""Fetch datasets for examples and tests."""


#  Copyright (c) 2025 AIRBUS and its affiliates.
#  This source code is licensed under the MIT license found in the
#  LICENSE file in the root directory of this source tree.

import os
import shutil
from typing import Optional
from urllib.request import urlcleanup, urlretrieve

BT_DEFAULT_DATAHOME = "~/binpack_tabu_data"
BT_DEFAULT_DATAHOME_ENVVARNAME = "BINPACK_TABU_DATA"

ORLIB_FILES_BASE_URL = "https://people.brunel.ac.uk/~mastjjb/jeb/orlib/files"
ORLIB_BINPACK_FILES = [f"binpack{i}.txt" for i in range(1, 9)]
BINPACK_DATADIRNAME = "binpack"


def get_data_home(data_home: Optional[str] = None) -> str:
    """Return the path of the binpack-tabu data directory.

    This folder is used by dataset loaders to avoid downloading the
    data several times.
    By default the data dir is set to a folder named 'binpack_tabu_data' in the
    user home folder.
    Alternatively, it can be set by the 'BINPACK_TABU_DATA' environment
    variable or programmatically by giving an explicit folder path. The '~'
    symbol is expanded to the user home folder.
    If the folder does not already exist, it is automatically created.

    Params:
        data_home : The path to binpack-tabu data directory. If `None`, the default path
        is `~/binpack_tabu_data`.

    """
    if data_home is None:
        data_home = os.environ.get(BT_DEFAULT_DATAHOME_ENVVARNAME, BT_DEFAULT_DATAHOME)
    data_home = os.path.expanduser(data_home)
    os.makedirs(data_home, exist_ok=True)
    return data_home


def fetch_data_from_orlib(data_home: Optional[str] = None):
    """Fetch the one-dimensional bin packing instances of OR-Library.

    http://people.brunel.ac.uk/~mastjjb/jeb/orlib/binpackinfo.html

    Each file holds 20 instances, with their best known number of bins.

    Params:
        data_home: Specify the cache folder for the datasets. By default
            all binpack-tabu data is stored in '~/binpack_tabu_data' subfolders.

    """
    #  get the proper data directory
    data_home = get_data_home(data_home=data_home)

    # get binpack data directory
    binpack_dir = f"{data_home}/{BINPACK_DATADIRNAME}"
    os.makedirs(binpack_dir, exist_ok=True)

    try:
        for filename in ORLIB_BINPACK_FILES:
            local_file_path, _ = urlretrieve(f"{ORLIB_FILES_BASE_URL}/{filename}")
            shutil.copyfile(local_file_path, f"{binpack_dir}/{filename}")
    finally:
        # remove temporary files
        urlcleanup()


def fetch_all_datasets(data_home: Optional[str] = None):
    """Fetch data used by examples.

    Params:
        data_home: Specify the cache folder for the datasets. By default
            all binpack-tabu data is stored in '~/binpack_tabu_data' subfolders.

    """
    fetch_data_from_orlib(data_home=data_home)


if __name__ == "__main__":
    fetch_all_datasets()
