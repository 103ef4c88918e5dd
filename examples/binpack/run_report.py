#  Copyright (c) 2025 AIRBUS and its affiliates.
#  This source code is licensed under the MIT license found in the
#  LICENSE file in the root directory of this source tree.

import logging

from binpack_tabu.binpack.experiments import (
    format_exact_gap_table,
    format_table,
    run_instance,
    run_instance_with_exact,
)
from binpack_tabu.binpack.generator import default_batch_instances
from binpack_tabu.binpack.parser import get_data_available, parse_file
from binpack_tabu.binpack.solvers.tabu import TabuParams

logging.basicConfig(level=logging.WARNING)


def run_batch():
    params = TabuParams(time_limit=1.0)
    rows = [
        run_instance(problem, runs=10, seed0=0, params=params, progress=True)[0]
        for problem in default_batch_instances()
    ]
    print(format_table(rows))


def run_report_orlib():
    f = [ff for ff in get_data_available() if "binpack1.txt" in ff][0]
    problems = parse_file(f)[:5]
    params = TabuParams(time_limit=2.0)
    rows = [
        run_instance_with_exact(problem, runs=5, seed0=0, params=params, progress=True)
        for problem in problems
    ]
    print(format_exact_gap_table(rows))


if __name__ == "__main__":
    run_batch()
