#  Copyright (c) 2025 AIRBUS and its affiliates.
#  This source code is licensed under the MIT license found in the
#  LICENSE file in the root directory of this source tree.

from binpack_tabu.binpack.parser import get_data_available, parse_file


def run_parser():
    f = [ff for ff in get_data_available() if "binpack1.txt" in ff][0]
    problems = parse_file(f)
    print(len(problems), "instances")
    problem = problems[0]
    print(problem)
    print(problem.sizes)
    print("lower bound", problem.lower_bound_nb_bins(), "best known", problem.opt_bins)


if __name__ == "__main__":
    run_parser()
