#  Copyright (c) 2025 AIRBUS and its affiliates.
#  This source code is licensed under the MIT license found in the
#  LICENSE file in the root directory of this source tree.


class SolveEarlyStop(Exception):
    """Exception used to unwind a recursive search when a callback asks to stop.

    See for instance binpack_tabu.binpack.solvers.exact.BranchAndBoundBinPackSolver.

    """

    ...


class InfeasibleProblemError(Exception):
    """Raised when a problem instance admits no feasible solution at all."""
