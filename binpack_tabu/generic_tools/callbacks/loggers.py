#  Copyright (c) 2025 AIRBUS and its affiliates.
#  This source code is licensed under the MIT license found in the
#  LICENSE file in the root directory of this source tree.

import logging
from typing import Optional

from binpack_tabu.generic_tools.callbacks.callback import Callback
from binpack_tabu.generic_tools.do_solver import SolverDO
from binpack_tabu.generic_tools.result_storage.result_storage import ResultStorage

logger = logging.getLogger(__name__)


class _StepCountingLogger(Callback):
    def __init__(
        self,
        step_verbosity_level: int = logging.DEBUG,
        end_verbosity_level: int = logging.INFO,
    ):
        self.step_verbosity_level = step_verbosity_level
        self.end_verbosity_level = end_verbosity_level
        self.nb_iteration = 0

    def on_solve_start(self, solver: SolverDO) -> None:
        self.nb_iteration = 0

    def on_step_end(
        self, step: int, res: ResultStorage, solver: SolverDO
    ) -> Optional[bool]:
        self.nb_iteration += 1
        logger.log(self.step_verbosity_level, self.step_message(res))
        return False

    def on_solve_end(self, res: ResultStorage, solver: SolverDO) -> None:
        logger.log(self.end_verbosity_level, self.end_message(res))

    def step_message(self, res: ResultStorage) -> str:
        raise NotImplementedError()

    def end_message(self, res: ResultStorage) -> str:
        raise NotImplementedError()


class NbIterationTracker(_StepCountingLogger):
    """Log each step, then the number of steps once the solver is done."""

    def step_message(self, res: ResultStorage) -> str:
        return f"Iteration #{self.nb_iteration}"

    def end_message(self, res: ResultStorage) -> str:
        return f"Solve finished after {self.nb_iteration} iterations"


class ObjectiveLogger(_StepCountingLogger):
    """Log the best fitness stored so far after each step, and at the end."""

    def step_message(self, res: ResultStorage) -> str:
        return (
            f"Iteration #{self.nb_iteration}, "
            f"objective={res.get_best_solution_fit()[1]}"
        )

    def end_message(self, res: ResultStorage) -> str:
        return (
            f"Best fitness after {self.nb_iteration} iterations: "
            f"{res.get_best_solution_fit()[1]}"
        )
