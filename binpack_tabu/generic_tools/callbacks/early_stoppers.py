#  Copyright (c) 2025 AIRBUS and its affiliates.
#  This source code is licensed under the MIT license found in the
#  LICENSE file in the root directory of this source tree.

import logging
import time
from typing import Optional

from binpack_tabu.generic_tools.callbacks.callback import Callback
from binpack_tabu.generic_tools.do_solver import BoundsProviderMixin, SolverDO
from binpack_tabu.generic_tools.result_storage.result_storage import ResultStorage

logger = logging.getLogger(__name__)


class TimerStopper(Callback):
    """Stop the solver once `total_seconds` have elapsed since its start.

    The clock is read every `check_nb_steps` steps only.

    """

    def __init__(self, total_seconds: float, check_nb_steps: int = 1):
        self.total_seconds = total_seconds
        self.check_nb_steps = check_nb_steps
        self.start_time = 0.0

    def on_solve_start(self, solver: SolverDO) -> None:
        self.start_time = time.perf_counter()

    def on_step_end(
        self, step: int, res: ResultStorage, solver: SolverDO
    ) -> Optional[bool]:
        if step % self.check_nb_steps != 0:
            return False
        elapsed = time.perf_counter() - self.start_time
        if elapsed >= self.total_seconds:
            logger.info(f"Stopping after {elapsed:.3f}s (limit {self.total_seconds}s)")
            return True
        return False


class NbIterationStopper(Callback):
    """Stop the solver after `nb_iteration_max` steps."""

    def __init__(self, nb_iteration_max: int):
        self.nb_iteration_max = nb_iteration_max
        self.nb_iteration = 0

    def on_solve_start(self, solver: SolverDO) -> None:
        self.nb_iteration = 0

    def on_step_end(
        self, step: int, res: ResultStorage, solver: SolverDO
    ) -> Optional[bool]:
        self.nb_iteration += 1
        if self.nb_iteration < self.nb_iteration_max:
            return False
        logger.info(f"Stopping after {self.nb_iteration} steps")
        return True


class ObjectiveGapStopper(Callback):
    """Stop the solver when its best value is close enough to its bound.

    The solver must derive from `BoundsProviderMixin`. The relative gap is
    the absolute gap divided by the bound.

    """

    def __init__(
        self,
        objective_gap_rel: Optional[float] = None,
        objective_gap_abs: Optional[float] = None,
    ):
        self.objective_gap_rel = objective_gap_rel
        self.objective_gap_abs = objective_gap_abs

    def on_step_end(
        self, step: int, res: ResultStorage, solver: SolverDO
    ) -> Optional[bool]:
        if not isinstance(solver, BoundsProviderMixin):
            raise ValueError(
                f"ObjectiveGapStopper needs a solver deriving from BoundsProviderMixin, "
                f"got {type(solver).__name__}"
            )
        abs_gap = solver.get_current_absolute_gap()
        if abs_gap is None:
            return False
        if self.objective_gap_abs is not None and abs_gap <= self.objective_gap_abs:
            logger.info(f"Stopping, absolute gap {abs_gap} <= {self.objective_gap_abs}")
            return True
        bound = solver.get_current_best_internal_objective_bound()
        if self.objective_gap_rel is not None and bound:
            rel_gap = abs_gap / abs(bound)
            if rel_gap <= self.objective_gap_rel:
                logger.info(
                    f"Stopping, relative gap {rel_gap:.4f} <= {self.objective_gap_rel}"
                )
                return True
        return False
