#  Copyright (c) 2025 AIRBUS and its affiliates.
#  This source code is licensed under the MIT license found in the
#  LICENSE file in the root directory of this source tree.

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Optional, Union

from binpack_tabu.generic_tools.result_storage.result_storage import ResultStorage

if TYPE_CHECKING:
    from binpack_tabu.generic_tools.do_solver import SolverDO


class Callback:
    """Hook into a solver run.

    Solvers call `on_solve_start()` once, `on_step_end()` after each of their
    steps (an iteration for the local searches, an improving leaf for the
    branch and bound), and `on_solve_end()` once the result is complete.
    Subclasses override the stages they need.

    """

    def on_solve_start(self, solver: SolverDO) -> None: ...

    def on_step_end(
        self, step: int, res: ResultStorage, solver: SolverDO
    ) -> Optional[bool]:
        """Called after each step.

        Args:
            step: index of the step, starting at 0
            res: solutions stored so far
            solver: the solver running

        Returns:
            True to stop the solver after this step.

        """
        return None

    def on_solve_end(self, res: ResultStorage, solver: SolverDO) -> None: ...


class CallbackList(Callback):
    """Dispatch each stage to several callbacks, in order.

    The solver stops as soon as one of the callbacks asks for it, but every
    callback still sees the step that triggered the stop.

    """

    def __init__(
        self, callbacks: Optional[Union[Callback, Iterable[Callback]]] = None
    ):
        if callbacks is None:
            self.callbacks: list[Callback] = []
        elif isinstance(callbacks, Callback):
            self.callbacks = [callbacks]
        else:
            self.callbacks = list(callbacks)

    def append(self, callback: Callback) -> None:
        self.callbacks.append(callback)

    def on_solve_start(self, solver: SolverDO) -> None:
        for callback in self.callbacks:
            callback.on_solve_start(solver=solver)

    def on_step_end(
        self, step: int, res: ResultStorage, solver: SolverDO
    ) -> Optional[bool]:
        decisions = [
            bool(callback.on_step_end(step=step, res=res, solver=solver))
            for callback in self.callbacks
        ]
        return any(decisions)

    def on_solve_end(self, res: ResultStorage, solver: SolverDO) -> None:
        for callback in self.callbacks:
            callback.on_solve_end(res=res, solver=solver)
