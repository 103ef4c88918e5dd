"""Generic tabu search on top of sampled local moves.

At each iteration, a sample of moves is drawn around the current solution and
the best admissible neighbour becomes the new current solution, even when it
is worse. Moves recently applied are forbidden for a while (tabu), unless the
neighbour they lead to beats the best solution found so far (aspiration).
"""

#  Copyright (c) 2025 AIRBUS and its affiliates.
#  This source code is licensed under the MIT license found in the
#  LICENSE file in the root directory of this source tree.

from __future__ import annotations

import logging
import time
from collections import deque
from collections.abc import Hashable
from typing import Any, Optional

from binpack_tabu.generic_tools.callbacks.callback import Callback, CallbackList
from binpack_tabu.generic_tools.do_mutation import LocalMove, Mutation
from binpack_tabu.generic_tools.do_problem import (
    ParamsObjectiveFunction,
    Problem,
    Solution,
)
from binpack_tabu.generic_tools.do_solver import (
    SolverDO,
    StatusSolver,
    WarmstartMixin,
)
from binpack_tabu.generic_tools.hyperparameters.hyperparameter import (
    IntegerHyperparameter,
)
from binpack_tabu.generic_tools.ls.local_search import RestartHandler
from binpack_tabu.generic_tools.result_storage.result_storage import (
    ResultStorage,
    fitness_class,
)

logger = logging.getLogger(__name__)


class TabuList:
    """Bounded FIFO memory of move keys with constant time membership test.

    A tenure of 0 disables the memory: nothing is ever recorded.

    A key pushed again while still recorded (a tabu move accepted by
    aspiration) is queued twice. Evicting its older copy forgets the key,
    although the newer copy stays in the queue until its own eviction.
    `len()` counts distinct recorded keys.

    """

    def __init__(self, tenure: int):
        if tenure < 0:
            raise ValueError(f"tenure must be >= 0, got {tenure}")
        self.tenure = tenure
        self._queue: deque[Hashable] = deque()
        self._keys: set[Hashable] = set()

    def push(self, key: Hashable) -> None:
        if self.tenure == 0:
            return
        while len(self._queue) >= self.tenure:
            self._keys.discard(self._queue.popleft())
        self._queue.append(key)
        self._keys.add(key)

    def clear(self) -> None:
        self._queue.clear()
        self._keys.clear()

    def __contains__(self, key: Hashable) -> bool:
        return key in self._keys

    def __len__(self) -> int:
        return len(self._keys)

    def __iter__(self):
        return iter(self._queue)


class TabuSearchTracer:
    """Hooks called by TabuSearch at each stage of the search.

    The base class does nothing; subclass it to record or print the search.

    """

    def on_solve_start(
        self, solver: TabuSearch, solution: Solution, fitness: fitness_class
    ) -> None: ...

    def on_restart(self, iteration: int, solution: Solution) -> None: ...

    def on_iteration_start(
        self,
        iteration: int,
        current_fitness: fitness_class,
        best_fitness: fitness_class,
        tabu_size: int,
    ) -> None: ...

    def on_candidate(
        self,
        sample: int,
        move: LocalMove,
        candidate: Solution,
        fitness: fitness_class,
        is_tabu: bool,
        aspiration: bool,
        allowed: bool,
    ) -> None: ...

    def on_no_admissible_candidate(self, iteration: int) -> None: ...

    def on_time_limit(self, iteration: int) -> None:
        """The time limit was reached before starting this iteration."""
        ...

    def on_move_accepted(
        self,
        iteration: int,
        move: LocalMove,
        solution: Solution,
        fitness: fitness_class,
    ) -> None: ...

    def on_new_best(
        self, iteration: int, solution: Solution, fitness: fitness_class
    ) -> None: ...

    def on_solve_end(
        self, solver: TabuSearch, solution: Solution, fitness: fitness_class
    ) -> None: ...


class TabuSearch(SolverDO, WarmstartMixin):
    """Tabu search driven by a move sampler and a restart handler.

    Stopping criteria, checked before each iteration:
        - `nb_iteration_max` iterations done,
        - `time_limit` seconds elapsed,
        - the best solution is proven optimal (see `is_proven_optimal()`),
        - a callback asked to stop at the end of the previous iteration.

    """

    hyperparameters = [
        IntegerHyperparameter(name="nb_iteration_max", low=0, default=5000),
        IntegerHyperparameter(name="neighborhood_samples", low=0, default=200),
        IntegerHyperparameter(name="tabu_tenure", low=0, default=25),
    ]

    initial_solution: Optional[Solution] = None
    """Initial solution used for warm start."""

    def __init__(
        self,
        problem: Problem,
        mutator: Mutation,
        restart_handler: Optional[RestartHandler] = None,
        params_objective_function: Optional[ParamsObjectiveFunction] = None,
        **kwargs: Any,
    ):
        super().__init__(
            problem=problem, params_objective_function=params_objective_function
        )
        self.mutator = mutator
        if restart_handler is None:
            restart_handler = RestartHandler()
        self.restart_handler = restart_handler
        self.nb_iterations = 0
        self.best_iteration = 0
        self.elapsed_time = 0.0
        self.best_solution: Optional[Solution] = None
        self.best_fitness: Optional[fitness_class] = None

    def set_warm_start(self, solution: Solution) -> None:
        """Make the solver warm start from the given solution.

        Will be ignored if arg `initial_variable` is set and not None in call to `solve()`.

        """
        self.initial_solution = solution

    def build_initial_solution(self) -> Solution:
        """Starting point used when no warm start is given."""
        raise ValueError(
            "initial_variable cannot be None if self.initial_solution is None.\n"
            "Use set_warm_start() to define it."
        )

    def is_proven_optimal(self, solution: Solution, fitness: fitness_class) -> bool:
        """Tell whether a solution is known to be optimal, which stops the search."""
        return False

    def solve(
        self,
        initial_variable: Optional[Solution] = None,
        time_limit: Optional[float] = None,
        callbacks: Optional[list[Callback]] = None,
        tracer: Optional[TabuSearchTracer] = None,
        **kwargs: Any,
    ) -> ResultStorage:
        """Run the tabu search.

        Args:
            initial_variable: starting solution, defaults to the warm start
                or to `build_initial_solution()`.
            time_limit: wall-clock limit in seconds, checked before each iteration.
            callbacks: called at the start, after each iteration, and at the end.
            tracer: receives a detailed account of every step.
            **kwargs: hyperparameters `nb_iteration_max`, `neighborhood_samples`, `tabu_tenure`.

        Returns:
            the result storage, containing the initial solution and then every
            new best solution in the order they were found.

        """
        kwargs = self.complete_with_default_hyperparameters(kwargs)
        nb_iteration_max = kwargs["nb_iteration_max"]
        neighborhood_samples = kwargs["neighborhood_samples"]
        if time_limit is not None and time_limit < 0:
            raise ValueError(f"time_limit must be >= 0, got {time_limit}")
        if tracer is None:
            tracer = TabuSearchTracer()
        callbacks_list = CallbackList(callbacks=callbacks)
        start = time.perf_counter()

        if initial_variable is None:
            if self.initial_solution is None:
                initial_variable = self.build_initial_solution()
            else:
                initial_variable = self.initial_solution

        cur_variable = initial_variable.copy()
        cur_fitness = self.aggreg_from_sol(cur_variable)
        self.best_solution = cur_variable.copy()
        self.best_fitness = cur_fitness
        self.best_iteration = 0
        self.status_solver = StatusSolver.SATISFIED
        tabu_list = TabuList(kwargs["tabu_tenure"])
        self.restart_handler.start_search(cur_variable, cur_fitness)
        store = self.create_result_storage([(self.best_solution.copy(), cur_fitness)])
        # start of solve callback
        callbacks_list.on_solve_start(solver=self)
        tracer.on_solve_start(self, cur_variable, cur_fitness)

        iteration = 0
        while iteration < nb_iteration_max and not self.is_proven_optimal(
            self.best_solution, self.best_fitness
        ):
            if time_limit is not None and time.perf_counter() - start >= time_limit:
                logger.info(f"Time limit reached after {iteration} iterations")
                tracer.on_time_limit(iteration + 1)
                break
            iteration += 1
            if self.restart_handler.should_restart(iteration):
                cur_variable = self.restart_handler.restart(cur_variable)
                cur_fitness = self.aggreg_from_sol(cur_variable)
                tabu_list.clear()
                logger.debug(f"iter {iteration}: stagnation, restart and clear tabu")
                tracer.on_restart(iteration, cur_variable)
            tracer.on_iteration_start(
                iteration, cur_fitness, self.best_fitness, len(tabu_list)
            )

            chosen_move: Optional[LocalMove] = None
            chosen_variable: Optional[Solution] = None
            chosen_fitness: Optional[fitness_class] = None
            for sample in range(neighborhood_samples):
                move = self.mutator.sample_local_move(cur_variable)
                if move is None:
                    continue
                candidate = move.apply_local_move(cur_variable)
                fitness = self.aggreg_from_sol(candidate)
                is_tabu = move.key in tabu_list
                aspiration = self.is_better(fitness, self.best_fitness)
                allowed = not is_tabu or aspiration
                tracer.on_candidate(
                    sample, move, candidate, fitness, is_tabu, aspiration, allowed
                )
                if not allowed:
                    continue
                if chosen_fitness is None or self.is_better(fitness, chosen_fitness):
                    chosen_move = move
                    chosen_variable = candidate
                    chosen_fitness = fitness

            global_improvement = False
            if chosen_move is None:
                tracer.on_no_admissible_candidate(iteration)
            else:
                cur_variable = chosen_variable
                cur_fitness = chosen_fitness
                tabu_list.push(chosen_move.key)
                tracer.on_move_accepted(iteration, chosen_move, cur_variable, cur_fitness)
                if self.is_better(cur_fitness, self.best_fitness):
                    global_improvement = True
                    logger.debug(
                        f"iter {iteration}: new best {cur_fitness} better than {self.best_fitness}"
                    )
                    self.best_solution = cur_variable.copy()
                    self.best_fitness = cur_fitness
                    self.best_iteration = iteration
                    store.append((self.best_solution.copy(), cur_fitness))
                    tracer.on_new_best(iteration, cur_variable, cur_fitness)
            self.restart_handler.update(
                iteration, cur_variable, cur_fitness, global_improvement
            )

            # end of step callback: stopping?
            stopping = callbacks_list.on_step_end(
                step=iteration, res=store, solver=self
            )
            if stopping:
                break

        self.nb_iterations = iteration
        self.elapsed_time = time.perf_counter() - start
        if self.is_proven_optimal(self.best_solution, self.best_fitness):
            self.status_solver = StatusSolver.OPTIMAL
        logger.info(
            f"Tabu search done: {iteration} iterations, best fitness {self.best_fitness} "
            f"found at iteration {self.best_iteration}, {self.elapsed_time:.4f}s"
        )
        # end of solve callback
        callbacks_list.on_solve_end(res=store, solver=self)
        tracer.on_solve_end(self, self.best_solution, self.best_fitness)
        return store
