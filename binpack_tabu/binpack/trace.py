"""Human readable account of a tabu search run, for teaching and debugging.

Items are shown 1-based as ``item:size``.
"""

#  Copyright (c) 2025 AIRBUS and its affiliates.
#  This source code is licensed under the MIT license found in the
#  LICENSE file in the root directory of this source tree.

from __future__ import annotations

import sys
from collections.abc import Sequence
from typing import Optional, TextIO

from binpack_tabu.binpack.packing import Packing
from binpack_tabu.binpack.problem import BinPackProblem, BinPackSolution
from binpack_tabu.binpack.solvers.tabu import TabuParams, TabuResult, tabu_search
from binpack_tabu.generic_tools.do_mutation import LocalMove
from binpack_tabu.generic_tools.ls.tabu_search import TabuSearch, TabuSearchTracer
from binpack_tabu.generic_tools.mutations.permutation_mutations import (
    PermutationInsertMove,
    PermutationSwapMove,
)
from binpack_tabu.generic_tools.result_storage.result_storage import fitness_class


def format_order(problem: BinPackProblem, order: Sequence[int]) -> str:
    return " ".join(f"{i + 1}:{problem.sizes[i]}" for i in order)


def format_packing(problem: BinPackProblem, packing: Packing) -> list[str]:
    lines = []
    for index_bin, (bin_, load) in enumerate(zip(packing.bins, packing.bin_loads)):
        items = ", ".join(f"{i + 1}:{problem.sizes[i]}" for i in bin_)
        lines.append(f"    bin#{index_bin + 1:02} load={load:3} [{items}]")
    return lines


def format_fitness(fitness: fitness_class) -> str:
    nb_bins, unused = fitness
    return f"bins={nb_bins} unused={unused}"


class BinPackTraceWriter(TabuSearchTracer):
    """Write every step of a TabuBinPackSolver run to a text stream.

    Args:
        problem: the problem being solved
        stream: where to write, default to stdout
        show_candidates: write one line per sampled move
        show_packings: write the bins content after each accepted move
        seed: seed of the run, only reported in the header
        params: settings of the run, only reported in the header

    """

    def __init__(
        self,
        problem: BinPackProblem,
        stream: Optional[TextIO] = None,
        show_candidates: bool = True,
        show_packings: bool = False,
        seed: Optional[int] = None,
        params: Optional[TabuParams] = None,
    ):
        self.problem = problem
        self.stream = sys.stdout if stream is None else stream
        self.show_candidates = show_candidates
        self.show_packings = show_packings
        self.seed = seed
        self.params = params
        self.lower_bound = problem.lower_bound_nb_bins()

    def write(self, line: str = "") -> None:
        self.stream.write(line + "\n")

    def write_packing(self, packing: Packing) -> None:
        for line in format_packing(self.problem, packing):
            self.write(line)

    def describe_move(self, move: LocalMove) -> str:
        sizes = self.problem.sizes
        if isinstance(move, PermutationSwapMove):
            return (
                f"swap pos {move.position_1}<->{move.position_2}  items "
                f"{move.element_1 + 1}:{sizes[move.element_1]} <-> "
                f"{move.element_2 + 1}:{sizes[move.element_2]}"
            )
        if isinstance(move, PermutationInsertMove):
            return (
                f"insert from pos {move.from_position} to {move.to_position}  "
                f"item {move.item + 1}:{sizes[move.item]}"
            )
        return repr(move)

    def describe_chosen_move(self, move: LocalMove) -> str:
        sizes = self.problem.sizes
        if isinstance(move, PermutationSwapMove):
            key = move.key
            return (
                f"chosen move: swap items {key.a + 1}:{sizes[key.a]} "
                f"and {key.b + 1}:{sizes[key.b]}"
            )
        if isinstance(move, PermutationInsertMove):
            return (
                f"chosen move: insert item {move.item + 1}:{sizes[move.item]} "
                f"to position {move.to_position}"
            )
        return f"chosen move: {move!r}"

    def on_solve_start(
        self, solver: TabuSearch, solution: BinPackSolution, fitness: fitness_class
    ) -> None:
        problem = self.problem
        self.write("TRACE: Tabu Search")
        self.write(
            f"instance={problem.name} capacity={problem.capacity_bin} "
            f"n={problem.nb_items} seed={self.seed}"
        )
        if self.params is not None:
            self.write(
                "params: "
                + " ".join(f"{k}={v}" for k, v in self.params.as_kwargs().items())
            )
        self.write(f"lower_bound_bins={self.lower_bound}")
        self.write()
        self.write(
            f"init permutation (item:size): {format_order(problem, solution.permutation)}"
        )
        self.write(f"init objective: {format_fitness(fitness)}")
        if self.show_packings:
            self.write("  init packing:")
            self.write_packing(solution.packing)

    def on_restart(self, iteration: int, solution: BinPackSolution) -> None:
        self.write()
        self.write(
            f"it={iteration}: stagnation reached, diversify: "
            "shuffle(best permutation) + clear tabu"
        )

    def on_iteration_start(
        self,
        iteration: int,
        current_fitness: fitness_class,
        best_fitness: fitness_class,
        tabu_size: int,
    ) -> None:
        self.write()
        self.write(
            f"-- it={iteration} -- current {format_fitness(current_fitness)} "
            f"best {format_fitness(best_fitness)} tabu_size={tabu_size}"
        )

    def on_candidate(
        self,
        sample: int,
        move: LocalMove,
        candidate: BinPackSolution,
        fitness: fitness_class,
        is_tabu: bool,
        aspiration: bool,
        allowed: bool,
    ) -> None:
        if not self.show_candidates:
            return
        self.write(
            f"  sample#{sample + 1:03}: {self.describe_move(move):45} -> "
            f"{format_fitness(fitness)} tabu={is_tabu} "
            f"aspiration={aspiration} allowed={allowed}"
        )

    def on_no_admissible_candidate(self, iteration: int) -> None:
        self.write("  no admissible candidate found")

    def on_time_limit(self, iteration: int) -> None:
        self.write()
        self.write(f"stop: time_limit reached at it={iteration}")

    def on_move_accepted(
        self,
        iteration: int,
        move: LocalMove,
        solution: BinPackSolution,
        fitness: fitness_class,
    ) -> None:
        self.write(f"  {self.describe_chosen_move(move)}")
        self.write(f"  new current: {format_fitness(fitness)}")
        if self.show_packings:
            self.write("  packing after move:")
            self.write_packing(solution.packing)

    def on_new_best(
        self, iteration: int, solution: BinPackSolution, fitness: fitness_class
    ) -> None:
        self.write(f"  NEW BEST at it={iteration}: {format_fitness(fitness)}")
        if solution.packing.nb_bins <= self.lower_bound:
            self.write("stop: reached lower bound on bins")

    def on_solve_end(
        self, solver: TabuSearch, solution: BinPackSolution, fitness: fitness_class
    ) -> None:
        self.write()
        self.write(
            f"DONE: elapsed={solver.elapsed_time:.4f}s iters={solver.nb_iterations}"
        )
        self.write(f"best: {format_fitness(fitness)}")
        self.write(
            f"best permutation (item:size): {format_order(self.problem, solution.permutation)}"
        )
        if self.show_packings:
            self.write("best packing:")
            self.write_packing(solution.packing)


def tabu_search_trace(
    problem: BinPackProblem,
    seed: int = 0,
    params: Optional[TabuParams] = None,
    show_candidates: bool = True,
    show_packings: bool = False,
    stream: Optional[TextIO] = None,
) -> TabuResult:
    """Same search as `tabu_search()`, narrated step by step on the stream.

    Tracing does not draw any random number, so the result is identical to
    the one of `tabu_search()` with the same seed and parameters.

    """
    if params is None:
        params = TabuParams()
    tracer = BinPackTraceWriter(
        problem=problem,
        stream=stream,
        show_candidates=show_candidates,
        show_packings=show_packings,
        seed=seed,
        params=params,
    )
    return tabu_search(problem=problem, seed=seed, params=params, tracer=tracer)
