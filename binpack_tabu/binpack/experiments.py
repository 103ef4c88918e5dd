#  Copyright (c) 2025 AIRBUS and its affiliates.
#  This source code is licensed under the MIT license found in the
#  LICENSE file in the root directory of this source tree.
"""Repeated tabu search runs over consecutive seeds, and their text reports."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, TextIO

import numpy as np
import tqdm

from binpack_tabu.binpack.problem import BinPackProblem
from binpack_tabu.binpack.reference import (
    ReferenceSource,
    exact_reference,
    gap_percent,
)
from binpack_tabu.binpack.solvers.tabu import TabuParams, TabuResult, tabu_search

logger = logging.getLogger(__name__)


@dataclass
class RunSummary:
    instance_name: str
    mean_obj: float
    best_obj: int
    std_obj: float
    """Population standard deviation of the number of bins."""
    mean_time_s: float
    best_time_s: float


@dataclass
class ExactGapSummary:
    instance_name: str
    exact_bins: Optional[int]
    mean_obj: float
    best_obj: int
    std_obj: float
    mean_time_s: float
    best_time_s: float
    gap_per_run: list[float] = field(default_factory=list)
    exact_source: Optional[ReferenceSource] = None
    """LOWER_BOUND when `exact_bins` is only a lower bound on the optimum."""


def _run_seeds(
    problem: BinPackProblem,
    runs: int,
    seed0: int,
    params: Optional[TabuParams],
    progress: bool,
    stream: Optional[TextIO],
    exact_bins: Optional[int] = None,
) -> list[TabuResult]:
    if runs < 1:
        raise ValueError(f"runs must be >= 1, got {runs}")
    results = []
    for r in tqdm.tqdm(range(runs), desc=problem.name, disable=not progress):
        seed = seed0 + r
        if stream is not None:
            stream.write(f"  run {r + 1}/{runs} seed={seed}\n")
        res = tabu_search(problem=problem, seed=seed, params=params)
        results.append(res)
        if stream is not None:
            if exact_bins is None:
                stream.write(
                    f"    result: bins={res.best_nb_bins} unused={res.best_unused} "
                    f"time={res.elapsed:.4f}s iters={res.nb_iterations}\n"
                )
            else:
                stream.write(
                    f"    found_bins={res.best_nb_bins} "
                    f"gap_percent={gap_percent(res.best_nb_bins, exact_bins):.2f} "
                    f"time={res.elapsed:.4f}s iters={res.nb_iterations}\n"
                )
    return results


def run_instance(
    problem: BinPackProblem,
    runs: int,
    seed0: int = 0,
    params: Optional[TabuParams] = None,
    progress: bool = False,
    stream: Optional[TextIO] = None,
) -> tuple[RunSummary, list[int], list[float]]:
    """Run the tabu search with seeds seed0, seed0 + 1, ..., seed0 + runs - 1.

    Args:
        problem: instance to solve
        runs: number of runs, at least 1
        seed0: seed of the first run
        params: settings shared by all runs
        progress: display a tqdm progress bar
        stream: if given, one line per run is written to it

    Returns:
        the summary, the number of bins of each run, the duration of each run

    """
    if stream is not None:
        stream.write(
            f"instance={problem.name} capacity={problem.capacity_bin} n={problem.nb_items}\n"
        )
    results = _run_seeds(
        problem=problem,
        runs=runs,
        seed0=seed0,
        params=params,
        progress=progress,
        stream=stream,
    )
    objs = [res.best_nb_bins for res in results]
    times = [res.elapsed for res in results]
    summary = RunSummary(
        instance_name=problem.name,
        mean_obj=float(np.mean(objs)),
        best_obj=min(objs),
        std_obj=float(np.std(objs)),
        mean_time_s=float(np.mean(times)),
        best_time_s=min(times),
    )
    return summary, objs, times


def run_instance_with_exact(
    problem: BinPackProblem,
    runs: int,
    seed0: int = 0,
    params: Optional[TabuParams] = None,
    progress: bool = False,
    stream: Optional[TextIO] = None,
) -> ExactGapSummary:
    """Same as `run_instance()`, with the gap of every run to the exact reference."""
    exact = exact_reference(problem)
    exact_bins = None if exact is None else exact.bins
    exact_source = None if exact is None else exact.source
    if stream is not None:
        stream.write(
            f"instance={problem.name} capacity={problem.capacity_bin} n={problem.nb_items} "
            f"exact_bins={'N/A' if exact_bins is None else exact_bins} "
            f"exact_source={'N/A' if exact_source is None else exact_source}\n"
        )
    results = _run_seeds(
        problem=problem,
        runs=runs,
        seed0=seed0,
        params=params,
        progress=progress,
        stream=stream,
        exact_bins=exact_bins,
    )
    objs = [res.best_nb_bins for res in results]
    times = [res.elapsed for res in results]
    if exact_bins is None:
        gap_per_run = []
    else:
        gap_per_run = [gap_percent(b, exact_bins) for b in objs]
    return ExactGapSummary(
        instance_name=problem.name,
        exact_bins=exact_bins,
        mean_obj=float(np.mean(objs)),
        best_obj=min(objs),
        std_obj=float(np.std(objs)),
        mean_time_s=float(np.mean(times)),
        best_time_s=min(times),
        gap_per_run=gap_per_run,
        exact_source=exact_source,
    )


def format_table(rows: list[RunSummary]) -> str:
    header = "{:<18}{:>10}{:>10}{:>10}{:>14}{:>14}".format(
        "Instance", "Mean Obj", "Best Obj", "Std Dev", "Mean Time(s)", "Best Time(s)"
    )
    lines = [header, "-" * len(header)]
    for r in rows:
        lines.append(
            f"{r.instance_name:<18}{r.mean_obj:>10.2f}{r.best_obj:>10}"
            f"{r.std_obj:>10.2f}{r.mean_time_s:>14.4f}{r.best_time_s:>14.4f}"
        )
    return "\n".join(lines) + "\n"


def format_exact_gap_table(rows: list[ExactGapSummary]) -> str:
    """Table of the gaps to the reference, a `*` marking lower bound references."""
    header = "{:<18}{:>7}{:>10}{:>10}{:>10}{:>14}{:>14}  {}".format(
        "Instance",
        "Exact",
        "Mean",
        "Best",
        "StdDev",
        "Mean Time(s)",
        "Best Time(s)",
        "Gap% (runs)",
    )
    lines = [header, "-" * len(header)]
    for r in rows:
        if r.exact_bins is None:
            exact = "-"
        elif r.exact_source == ReferenceSource.LOWER_BOUND:
            exact = f"{r.exact_bins}*"
        else:
            exact = str(r.exact_bins)
        gaps = ",".join(f"{g:.2f}" for g in r.gap_per_run) or "-"
        lines.append(
            f"{r.instance_name:<18}{exact:>7}{r.mean_obj:>10.2f}{r.best_obj:>10}"
            f"{r.std_obj:>10.2f}{r.mean_time_s:>14.4f}{r.best_time_s:>14.4f}  {gaps}"
        )
    if any(r.exact_source == ReferenceSource.LOWER_BOUND for r in rows):
        lines.append("* capacity lower bound, not a proven optimum")
    return "\n".join(lines) + "\n"


def compare_against_exact(
    problem: BinPackProblem,
    runs: int,
    seed0: int = 0,
    params: Optional[TabuParams] = None,
    stream: Optional[TextIO] = None,
) -> list[float]:
    """Write the reference of the instance then the gap of each run to it.

    Returns:
        the gap in percent of each run, empty if there is no reference.

    """
    exact = exact_reference(problem)
    if exact is None:
        if stream is not None:
            stream.write(
                f"instance={problem.name} exact=N/A (n={problem.nb_items}, "
                "no dataset-opt and too large for brute force)\n"
            )
        return []
    if stream is not None:
        stream.write(
            f"instance={problem.name} exact_bins={exact.bins} exact_source={exact.source}\n"
        )
    gaps = []
    for r in range(runs):
        seed = seed0 + r
        res = tabu_search(problem=problem, seed=seed, params=params)
        gap = gap_percent(res.best_nb_bins, exact.bins)
        gaps.append(gap)
        if stream is not None:
            stream.write(
                f"  run={r + 1} seed={seed} found_bins={res.best_nb_bins} "
                f"gap_percent={gap:.2f}\n"
            )
    if not exact.is_exact:
        logger.info(f"{problem.name}: gaps measured against the lower bound only")
    return gaps
