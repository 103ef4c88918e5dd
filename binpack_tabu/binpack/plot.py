#  Copyright (c) 2025 AIRBUS and its affiliates.
#  This source code is licensed under the MIT license found in the
#  LICENSE file in the root directory of this source tree.

from typing import Any

import matplotlib.pyplot as plt

from binpack_tabu.binpack.packing import Packing
from binpack_tabu.binpack.problem import BinPackProblem


def plot_packing(problem: BinPackProblem, packing: Packing, ax: Any = None) -> Any:
    """Draw each bin as a bar stacking its items, with the capacity as a dashed line."""
    if ax is None:
        fig, ax = plt.subplots(1, figsize=(10, 5))
    for index_bin, bin_ in enumerate(packing.bins):
        bottom = 0
        for item in bin_:
            size = problem.sizes[item]
            ax.bar(index_bin + 1, size, bottom=bottom, edgecolor="black")
            ax.text(
                index_bin + 1,
                bottom + size / 2,
                str(item + 1),
                ha="center",
                va="center",
            )
            bottom += size
    ax.axhline(problem.capacity_bin, color="red", linestyle="--")
    ax.set_xlabel("bin")
    ax.set_ylabel("load")
    ax.set_title(
        f"{problem.name}: {packing.nb_bins} bins, unused={packing.unused_capacity}"
    )
    return ax
