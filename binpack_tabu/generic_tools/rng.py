"""Deterministic pseudo-random generator used by the solvers.

The generator is a 64-bit xorshift with a fixed update rule, so that a given
seed reproduces exactly the same search on every platform. It is not
suitable for cryptography.
"""

#  Copyright (c) 2025 AIRBUS and its affiliates.
#  This source code is licensed under the MIT license found in the
#  LICENSE file in the root directory of this source tree.

from __future__ import annotations

from collections.abc import MutableSequence
from typing import Any

MASK_64 = 0xFFFFFFFFFFFFFFFF
SEED_ZERO_REPLACEMENT = 0x9E3779B97F4A7C15
STATE_ZERO_REPLACEMENT = 0xD1B54A32D192ED03


class XorShift64:
    """Xorshift generator on 64-bit words (shifts 13, 7, 17).

    The internal state is never zero: a zero seed is remapped to a fixed
    odd constant, and a step reaching zero is replaced by another constant.

    Args:
        seed: any non-negative integer, only its 64 lowest bits are used.

    """

    def __init__(self, seed: int = 0):
        self.seed(seed)

    def seed(self, seed: int = 0) -> None:
        """Reset the generator state from the given seed."""
        state = seed & MASK_64
        self.state = SEED_ZERO_REPLACEMENT if state == 0 else state

    def next_u64(self) -> int:
        x = self.state
        x ^= (x << 13) & MASK_64
        x ^= x >> 7
        x ^= (x << 17) & MASK_64
        if x == 0:
            x = STATE_ZERO_REPLACEMENT
        self.state = x
        return x

    def random(self) -> float:
        """Uniform float in [0, 1) built from the 53 high bits of a draw."""
        return (self.next_u64() >> 11) * (1.0 / (1 << 53))

    def randbelow(self, bound: int) -> int:
        """Uniform integer in [0, bound), 0 when bound is 0 (no draw then)."""
        if bound == 0:
            return 0
        return self.next_u64() % bound

    def randint(self, low: int, high: int) -> int:
        """Uniform integer in [low, high], both ends included."""
        if low > high:
            raise ValueError(f"empty range [{low}, {high}]")
        return low + self.next_u64() % (high - low + 1)

    def shuffle(self, x: MutableSequence[Any]) -> None:
        """Shuffle the sequence in place (Fisher-Yates from the end)."""
        for i in range(len(x) - 1, 0, -1):
            j = self.randbelow(i + 1)
            x[i], x[j] = x[j], x[i]
