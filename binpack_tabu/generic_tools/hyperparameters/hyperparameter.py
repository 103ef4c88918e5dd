#  Copyright (c) 2025 AIRBUS and its affiliates.
#  This source code is licensed under the MIT license found in the
#  LICENSE file in the root directory of this source tree.

from __future__ import annotations

from dataclasses import dataclass
from numbers import Real
from typing import Any, Optional


@dataclass
class Hyperparameter:
    """Keyword argument of a solver `solve()`, with its default value."""

    name: str
    default: Optional[Any] = None
    """None when the hyperparameter has no default."""

    name_in_kwargs: Optional[str] = None
    """Key of the hyperparameter in the solver kwargs, its name when None."""

    def __post_init__(self) -> None:
        if self.name_in_kwargs is None:
            self.name_in_kwargs = self.name

    def check_value(self, value: Any) -> None:
        """Raise ValueError when `value` cannot be used."""
        pass


@dataclass
class _BoundedHyperparameter(Hyperparameter):
    low: Optional[Any] = None
    high: Optional[Any] = None
    """Bounds are inclusive. None means unbounded on that side."""

    def check_type(self, value: Any) -> None:
        raise NotImplementedError()

    def check_value(self, value: Any) -> None:
        # bool is a subclass of int, but never a valid count or rate
        if isinstance(value, bool):
            raise ValueError(f"{self.name}: boolean given, {value!r}")
        self.check_type(value)
        if self.low is not None and value < self.low:
            raise ValueError(f"{self.name} must be >= {self.low}, got {value}")
        if self.high is not None and value > self.high:
            raise ValueError(f"{self.name} must be <= {self.high}, got {value}")


@dataclass
class IntegerHyperparameter(_BoundedHyperparameter):
    low: Optional[int] = None
    high: Optional[int] = None
    default: Optional[int] = None

    def check_type(self, value: Any) -> None:
        if not isinstance(value, int):
            raise ValueError(f"{self.name} must be an integer, got {value!r}")


@dataclass
class FloatHyperparameter(_BoundedHyperparameter):
    """Real valued hyperparameter, integers being accepted as well."""

    low: Optional[float] = None
    high: Optional[float] = None
    default: Optional[float] = None

    def check_type(self, value: Any) -> None:
        if not isinstance(value, Real):
            raise ValueError(f"{self.name} must be a number, got {value!r}")
