#  Copyright (c) 2025 AIRBUS and its affiliates.
#  This source code is licensed under the MIT license found in the
#  LICENSE file in the root directory of this source tree.

from __future__ import annotations

from typing import Any, Optional

from binpack_tabu.generic_tools.hyperparameters.hyperparameter import Hyperparameter


class Hyperparametrizable:
    """Class whose `solve()` accepts the keyword arguments listed in `hyperparameters`.

    Subclasses extend the list of their parent, e.g.
    `hyperparameters = Parent.hyperparameters + [...]`.

    """

    hyperparameters: list[Hyperparameter] = []

    @classmethod
    def get_hyperparameters_names(cls) -> list[str]:
        return [h.name for h in cls.hyperparameters]

    @classmethod
    def get_hyperparameter(cls, name: str) -> Hyperparameter:
        for hyperparameter in cls.hyperparameters:
            if hyperparameter.name == name:
                return hyperparameter
        raise KeyError(f"{cls.__name__} has no hyperparameter {name}")

    @classmethod
    def get_default_hyperparameters(
        cls, names: Optional[list[str]] = None
    ) -> dict[str, Any]:
        """Default values, keyed by `name_in_kwargs`.

        Args:
            names: hyperparameters to consider, all of them when None

        """
        if names is None:
            names = cls.get_hyperparameters_names()
        defaults = {}
        for name in names:
            hyperparameter = cls.get_hyperparameter(name)
            defaults[hyperparameter.name_in_kwargs] = hyperparameter.default
        return defaults

    @classmethod
    def complete_with_default_hyperparameters(
        cls, kwargs: dict[str, Any], names: Optional[list[str]] = None
    ) -> dict[str, Any]:
        """Copy of kwargs where missing or None hyperparameters take their default.

        Keys that are not hyperparameters are kept untouched. The values of
        the hyperparameters are checked.

        Raises:
            ValueError: if a hyperparameter value is out of its range or of the wrong type

        """
        completed = cls.get_default_hyperparameters(names=names)
        for key, value in kwargs.items():
            if value is not None or key not in completed:
                completed[key] = value
        if names is None:
            names = cls.get_hyperparameters_names()
        for name in names:
            hyperparameter = cls.get_hyperparameter(name)
            value = completed[hyperparameter.name_in_kwargs]
            if value is not None:
                hyperparameter.check_value(value)
        return completed
