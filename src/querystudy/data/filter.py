# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Base filter utilities port: optional-criteria composition for all data adapters.

Subclasses supply adapter-specific factories (``_create_eq``,
``_create_noop``, ``_combine_and``) while inheriting the shared
``by()``, ``from_dict()``, ``from_example()`` and ``compose()``
algorithms.
"""

from __future__ import annotations

import dataclasses
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from typing import Any

from querystudy.kernel.exceptions import InvalidArgumentError


class BaseFilterUtils(ABC):
    """Shared criteria composition. Subclasses supply adapter-specific factories."""

    @staticmethod
    @abstractmethod
    def _create_eq(root: Any, field: str, value: Any) -> Any: ...

    @staticmethod
    @abstractmethod
    def _create_noop() -> Any: ...

    @classmethod
    def by(cls, root: Any, **kwargs: Any) -> Any:
        """Create a predicate from keyword arguments (all eq, ANDed, ``None`` skipped)."""
        return cls.from_dict(root, kwargs)

    @classmethod
    def from_dict(cls, root: Any, filters: Mapping[str, Any]) -> Any:
        """Create a predicate from a dict of field->value pairs (all eq, ANDed).

        ``None`` values are skipped.
        """
        specs = [cls._create_eq(root, field, value) for field, value in filters.items() if value is not None]
        return cls._combine_and(specs)

    @classmethod
    def from_example(cls, root: Any, example: Any) -> Any:
        """Create a predicate from an example entity/DTO.

        Extracts non-``None`` field values and creates eq filters for each.
        Supports dataclasses and any object with ``__dict__``.
        """
        return cls.from_dict(root, cls._criteria_items(example))

    @classmethod
    def compose(
        cls,
        criteria: Any,
        root: Any = None,
        **builders: Callable[[Any], Any],
    ) -> Any:
        """AND together one sub-predicate per present criterion.

        Criteria are visited in their declared order (dataclass field
        order or mapping insertion order). A criterion whose value is
        ``None`` is skipped. Each present value is handed to the builder
        registered under its name; names without a builder fall back to
        equality on the attribute of *root* with the same name.

        Returns the NONE predicate when nothing is present.
        """
        specs = []
        for name, value in cls._criteria_items(criteria).items():
            if value is None:
                continue
            builder = builders.get(name)
            if builder is not None:
                specs.append(builder(value))
            elif root is not None:
                specs.append(cls._create_eq(root, name, value))
            else:
                raise InvalidArgumentError(
                    f"No predicate builder for criterion '{name}' and no root entity to compare against",
                    code="FILTER_CRITERION",
                    context={"criterion": name},
                )
        return cls._combine_and(specs)

    @staticmethod
    def _criteria_items(criteria: Any) -> dict[str, Any]:
        if isinstance(criteria, Mapping):
            return dict(criteria)
        if dataclasses.is_dataclass(criteria) and not isinstance(criteria, type):
            return {f.name: getattr(criteria, f.name) for f in dataclasses.fields(criteria)}
        if isinstance(criteria, tuple) and hasattr(criteria, "_asdict"):
            return dict(criteria._asdict())
        try:
            attributes = vars(criteria)
        except TypeError as exc:
            raise InvalidArgumentError(
                f"Cannot read criteria fields from {type(criteria).__name__}; "
                "pass a mapping, dataclass, named tuple or plain object",
                code="FILTER_CRITERIA",
                context={"type": type(criteria).__name__},
            ) from exc
        return {k: v for k, v in attributes.items() if not k.startswith("_")}

    @classmethod
    @abstractmethod
    def _combine_and(cls, specs: list[Any]) -> Any:
        """AND-combine a list of specs. Returns a no-op if empty."""
