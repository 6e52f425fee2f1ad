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
"""Projection port and destination-type introspection.

A projection decides which expressions a query selects and how each
result row is turned into the caller's value (entity, tuple, DTO).
"""

from __future__ import annotations

import dataclasses
import inspect
import types
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any, Generic, TypeVar, Union, get_args, get_origin, get_type_hints

R = TypeVar("R")


class Projection(ABC, Generic[R]):
    """Maps selected expressions to result values."""

    @abstractmethod
    def selections(self) -> Sequence[Any]:
        """Expressions (or entities) to put in the SELECT list, in order."""

    @abstractmethod
    def map_row(self, row: Sequence[Any]) -> R:
        """Turn one result row into the projected value."""


def destination_fields(cls: type) -> list[tuple[str, Any]]:
    """Return ``(name, type hint)`` pairs a destination type declares, in order.

    Dataclasses report their fields; other classes report the annotated
    parameters of ``__init__`` (falling back to class annotations).
    """
    if dataclasses.is_dataclass(cls):
        hints = get_type_hints(cls)
        return [(f.name, hints.get(f.name, Any)) for f in dataclasses.fields(cls) if f.init]

    init = cls.__init__
    if init is not object.__init__:
        hints = get_type_hints(init)
        params = [p for p in inspect.signature(init).parameters.values() if p.name != "self"]
        return [(p.name, hints.get(p.name, Any)) for p in params if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)]

    return [(name, hint) for name, hint in get_type_hints(cls).items() if not name.startswith("_")]


def accepts(hint: Any, value_type: type) -> bool:
    """Whether a value of *value_type* may be bound to a field typed *hint*."""
    if hint is Any:
        return True
    origin = get_origin(hint)
    if origin is Union or origin is types.UnionType:
        return any(accepts(arg, value_type) for arg in get_args(hint) if arg is not type(None))
    if origin is not None:
        hint = origin
    if not isinstance(hint, type):
        return True
    # int widens to float, as it does for Python numbers
    if hint is float and issubclass(value_type, int):
        return True
    return issubclass(value_type, hint)
