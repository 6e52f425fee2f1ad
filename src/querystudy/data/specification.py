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
"""Composable filter predicate port: abstract base for all data adapters.

A predicate is an immutable value that is either NONE (matches every row)
or wraps one backend boolean expression. Adapters implement the
combinators (``&``, ``|``, ``~``) so that a NONE operand is absorbed
instead of raising, which lets optional criteria be combined freely.

Type Parameters:
    Q: The backend statement the predicate is applied to
       (e.g. ``sqlalchemy.Select``).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

Q = TypeVar("Q")


class Specification(ABC, Generic[Q]):
    """Composable filter predicate port.

    Type Parameters:
        Q: The backend statement type (e.g. ``sqlalchemy.Select``).
    """

    @property
    @abstractmethod
    def is_none(self) -> bool:
        """Whether this is the NONE predicate that matches everything."""

    @abstractmethod
    def apply(self, query: Q) -> Q:
        """Return *query* filtered by this predicate (unchanged for NONE)."""

    @abstractmethod
    def __and__(self, other: Any) -> Specification[Q]: ...

    @abstractmethod
    def __or__(self, other: Any) -> Specification[Q]: ...

    @abstractmethod
    def __invert__(self) -> Specification[Q]: ...
