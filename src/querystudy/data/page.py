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
"""Result bundle for offset/limit paginated queries."""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class ResultPage(Generic[T]):
    """A window of results plus the total count ignoring the window.

    Attributes:
        items: The rows inside the window, in query order.
        total: Number of rows matching the filter with paging removed.
        limit: Maximum rows requested for the window.
        offset: Number of leading rows skipped.
    """

    items: list[T]
    total: int
    limit: int
    offset: int

    @property
    def total_pages(self) -> int:
        """Total number of windows of size ``limit``."""
        if self.total == 0:
            return 0
        return math.ceil(self.total / self.limit)

    @property
    def has_next(self) -> bool:
        """Whether rows exist after this window."""
        return self.offset + len(self.items) < self.total

    @property
    def has_previous(self) -> bool:
        """Whether rows exist before this window."""
        return self.offset > 0

    def map(self, func: Callable[[T], U]) -> ResultPage[U]:
        """Transform items using a mapping function, preserving paging metadata."""
        return ResultPage(
            items=[func(item) for item in self.items],
            total=self.total,
            limit=self.limit,
            offset=self.offset,
        )
