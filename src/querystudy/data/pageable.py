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
"""Sort keys and offset/limit page requests."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Literal

from querystudy.kernel.exceptions import InvalidArgumentError

Direction = Literal["asc", "desc"]
NullHandling = Literal["native", "first", "last"]


@dataclass(frozen=True)
class Order:
    """A single sort key.

    ``property`` is either an attribute name of the root entity or a
    column expression. ``nulls`` overrides the database's default null
    placement; ``"last"`` puts NULLs after every present value whatever
    the direction.
    """

    property: Any
    direction: Direction = "asc"
    nulls: NullHandling = "native"

    @staticmethod
    def asc(property: Any) -> Order:
        """Create an ascending order for the given property."""
        return Order(property=property, direction="asc")

    @staticmethod
    def desc(property: Any) -> Order:
        """Create a descending order for the given property."""
        return Order(property=property, direction="desc")

    def nulls_first(self) -> Order:
        return replace(self, nulls="first")

    def nulls_last(self) -> Order:
        return replace(self, nulls="last")


@dataclass(frozen=True)
class Sort:
    """Sort keys applied left to right, later keys breaking ties."""

    orders: tuple[Order, ...] = ()

    @staticmethod
    def by(*properties: Any) -> Sort:
        """Create ascending sort by properties."""
        return Sort(orders=tuple(Order.asc(p) for p in properties))

    @staticmethod
    def of(*orders: Order) -> Sort:
        """Create a sort from explicit orders."""
        return Sort(orders=tuple(orders))

    @staticmethod
    def unsorted() -> Sort:
        """No sorting."""
        return Sort()

    @property
    def is_sorted(self) -> bool:
        return bool(self.orders)

    def and_then(self, other: Sort) -> Sort:
        """Combine sorts, appending *other*'s orders after this sort's orders."""
        return Sort(orders=self.orders + other.orders)

    def descending(self) -> Sort:
        """Return same sort but all directions flipped to desc."""
        return Sort(orders=tuple(replace(o, direction="desc") for o in self.orders))

    def ascending(self) -> Sort:
        """Return same sort but all directions flipped to asc."""
        return Sort(orders=tuple(replace(o, direction="asc") for o in self.orders))


@dataclass(frozen=True)
class PageRequest:
    """Offset/limit window request.

    Raises:
        InvalidArgumentError: If ``offset`` is negative or ``limit`` is
            not positive.
    """

    offset: int = 0
    limit: int = 20

    def __post_init__(self) -> None:
        if self.offset < 0:
            raise InvalidArgumentError(f"offset must be >= 0, got {self.offset}", code="PAGE_OFFSET")
        if self.limit < 1:
            raise InvalidArgumentError(f"limit must be >= 1, got {self.limit}", code="PAGE_LIMIT")

    @staticmethod
    def of(offset: int, limit: int) -> PageRequest:
        return PageRequest(offset=offset, limit=limit)

    @staticmethod
    def of_page(page: int, size: int) -> PageRequest:
        """Create a request for a 1-based page number of the given size."""
        if page < 1:
            raise InvalidArgumentError(f"page must be >= 1, got {page}", code="PAGE_NUMBER")
        return PageRequest(offset=(page - 1) * size, limit=size)

    @property
    def page_number(self) -> int:
        """1-based page number this window starts in."""
        return self.offset // self.limit + 1

    def next(self) -> PageRequest:
        """Return the request for the following window."""
        return PageRequest(offset=self.offset + self.limit, limit=self.limit)

    def previous(self) -> PageRequest:
        """Return the request for the preceding window (never below offset 0)."""
        return PageRequest(offset=max(0, self.offset - self.limit), limit=self.limit)
