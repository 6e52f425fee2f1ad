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
"""Single-field predicate builders and optional-criteria composition.

Every :class:`FilterOperator` builder returns NONE when its value is
``None``, so builders can be handed raw, possibly-missing search input
and combined without checks. :class:`FilterUtils` turns a whole set of
optional criteria into one AND-ed predicate.

Example::

    FilterOperator.eq(Member.username, "member1")       # username = 'member1'
    FilterOperator.ne(Member.username, "member1")       # username != 'member1'
    ~FilterOperator.eq(Member.username, "member1")      # username != 'member1'
    FilterOperator.is_not_null(Member.username)         # username IS NOT NULL
    FilterOperator.in_(Member.age, [10, 20])            # age IN (10, 20)
    FilterOperator.between(Member.age, 10, 30)          # age BETWEEN 10 AND 30
    FilterOperator.goe(Member.age, 30)                  # age >= 30
    FilterOperator.starts_with(Member.username, "mem")  # username LIKE 'mem%'

    # None values are skipped, the rest ANDed
    FilterUtils.from_dict(Member, {"username": "member1", "age": None})

    # Criteria object with per-field builders
    FilterUtils.compose(condition, age_goe=lambda v: FilterOperator.goe(Member.age, v))
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from querystudy.data.filter import BaseFilterUtils
from querystudy.data.relational.entity import column_attribute
from querystudy.data.relational.predicate import Predicate
from querystudy.kernel.exceptions import InvalidArgumentError


class FilterOperator:
    """Column-level predicate builders.

    *field* is a mapped attribute or any column expression; *value* may
    be a plain value or an expression such as a scalar subquery.
    """

    @staticmethod
    def eq(field: Any, value: Any) -> Predicate:
        """Equal to."""
        return Predicate.none() if value is None else Predicate(field == value)

    @staticmethod
    def ne(field: Any, value: Any) -> Predicate:
        """Not equal to."""
        return Predicate.none() if value is None else Predicate(field != value)

    @staticmethod
    def gt(field: Any, value: Any) -> Predicate:
        """Greater than."""
        return Predicate.none() if value is None else Predicate(field > value)

    @staticmethod
    def goe(field: Any, value: Any) -> Predicate:
        """Greater than or equal."""
        return Predicate.none() if value is None else Predicate(field >= value)

    @staticmethod
    def lt(field: Any, value: Any) -> Predicate:
        """Less than."""
        return Predicate.none() if value is None else Predicate(field < value)

    @staticmethod
    def loe(field: Any, value: Any) -> Predicate:
        """Less than or equal."""
        return Predicate.none() if value is None else Predicate(field <= value)

    @staticmethod
    def between(field: Any, low: Any, high: Any) -> Predicate:
        """Inclusive range; a missing bound leaves that side open."""
        if low is None:
            return FilterOperator.loe(field, high)
        if high is None:
            return FilterOperator.goe(field, low)
        return Predicate(field.between(low, high))

    @staticmethod
    def in_(field: Any, values: Iterable[Any] | Any) -> Predicate:
        """Value is in a list or in the rows of a subquery."""
        if values is None:
            return Predicate.none()
        return Predicate(field.in_(values))

    @staticmethod
    def not_in(field: Any, values: Iterable[Any] | Any) -> Predicate:
        """Value is not in a list or subquery."""
        if values is None:
            return Predicate.none()
        return Predicate(field.not_in(values))

    @staticmethod
    def like(field: Any, pattern: str | None) -> Predicate:
        """SQL LIKE pattern match."""
        return Predicate.none() if pattern is None else Predicate(field.like(pattern))

    @staticmethod
    def contains(field: Any, value: str | None) -> Predicate:
        """String contains (``LIKE '%value%'``)."""
        return Predicate.none() if value is None else Predicate(field.contains(value))

    @staticmethod
    def starts_with(field: Any, value: str | None) -> Predicate:
        """String prefix (``LIKE 'value%'``)."""
        return Predicate.none() if value is None else Predicate(field.startswith(value))

    @staticmethod
    def is_null(field: Any) -> Predicate:
        """Value is NULL."""
        return Predicate(field.is_(None))

    @staticmethod
    def is_not_null(field: Any) -> Predicate:
        """Value is NOT NULL."""
        return Predicate(field.is_not(None))


class FilterUtils(BaseFilterUtils):
    """Compose predicates from keyword arguments, dicts, examples or criteria objects.

    Usage::

        FilterUtils.by(Member, username="member1", age=None)   # username = 'member1'
        FilterUtils.from_example(Member, MemberDto(age=10))     # age = 10
    """

    @staticmethod
    def _create_eq(root: Any, field: str, value: Any) -> Predicate:
        column = column_attribute(root, field)
        if column is None:
            raise InvalidArgumentError(
                f"{getattr(root, '__name__', root)!s} has no mapped column '{field}'",
                code="FILTER_FIELD",
                context={"field": field},
            )
        return FilterOperator.eq(column, value)

    @staticmethod
    def _create_noop() -> Predicate:
        return Predicate.none()

    @classmethod
    def _combine_and(cls, specs: list[Any]) -> Predicate:
        if not specs:
            return cls._create_noop()
        return Predicate.all_of(*specs)
