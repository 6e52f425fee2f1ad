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
"""Expression helpers: constants, string building, CASE, SQL functions, subqueries.

Everything here returns plain SQLAlchemy expressions, usable in
predicates, projections and sort keys alike.

Example::

    sub = Expressions.alias_of(Member, "member_sub")
    oldest = FilterOperator.eq(Member.age, Expressions.sub_select(func.max(sub.age)))

    label = (
        Expressions.case(Member.age)
        .when(10).then("ten")
        .when(20).then("twenty")
        .otherwise("other")
    )
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import ColumnElement, String, case, cast, func, literal, select
from sqlalchemy.orm import aliased

from querystudy.data.relational.predicate import Predicate
from querystudy.kernel.exceptions import InvalidArgumentError


def _as_clause(value: Any) -> Any:
    if isinstance(value, Predicate):
        return value.clause
    return value


class Expressions:
    """Static factory for commonly needed expressions."""

    @staticmethod
    def constant(value: Any) -> ColumnElement[Any]:
        """A literal value selected alongside columns."""
        return literal(value)

    @staticmethod
    def string_value(expression: Any) -> ColumnElement[str]:
        """Cast any expression to a string."""
        return cast(expression, String)

    @staticmethod
    def concat(*parts: Any) -> ColumnElement[str]:
        """String concatenation; plain strings become bound literals."""
        if not parts:
            raise InvalidArgumentError("concat needs at least one part")
        clauses = [literal(p, String) if isinstance(p, str) else p for p in parts]
        result = clauses[0]
        for clause in clauses[1:]:
            result = result.concat(clause)
        return result

    @staticmethod
    def lower(expression: Any) -> ColumnElement[str]:
        return func.lower(expression)

    @staticmethod
    def function(name: str, *args: Any) -> ColumnElement[Any]:
        """Call a SQL function by name.

        Only functions the database dialect knows can be executed; an
        unknown name fails when the statement runs, not here.
        """
        return getattr(func, name)(*args)

    @staticmethod
    def alias_of(entity: type, name: str) -> Any:
        """Second, independently named reference to *entity* for self-referencing subqueries."""
        return aliased(entity, name=name)

    @staticmethod
    def sub_select(expression: Any, where: Any = None) -> Any:
        """Scalar subquery ``(SELECT <expression> [WHERE ...])``."""
        return Predicate.of(where).apply(select(expression)).scalar_subquery()

    @staticmethod
    def sub_select_many(expression: Any, where: Any = None) -> Any:
        """Row subquery for ``IN`` predicates."""
        return Predicate.of(where).apply(select(expression))

    @staticmethod
    def case(subject: Any = None) -> CaseBuilder:
        """Start a CASE: simple when *subject* is given, searched otherwise."""
        return CaseBuilder(subject)


class CaseBuilder:
    """``when(...).then(...)`` chain ending in ``otherwise(...)``."""

    def __init__(self, subject: Any = None) -> None:
        self._subject = subject
        self._whens: list[tuple[Any, Any]] = []

    def when(self, condition: Any) -> _CaseWhen:
        """Add a branch: a value to compare with the subject, or a boolean condition."""
        return _CaseWhen(self, condition)

    def _add(self, condition: Any, result: Any) -> CaseBuilder:
        if self._subject is not None:
            condition = self._subject == condition
        self._whens.append((_as_clause(condition), result))
        return self

    def otherwise(self, default: Any) -> ColumnElement[Any]:
        if not self._whens:
            raise InvalidArgumentError("case needs at least one when/then branch")
        return case(*self._whens, else_=default)


class _CaseWhen:
    __slots__ = ("_builder", "_condition")

    def __init__(self, builder: CaseBuilder, condition: Any) -> None:
        self._builder = builder
        self._condition = condition

    def then(self, result: Any) -> CaseBuilder:
        return self._builder._add(self._condition, result)
