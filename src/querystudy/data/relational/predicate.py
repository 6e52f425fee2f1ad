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
"""Immutable, nullable-aware filter predicates over SQLAlchemy clauses.

A :class:`Predicate` is either NONE (matches every row) or wraps exactly
one SQLAlchemy boolean clause. Combinators never raise on a missing
operand: NONE (and ``None``) is the identity of ``&`` and ``|``, and
``~NONE`` is NONE. That lets optional single-field builders be chained
without null checks at every call site::

    def username_eq(value: str | None) -> Predicate:
        return Predicate.none() if value is None else Predicate.of(Member.username == value)

    predicate = username_eq(None) & age_eq(10)   # just ``age = 10``
    stmt = predicate.apply(select(Member))
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import ColumnElement, and_, not_, or_
from sqlalchemy.exc import CompileError

from querystudy.data.specification import Specification


class Predicate(Specification[Any]):
    """Composable filter predicate for SQLAlchemy statements.

    * ``a & b``: both must match (AND).
    * ``a | b``: either may match (OR).
    * ``~a``: negation (NOT).

    Operands may be other predicates, raw SQLAlchemy boolean clauses or
    ``None``.
    """

    __slots__ = ("_clause",)

    def __init__(self, clause: ColumnElement[bool] | None = None) -> None:
        self._clause = clause

    @staticmethod
    def none() -> Predicate:
        """The predicate that matches every row."""
        return _NONE

    @staticmethod
    def of(value: Predicate | ColumnElement[bool] | None) -> Predicate:
        """Wrap a clause, pass a predicate through, or turn ``None`` into NONE."""
        if value is None:
            return _NONE
        if isinstance(value, Predicate):
            return value
        return Predicate(value)

    @staticmethod
    def all_of(*values: Predicate | ColumnElement[bool] | None) -> Predicate:
        """AND every operand, skipping ``None`` and NONE."""
        result = _NONE
        for value in values:
            result = result & value
        return result

    @staticmethod
    def any_of(*values: Predicate | ColumnElement[bool] | None) -> Predicate:
        """OR every operand, skipping ``None`` and NONE."""
        result = _NONE
        for value in values:
            result = result | value
        return result

    @property
    def clause(self) -> ColumnElement[bool] | None:
        """The wrapped clause, ``None`` for NONE."""
        return self._clause

    @property
    def is_none(self) -> bool:
        return self._clause is None

    def apply(self, query: Any) -> Any:
        """Add this predicate to the WHERE clause of a select/update/delete."""
        if self._clause is None:
            return query
        return query.where(self._clause)

    # ------------------------------------------------------------------
    # Combinators
    # ------------------------------------------------------------------

    def __and__(self, other: Any) -> Predicate:
        other = Predicate.of(other)
        if other.is_none:
            return self
        if self.is_none:
            return other
        return Predicate(and_(self._clause, other._clause))

    def __rand__(self, other: Any) -> Predicate:
        return Predicate.of(other) & self

    def __or__(self, other: Any) -> Predicate:
        other = Predicate.of(other)
        if other.is_none:
            return self
        if self.is_none:
            return other
        return Predicate(or_(self._clause, other._clause))

    def __ror__(self, other: Any) -> Predicate:
        return Predicate.of(other) | self

    def __invert__(self) -> Predicate:
        if self._clause is None:
            return self
        return Predicate(not_(self._clause))

    def and_(self, other: Any) -> Predicate:
        return self & other

    def or_(self, other: Any) -> Predicate:
        return self | other

    def not_(self) -> Predicate:
        return ~self

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------

    def to_sql(self) -> str | None:
        """Render the clause with inlined literals, ``None`` for NONE.

        Values the dialect cannot inline (datetimes on the default dialect)
        stay as bind parameters, followed by their values.
        """
        if self._clause is None:
            return None
        try:
            return str(self._clause.compile(compile_kwargs={"literal_binds": True}))
        except CompileError:
            compiled = self._clause.compile()
            return f"{compiled} {sorted(compiled.params.items())!r}"

    def equivalent_to(self, other: Predicate) -> bool:
        """Whether both predicates render the same filter."""
        return self.to_sql() == Predicate.of(other).to_sql()

    def __repr__(self) -> str:
        if self._clause is None:
            return "Predicate(NONE)"
        return f"Predicate({self._clause})"


_NONE = Predicate()
