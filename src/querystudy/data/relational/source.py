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
"""Query sources: the root entity plus joins, extra FROM roots and grouping.

A :class:`QuerySource` is immutable; every builder method returns a new
source. Joins come in two flavours that the rest of the query layer does
not distinguish:

* relationship traversal: ``join(Member.team)``;
* unrelated entities with an explicit condition:
  ``join(Team, on=Member.username == Team.name)`` or
  ``cross(Team)`` plus a linking predicate (theta join).

Example::

    source = QuerySource(Member).left_join(Member.team, on=Team.name == "teamA")
    source = QuerySource(Member).join(Member.team, fetch=True)
    source = QuerySource(Member).join(Member.team).group_by(Team.name)
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from sqlalchemy import Select, func, inspect, select
from sqlalchemy.orm import QueryableAttribute, RelationshipProperty, contains_eager

from querystudy.data.relational.predicate import Predicate


@dataclass(frozen=True)
class JoinClause:
    """One join step: target, optional extra condition, outer/fetch flags."""

    target: Any
    on: Predicate
    outer: bool = False
    fetch: bool = False

    @property
    def is_relationship(self) -> bool:
        return isinstance(self.target, QueryableAttribute) and isinstance(
            getattr(self.target, "property", None), RelationshipProperty
        )

    @property
    def is_collection(self) -> bool:
        """Whether the target is a one-to-many or many-to-many relationship."""
        return self.is_relationship and bool(self.target.property.uselist)


class QuerySource:
    """Root entity plus the join shape a query reads from."""

    __slots__ = ("_root", "_joins", "_crosses", "_group_by", "_having")

    def __init__(
        self,
        root: type,
        *,
        joins: tuple[JoinClause, ...] = (),
        crosses: tuple[Any, ...] = (),
        group_by: tuple[Any, ...] = (),
        having: Predicate | None = None,
    ) -> None:
        self._root = root
        self._joins = joins
        self._crosses = crosses
        self._group_by = group_by
        self._having = having or Predicate.none()

    @property
    def root(self) -> type:
        return self._root

    @property
    def joins(self) -> tuple[JoinClause, ...]:
        return self._joins

    @property
    def has_joins(self) -> bool:
        """Whether rows may be multiplied or grouped relative to the root table."""
        return bool(self._joins or self._crosses or self._group_by)

    @property
    def has_fetch_joins(self) -> bool:
        return any(j.fetch for j in self._joins)

    def fetch_joins(self, selections: Sequence[Any]) -> tuple[JoinClause, ...]:
        """Fetch joins that can populate an entity in *selections*.

        A fetch join only loads a relationship when the entity owning it
        is selected; column and DTO projections read the joined rows as is.
        """
        return tuple(
            j
            for j in self._joins
            if j.fetch and j.is_relationship and any(s is j.target.class_ for s in selections)
        )

    def _copy(self, **changes: Any) -> QuerySource:
        state = {
            "joins": self._joins,
            "crosses": self._crosses,
            "group_by": self._group_by,
            "having": self._having,
        }
        state.update(changes)
        return QuerySource(self._root, **state)

    # ------------------------------------------------------------------
    # Builders
    # ------------------------------------------------------------------

    def join(self, target: Any, on: Any = None, *, fetch: bool = False) -> QuerySource:
        """Inner join a relationship attribute or an entity (then *on* is the join condition)."""
        return self._copy(joins=self._joins + (JoinClause(target, Predicate.of(on), False, fetch),))

    def left_join(self, target: Any, on: Any = None, *, fetch: bool = False) -> QuerySource:
        """Left outer join; with a relationship target *on* narrows the join condition."""
        return self._copy(joins=self._joins + (JoinClause(target, Predicate.of(on), True, fetch),))

    def cross(self, *entities: Any) -> QuerySource:
        """Add FROM roots without a join condition; link them with a predicate."""
        return self._copy(crosses=self._crosses + tuple(entities))

    def group_by(self, *expressions: Any) -> QuerySource:
        return self._copy(group_by=self._group_by + tuple(expressions))

    def having(self, predicate: Any) -> QuerySource:
        return self._copy(having=self._having & predicate)

    # ------------------------------------------------------------------
    # Statement construction
    # ------------------------------------------------------------------

    def select(self, selections: Sequence[Any], *, eager: bool = True) -> Select[Any]:
        """Build ``SELECT <selections> FROM <root> <joins>`` without a WHERE clause."""
        eager_joins = self.fetch_joins(selections) if eager else ()
        stmt = select(*selections).select_from(self._root)
        for join in self._joins:
            stmt = self._apply_join(stmt, join, eager=any(join is j for j in eager_joins))
        if self._crosses:
            stmt = stmt.select_from(*self._crosses)
        if self._group_by:
            stmt = stmt.group_by(*self._group_by)
        if not self._having.is_none:
            stmt = stmt.having(self._having.clause)
        return stmt

    @staticmethod
    def _apply_join(stmt: Select[Any], join: JoinClause, *, eager: bool) -> Select[Any]:
        if join.is_relationship:
            target = join.target if join.on.is_none else join.target.and_(join.on.clause)
            stmt = stmt.join(target, isouter=join.outer)
        elif join.on.is_none:
            stmt = stmt.join(join.target, isouter=join.outer)
        else:
            stmt = stmt.join(join.target, join.on.clause, isouter=join.outer)
        if eager:
            stmt = stmt.options(contains_eager(join.target))
        return stmt

    def count_statement(self, predicate: Predicate, *, distinct_root: bool = False) -> Select[Any]:
        """Count rows matching *predicate*, ignoring ordering and paging.

        Without joins or grouping a plain ``SELECT count(*) FROM root``
        is used; otherwise the full join shape is wrapped in a subquery so
        row multiplication and grouping are counted as the query sees them.
        With *distinct_root* each root entity counts once however many
        joined rows it has, matching what a collection fetch join returns.
        """
        if not self.has_joins:
            return predicate.apply(select(func.count()).select_from(self._root))
        if distinct_root:
            inner = predicate.apply(self.select(inspect(self._root).primary_key, eager=False)).distinct()
            return select(func.count()).select_from(inner.subquery())
        selections = list(self._group_by) or [self._root]
        inner = predicate.apply(self.select(selections, eager=False))
        return select(func.count()).select_from(inner.subquery())

    def __repr__(self) -> str:
        return (
            f"QuerySource({getattr(self._root, '__name__', self._root)}, joins={len(self._joins)}, "
            f"crosses={len(self._crosses)}, group_by={len(self._group_by)})"
        )
