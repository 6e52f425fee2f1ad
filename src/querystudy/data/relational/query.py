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
"""Query executor: filtered, sorted, paged and projected reads plus bulk writes.

One executor wraps a session and a :class:`QuerySource`; each call is a
self-contained statement with no state kept between calls.

Cardinality contracts:

* :meth:`QueryExecutor.fetch_many`: list, empty when nothing matches.
* :meth:`QueryExecutor.fetch_one`: value or ``None``;
  :class:`MultipleResultsError` when more than one row matches.
* :meth:`QueryExecutor.fetch_first`: first row under the sort, or ``None``.
* :meth:`QueryExecutor.fetch_page`: :class:`ResultPage` with a separate
  total count.
* :meth:`QueryExecutor.fetch_count`: number of matching rows.

Fetch joins over a collection (``join(Team.members, fetch=True)``) return
each root entity once with its collection fully loaded. The database
cannot window such rows by entity, so offset and limit are applied after
de-duplication and totals count distinct root entities.

Bulk statements (:meth:`QueryExecutor.execute_update`,
:meth:`QueryExecutor.execute_delete`) go straight to the database and
leave entities already loaded in the session untouched. Until the caller
runs :func:`clear_persistence_context`, reads keep returning those stale
instances from the session's identity map.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Generic, TypeVar

import structlog
from sqlalchemy import delete, update
from sqlalchemy.exc import SQLAlchemyError

from querystudy.data.page import ResultPage
from querystudy.data.pageable import Order, PageRequest, Sort
from querystudy.data.ports.outbound import DataSession
from querystudy.data.projection import Projection
from querystudy.data.relational.entity import column_attribute
from querystudy.data.relational.predicate import Predicate
from querystudy.data.relational.projections import as_projection
from querystudy.data.relational.source import QuerySource
from querystudy.kernel.exceptions import DataSourceError, InvalidArgumentError, MultipleResultsError

T = TypeVar("T")

logger = structlog.get_logger("querystudy.data")


def clear_persistence_context(session: DataSession) -> None:
    """Flush pending changes and detach every loaded instance.

    Call after a bulk update/delete so the next read loads rows from the
    database instead of returning instances cached before the statement.
    """
    session.flush()
    session.expunge_all()


class QueryExecutor(Generic[T]):
    """Execute reads and bulk writes for one query source.

    Args:
        session: The unit of work to run statements in. Not thread-safe.
        source: An entity class or a :class:`QuerySource` with joins.

    Usage::

        members = QueryExecutor(session, Member)
        page = members.fetch_page(
            FilterOperator.goe(Member.age, 20),
            Sort.of(Order.desc("age")),
            PageRequest.of(0, 10),
        )
    """

    def __init__(self, session: DataSession, source: type[T] | QuerySource) -> None:
        self._session = session
        self._source = source if isinstance(source, QuerySource) else QuerySource(source)

    @property
    def source(self) -> QuerySource:
        return self._source

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def fetch_many(
        self,
        predicate: Any = None,
        sort: Sort | None = None,
        projection: Any = None,
    ) -> list[Any]:
        """All matching rows mapped through *projection*."""
        proj = as_projection(projection, self._source.root)
        stmt = self._select(predicate, sort, proj)
        items = self._fetch(stmt, proj)
        logger.debug("query_executed", operation="fetch_many", rows=len(items))
        return items

    def fetch_one(self, predicate: Any = None, projection: Any = None) -> Any | None:
        """The single matching row, or ``None`` when nothing matches.

        Raises:
            MultipleResultsError: If more than one row matches.
        """
        proj = as_projection(projection, self._source.root)
        items = self._fetch(self._select(predicate, None, proj), proj, limit=2)
        logger.debug("query_executed", operation="fetch_one", rows=len(items))
        if len(items) > 1:
            raise MultipleResultsError(
                "Query expected at most one row but matched several",
                code="QUERY_NON_UNIQUE",
                context={"source": repr(self._source), "predicate": repr(Predicate.of(predicate))},
            )
        return items[0] if items else None

    def fetch_first(
        self,
        predicate: Any = None,
        sort: Sort | None = None,
        projection: Any = None,
    ) -> Any | None:
        """The first matching row under *sort*, or ``None``."""
        proj = as_projection(projection, self._source.root)
        items = self._fetch(self._select(predicate, sort, proj), proj, limit=1)
        logger.debug("query_executed", operation="fetch_first", rows=len(items))
        return items[0] if items else None

    def fetch_page(
        self,
        predicate: Any = None,
        sort: Sort | None = None,
        page: PageRequest | None = None,
        projection: Any = None,
        *,
        count: Callable[[], int] | None = None,
    ) -> ResultPage[Any]:
        """One window of matching rows plus the total ignoring the window.

        The total comes from :meth:`fetch_count` unless *count* supplies a
        cheaper query. With a custom *count* the count is skipped whenever
        the window already reveals the total: a short first page, or a
        short page past the first.
        """
        if page is None:
            page = PageRequest()
        elif not isinstance(page, PageRequest):
            raise InvalidArgumentError(f"page must be a PageRequest, got {type(page).__name__}", code="PAGE_TYPE")

        proj = as_projection(projection, self._source.root)
        stmt = self._select(predicate, sort, proj)
        items = self._fetch(stmt, proj, offset=page.offset, limit=page.limit)

        if count is None:
            total = self._count(predicate, distinct_root=self._fetches_collection(proj))
        elif items and len(items) < page.limit:
            total = page.offset + len(items)
        elif not items and page.offset == 0:
            total = 0
        else:
            total = count()

        logger.debug(
            "query_executed",
            operation="fetch_page",
            rows=len(items),
            total=total,
            offset=page.offset,
            limit=page.limit,
        )
        return ResultPage(items=items, total=total, limit=page.limit, offset=page.offset)

    def fetch_count(self, predicate: Any = None) -> int:
        """Number of rows (root entities, under a collection fetch join) matching *predicate*."""
        root = as_projection(None, self._source.root)
        total = self._count(predicate, distinct_root=self._fetches_collection(root))
        logger.debug("query_executed", operation="fetch_count", total=total)
        return total

    # ------------------------------------------------------------------
    # Bulk writes
    # ------------------------------------------------------------------

    def execute_update(self, predicate: Any, assignments: Mapping[Any, Any]) -> int:
        """``UPDATE root SET ... WHERE predicate``; returns the affected row count.

        Keys of *assignments* are attribute names or mapped attributes;
        values are constants or expressions (``Member.age + 1``).
        The session's loaded instances are not refreshed.
        """
        if not assignments:
            raise InvalidArgumentError("execute_update needs at least one assignment", code="BULK_EMPTY")
        root = self._bulk_root()
        values = {self._resolve_field(key): value for key, value in assignments.items()}
        stmt = Predicate.of(predicate).apply(update(root).values(values))
        return self._execute_bulk(stmt, "update")

    def execute_delete(self, predicate: Any = None) -> int:
        """``DELETE FROM root WHERE predicate``; returns the affected row count.

        The session's loaded instances are not detached.
        """
        stmt = Predicate.of(predicate).apply(delete(self._bulk_root()))
        return self._execute_bulk(stmt, "delete")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _select(self, predicate: Any, sort: Sort | None, projection: Projection[Any]) -> Any:
        stmt = Predicate.of(predicate).apply(self._source.select(projection.selections()))
        for order in (sort or Sort.unsorted()).orders:
            stmt = stmt.order_by(self._order_clause(order))
        return stmt

    def _order_clause(self, order: Order) -> Any:
        column = self._resolve_field(order.property)
        clause = column.desc() if order.direction == "desc" else column.asc()
        if order.nulls == "first":
            clause = clause.nulls_first()
        elif order.nulls == "last":
            clause = clause.nulls_last()
        return clause

    def _resolve_field(self, field: Any) -> Any:
        if not isinstance(field, str):
            return field
        column = column_attribute(self._source.root, field)
        if column is None:
            raise InvalidArgumentError(
                f"{self._source.root.__name__} has no mapped column '{field}'",
                code="QUERY_FIELD",
                context={"field": field},
            )
        return column

    def _bulk_root(self) -> type:
        if self._source.has_joins:
            raise InvalidArgumentError(
                "bulk statements apply to the root entity only; use a source without joins",
                code="BULK_JOIN",
            )
        return self._source.root

    def _fetches_collection(self, projection: Projection[Any]) -> bool:
        return any(j.is_collection for j in self._source.fetch_joins(projection.selections()))

    def _fetch(
        self,
        stmt: Any,
        projection: Projection[Any],
        *,
        offset: int = 0,
        limit: int | None = None,
    ) -> list[Any]:
        fetch_joins = self._source.fetch_joins(projection.selections())
        in_memory = any(j.is_collection for j in fetch_joins)
        if not in_memory:
            if offset:
                stmt = stmt.offset(offset)
            if limit is not None:
                stmt = stmt.limit(limit)

        result = self._execute(stmt)
        if fetch_joins:
            result = result.unique()
        rows = result.all()
        if in_memory:
            rows = rows[offset:] if limit is None else rows[offset : offset + limit]
        return [projection.map_row(row) for row in rows]

    def _count(self, predicate: Any, *, distinct_root: bool) -> int:
        stmt = self._source.count_statement(Predicate.of(predicate), distinct_root=distinct_root)
        return int(self._execute(stmt).scalar_one())

    def _execute_bulk(self, stmt: Any, kind: str) -> int:
        stmt = stmt.execution_options(synchronize_session=False)
        affected = int(self._execute(stmt).rowcount or 0)
        logger.warning(
            "bulk_statement_executed",
            statement=kind,
            entity=self._source.root.__name__,
            affected=affected,
            hint="loaded instances are stale until the session is flushed and cleared",
        )
        return affected

    def _execute(self, stmt: Any) -> Any:
        try:
            return self._session.execute(stmt)
        except SQLAlchemyError as exc:
            raise DataSourceError(
                f"Statement failed: {exc.__class__.__name__}",
                code="DATA_SOURCE",
                context={"source": repr(self._source)},
            ) from exc
