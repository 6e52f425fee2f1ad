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
"""Result shapes for SQLAlchemy queries: entities, scalars, tuples and DTOs.

Name-based DTO projections (:meth:`Projections.bean`,
:meth:`Projections.fields`) match each selected expression to a
destination field by name. A column named differently from the field
must be renamed with :meth:`Projections.alias`; an unaliased mismatch is
silently dropped and the field keeps its default::

    Projections.fields(UserDto, Member.username, Member.age)
    # -> UserDto(name=None, age=10): "username" matches nothing

    Projections.fields(UserDto, Projections.alias(Member.username, "name"), Member.age)
    # -> UserDto(name="member1", age=10)

Positional projections (:meth:`Projections.constructor`, and classes
decorated with :func:`query_projection`) ignore names and check arity
and value types against the destination's declared fields when the
projection is built.
"""

from __future__ import annotations

import inspect
from collections.abc import Iterator, Sequence
from typing import Any, Generic, TypeVar

from sqlalchemy import ColumnClause, Label, Select
from sqlalchemy.orm import QueryableAttribute

from querystudy.data.projection import Projection, accepts, destination_fields
from querystudy.kernel.exceptions import InvalidArgumentError

T = TypeVar("T")

_QUERY_PROJECTION_ATTR = "__querystudy_query_projection__"


def _unwrap(expression: Any) -> Any:
    clause_element = getattr(expression, "__clause_element__", None)
    if callable(clause_element) and not isinstance(expression, type):
        return clause_element()
    return expression


def _render(expression: Any) -> str:
    return str(_unwrap(expression))


def _expression_name(expression: Any) -> str | None:
    if isinstance(expression, Label):
        return expression.name
    if isinstance(expression, QueryableAttribute):
        return expression.key
    if isinstance(expression, ColumnClause):
        return expression.key
    return None


def _python_type(expression: Any) -> type | None:
    sql_type = getattr(_unwrap(expression), "type", None)
    if sql_type is None:
        return None
    try:
        return sql_type.python_type
    except NotImplementedError:
        return None


class EntityProjection(Projection[T]):
    """Whole mapped entity per row."""

    def __init__(self, entity: type[T]) -> None:
        self._entity = entity

    def selections(self) -> Sequence[Any]:
        return [self._entity]

    def map_row(self, row: Sequence[Any]) -> T:
        return row[0]


class ScalarProjection(Projection[Any]):
    """One column value per row."""

    def __init__(self, expression: Any) -> None:
        self._expression = expression

    def selections(self) -> Sequence[Any]:
        return [self._expression]

    def map_row(self, row: Sequence[Any]) -> Any:
        return row[0]


class QueryTuple(Sequence[Any]):
    """Heterogeneous row addressable by the expression that selected each value."""

    __slots__ = ("_expressions", "_values")

    def __init__(self, expressions: Sequence[Any], values: Sequence[Any]) -> None:
        self._expressions = tuple(expressions)
        self._values = tuple(values)

    def get(self, expression: Any) -> Any:
        """Value selected by *expression* (the same object or an identical expression).

        Raises:
            KeyError: If *expression* was not part of the selection.
        """
        for candidate, value in zip(self._expressions, self._values, strict=True):
            if candidate is expression:
                return value
        key = _render(expression)
        for candidate, value in zip(self._expressions, self._values, strict=True):
            if _render(candidate) == key:
                return value
        raise KeyError(f"{key} is not part of this tuple's selection")

    def __getitem__(self, index: Any) -> Any:
        return self._values[index]

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._values)

    def to_tuple(self) -> tuple[Any, ...]:
        return self._values

    def __repr__(self) -> str:
        return f"[{', '.join(repr(v) for v in self._values)}]"


class TupleProjection(Projection[QueryTuple]):
    """Several expressions or entities per row, returned as :class:`QueryTuple`."""

    def __init__(self, *expressions: Any) -> None:
        if not expressions:
            raise InvalidArgumentError("a tuple projection needs at least one expression", code="PROJECTION_EMPTY")
        self._expressions = expressions

    def selections(self) -> Sequence[Any]:
        return list(self._expressions)

    def map_row(self, row: Sequence[Any]) -> QueryTuple:
        return QueryTuple(self._expressions, row)


class _NamedProjection(Projection[T]):
    """Matches expressions to destination fields by name."""

    def __init__(self, cls: type[T], *expressions: Any) -> None:
        names = []
        for expression in expressions:
            name = _expression_name(expression)
            if name is None:
                raise InvalidArgumentError(
                    f"{_render(expression)} has no name; alias it with Projections.alias()",
                    code="PROJECTION_UNNAMED",
                )
            names.append(name)
        self._cls = cls
        self._expressions = expressions
        self._names = tuple(names)
        self._writable = frozenset(name for name, _ in destination_fields(cls))

    def selections(self) -> Sequence[Any]:
        return list(self._expressions)


class BeanProjection(_NamedProjection[T]):
    """Construct with no arguments, then assign each matching field."""

    def __init__(self, cls: type[T], *expressions: Any) -> None:
        super().__init__(cls, *expressions)
        try:
            inspect.signature(cls).bind()
        except TypeError as exc:
            raise InvalidArgumentError(
                f"{cls.__name__} cannot be constructed without arguments",
                code="PROJECTION_BEAN",
            ) from exc

    def map_row(self, row: Sequence[Any]) -> T:
        instance = self._cls()
        for name, value in zip(self._names, row, strict=True):
            if name in self._writable:
                setattr(instance, name, value)
        return instance


class FieldsProjection(_NamedProjection[T]):
    """Construct passing every matching field as a keyword argument."""

    def map_row(self, row: Sequence[Any]) -> T:
        kwargs = {name: value for name, value in zip(self._names, row, strict=True) if name in self._writable}
        return self._cls(**kwargs)


class ConstructorProjection(Projection[T]):
    """Construct positionally; arity and types are checked, names are ignored."""

    def __init__(self, cls: type[T], *expressions: Any) -> None:
        params = destination_fields(cls)
        if len(params) != len(expressions):
            raise InvalidArgumentError(
                f"{cls.__name__} takes {len(params)} positional fields, got {len(expressions)} expressions",
                code="PROJECTION_ARITY",
            )
        for (name, hint), expression in zip(params, expressions, strict=True):
            value_type = _python_type(expression)
            if value_type is not None and not accepts(hint, value_type):
                raise InvalidArgumentError(
                    f"{cls.__name__}.{name} is declared {hint!r} but {_render(expression)} yields {value_type.__name__}",
                    code="PROJECTION_TYPE",
                    context={"field": name},
                )
        self._cls = cls
        self._expressions = expressions

    def selections(self) -> Sequence[Any]:
        return list(self._expressions)

    def map_row(self, row: Sequence[Any]) -> T:
        return self._cls(*row)


class _TypedConstructor(Generic[T]):
    """Positional projection builder attached by :func:`query_projection`."""

    def __init__(self, cls: type[T]) -> None:
        self._cls = cls

    def __call__(self, *expressions: Any) -> ConstructorProjection[T]:
        return ConstructorProjection(self._cls, *expressions)


def query_projection(cls: type[T]) -> type[T]:
    """Give a DTO a typed positional projection builder, ``cls.projection(*expressions)``.

    Usage::

        @query_projection
        @dataclass
        class MemberDto:
            username: str | None = None
            age: int | None = None

        executor.fetch_many(projection=MemberDto.projection(Member.username, Member.age))
    """
    setattr(cls, _QUERY_PROJECTION_ATTR, tuple(destination_fields(cls)))
    setattr(cls, "projection", _TypedConstructor(cls))
    return cls


def is_query_projection(cls: type) -> bool:
    """Check if a type was decorated with :func:`query_projection`."""
    return _QUERY_PROJECTION_ATTR in vars(cls)


class Projections:
    """Factory for every supported result shape."""

    @staticmethod
    def entity(entity: type[T]) -> EntityProjection[T]:
        return EntityProjection(entity)

    @staticmethod
    def scalar(expression: Any) -> ScalarProjection:
        return ScalarProjection(expression)

    @staticmethod
    def tuple(*expressions: Any) -> TupleProjection:
        return TupleProjection(*expressions)

    @staticmethod
    def bean(cls: type[T], *expressions: Any) -> BeanProjection[T]:
        """No-arg construction followed by attribute assignment by name."""
        return BeanProjection(cls, *expressions)

    @staticmethod
    def fields(cls: type[T], *expressions: Any) -> FieldsProjection[T]:
        """Keyword construction by name."""
        return FieldsProjection(cls, *expressions)

    @staticmethod
    def constructor(cls: type[T], *expressions: Any) -> ConstructorProjection[T]:
        """Positional construction by declared order and type."""
        return ConstructorProjection(cls, *expressions)

    @staticmethod
    def alias(expression: Any, name: str) -> Label[Any]:
        """Rename *expression* so name-based projections bind it to field *name*."""
        if isinstance(expression, Select):
            expression = expression.scalar_subquery()
        return expression.label(name)


def as_projection(value: Any, root: type) -> Projection[Any]:
    """Normalise the ``projection`` argument of executor calls."""
    if value is None:
        return EntityProjection(root)
    if isinstance(value, Projection):
        return value
    if isinstance(value, type):
        return EntityProjection(value)
    return ScalarProjection(value)
