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
"""Tests for result shapes: entities, scalars, tuples and DTO projections."""

from __future__ import annotations

from dataclasses import dataclass

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from querystudy.data.pageable import Sort
from querystudy.data.relational.expressions import Expressions
from querystudy.data.relational.filter import FilterOperator
from querystudy.data.relational.projections import (
    EntityProjection,
    Projections,
    QueryTuple,
    ScalarProjection,
    as_projection,
    is_query_projection,
)
from querystudy.data.relational.query import QueryExecutor
from querystudy.data.relational.source import QuerySource
from querystudy.domain import Member, MemberDto, Team, UserDto
from querystudy.kernel.exceptions import InvalidArgumentError

BY_ID = Sort.by("id")


@pytest.fixture
def members(seeded_session: Session) -> QueryExecutor[Member]:
    return QueryExecutor(seeded_session, Member)


class TestAsProjection:
    def test_none_is_root_entity(self):
        projection = as_projection(None, Member)
        assert isinstance(projection, EntityProjection)
        assert projection.selections() == [Member]

    def test_type_is_entity(self):
        assert isinstance(as_projection(Team, Member), EntityProjection)

    def test_expression_is_scalar(self):
        assert isinstance(as_projection(Member.username, Member), ScalarProjection)


class TestScalarAndEntity:
    def test_scalar(self, members: QueryExecutor[Member]):
        assert members.fetch_many(sort=BY_ID, projection=Projections.scalar(Member.username)) == [
            "member1",
            "member2",
            "member3",
            "member4",
        ]

    def test_entity(self, members: QueryExecutor[Member]):
        teams = members.fetch_many(
            FilterOperator.eq(Member.username, "member1"),
            projection=Projections.entity(Member),
        )
        assert teams[0].username == "member1"


class TestTupleProjection:
    def test_get_by_expression(self, members: QueryExecutor[Member]):
        rows = members.fetch_many(sort=BY_ID, projection=Projections.tuple(Member.username, Member.age))
        first = rows[0]
        assert isinstance(first, QueryTuple)
        assert first.get(Member.username) == "member1"
        assert first.get(Member.age) == 10

    def test_get_by_index(self, members: QueryExecutor[Member]):
        rows = members.fetch_many(sort=BY_ID, projection=Projections.tuple(Member.username, Member.age))
        assert rows[1][0] == "member2"
        assert rows[1][1] == 20
        assert len(rows[1]) == 2
        assert rows[1].to_tuple() == ("member2", 20)

    def test_get_by_equal_expression(self, members: QueryExecutor[Member]):
        row = members.fetch_one(projection=Projections.tuple(func.max(Member.age), func.min(Member.age)))
        assert row.get(func.max(Member.age)) == 40
        assert row.get(func.min(Member.age)) == 10

    def test_get_unselected_raises(self, members: QueryExecutor[Member]):
        row = members.fetch_first(sort=BY_ID, projection=Projections.tuple(Member.username))
        with pytest.raises(KeyError):
            row.get(Member.age)

    def test_entities_in_tuple(self, seeded_session: Session):
        executor = QueryExecutor(seeded_session, QuerySource(Member).join(Member.team))
        row = executor.fetch_first(sort=BY_ID, projection=Projections.tuple(Member, Team))
        assert row.get(Member).username == "member1"
        assert row.get(Team).name == "teamA"

    def test_empty_tuple_rejected(self):
        with pytest.raises(InvalidArgumentError):
            Projections.tuple()


class TestBeanProjection:
    def test_assigns_matching_names(self, members: QueryExecutor[Member]):
        result = members.fetch_many(sort=BY_ID, projection=Projections.bean(MemberDto, Member.username, Member.age))
        assert result[0] == MemberDto(username="member1", age=10)
        assert len(result) == 4

    def test_requires_no_arg_constructor(self):
        class Strict:
            def __init__(self, username: str) -> None:
                self.username = username

        with pytest.raises(InvalidArgumentError) as exc_info:
            Projections.bean(Strict, Member.username)
        assert exc_info.value.code == "PROJECTION_BEAN"


class TestFieldsProjection:
    def test_matching_names(self, members: QueryExecutor[Member]):
        result = members.fetch_many(sort=BY_ID, projection=Projections.fields(MemberDto, Member.username, Member.age))
        assert result[3] == MemberDto(username="member4", age=40)

    def test_unaliased_mismatch_keeps_default(self, members: QueryExecutor[Member]):
        result = members.fetch_many(sort=BY_ID, projection=Projections.fields(UserDto, Member.username, Member.age))
        assert result[0] == UserDto(name=None, age=10)

    def test_alias_binds_by_alias(self, members: QueryExecutor[Member]):
        result = members.fetch_many(
            sort=BY_ID,
            projection=Projections.fields(UserDto, Projections.alias(Member.username, "name"), Member.age),
        )
        assert result[0] == UserDto(name="member1", age=10)

    def test_subquery_alias(self, members: QueryExecutor[Member]):
        sub = Expressions.alias_of(Member, "member_sub")
        result = members.fetch_many(
            sort=BY_ID,
            projection=Projections.bean(
                UserDto,
                Member.username.label("name"),
                Projections.alias(select(func.max(sub.age)), "age"),
            ),
        )
        assert [dto.age for dto in result] == [40, 40, 40, 40]
        assert result[0].name == "member1"

    def test_unnamed_expression_rejected(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            Projections.fields(UserDto, func.max(Member.age))
        assert exc_info.value.code == "PROJECTION_UNNAMED"


class TestConstructorProjection:
    def test_maps_by_position_ignoring_names(self, members: QueryExecutor[Member]):
        result = members.fetch_many(
            sort=BY_ID, projection=Projections.constructor(UserDto, Member.username, Member.age)
        )
        assert result[0] == UserDto(name="member1", age=10)

    def test_plain_class(self, members: QueryExecutor[Member]):
        class Pair:
            def __init__(self, label: str, years: int) -> None:
                self.label = label
                self.years = years

        row = members.fetch_first(sort=BY_ID, projection=Projections.constructor(Pair, Member.username, Member.age))
        assert (row.label, row.years) == ("member1", 10)

    def test_arity_mismatch_rejected(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            Projections.constructor(UserDto, Member.username)
        assert exc_info.value.code == "PROJECTION_ARITY"

    def test_type_mismatch_rejected(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            Projections.constructor(UserDto, Member.age, Member.username)
        assert exc_info.value.code == "PROJECTION_TYPE"
        assert exc_info.value.context == {"field": "name"}

    def test_int_widens_to_float(self):
        @dataclass
        class Stats:
            average: float

        Projections.constructor(Stats, Member.age)


class TestQueryProjection:
    def test_typed_builder(self, members: QueryExecutor[Member]):
        result = members.fetch_many(sort=BY_ID, projection=MemberDto.projection(Member.username, Member.age))
        assert result == [
            MemberDto("member1", 10),
            MemberDto("member2", 20),
            MemberDto("member3", 30),
            MemberDto("member4", 40),
        ]

    def test_typed_builder_checks_arity(self):
        with pytest.raises(InvalidArgumentError):
            MemberDto.projection(Member.username)

    def test_marker(self):
        assert is_query_projection(MemberDto)
        assert not is_query_projection(UserDto)
