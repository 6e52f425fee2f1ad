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
"""Member search queries built from optional criteria."""

from __future__ import annotations

from typing import Any

from querystudy.data.page import ResultPage
from querystudy.data.pageable import Order, PageRequest, Sort
from querystudy.data.ports.outbound import DataSession
from querystudy.data.relational.filter import FilterOperator, FilterUtils
from querystudy.data.relational.predicate import Predicate
from querystudy.data.relational.projections import Projections
from querystudy.data.relational.query import QueryExecutor
from querystudy.data.relational.source import QuerySource
from querystudy.domain.dto import MemberSearchCondition, MemberTeamDto
from querystudy.domain.member import Member, Team


class MemberQueryRepository:
    """Read-side queries over members and their teams.

    Every method takes optional criteria; ``None`` (or a blank string for
    names) means "do not filter on this".
    """

    def __init__(self, session: DataSession) -> None:
        self._session = session

    # ------------------------------------------------------------------
    # Search by condition
    # ------------------------------------------------------------------

    def search(self, condition: MemberSearchCondition) -> list[MemberTeamDto]:
        return self._executor().fetch_many(self._where(condition), self._default_sort(), self._member_team())

    def search_page_simple(self, condition: MemberSearchCondition, page: PageRequest) -> ResultPage[MemberTeamDto]:
        """Content and total from the executor's own count query."""
        return self._executor().fetch_page(
            self._where(condition),
            self._default_sort(),
            page,
            self._member_team(),
        )

    def search_page_complex(self, condition: MemberSearchCondition, page: PageRequest) -> ResultPage[MemberTeamDto]:
        """Content and total as separate queries; the count is skipped when the page reveals it."""
        where = self._where(condition)
        counter = self._executor()
        return self._executor().fetch_page(
            where,
            self._default_sort(),
            page,
            self._member_team(),
            count=lambda: counter.fetch_count(where),
        )

    # ------------------------------------------------------------------
    # Dynamic queries
    # ------------------------------------------------------------------

    def search_by_builder(self, username: str | None, age: int | None) -> list[Member]:
        predicate = Predicate.none()
        if username is not None:
            predicate = predicate & (Member.username == username)
        if age is not None:
            predicate = predicate & (Member.age == age)
        return QueryExecutor(self._session, Member).fetch_many(predicate)

    def search_by_where_params(self, username: str | None, age: int | None) -> list[Member]:
        return QueryExecutor(self._session, Member).fetch_many(
            Predicate.all_of(self.username_eq(username), self.age_eq(age))
        )

    # ------------------------------------------------------------------
    # Single-field predicates
    # ------------------------------------------------------------------

    @staticmethod
    def username_eq(username: str | None) -> Predicate:
        return FilterOperator.eq(Member.username, username or None)

    @staticmethod
    def team_name_eq(team_name: str | None) -> Predicate:
        return FilterOperator.eq(Team.name, team_name or None)

    @staticmethod
    def age_eq(age: int | None) -> Predicate:
        return FilterOperator.eq(Member.age, age)

    @staticmethod
    def age_goe(age: int | None) -> Predicate:
        return FilterOperator.goe(Member.age, age)

    @staticmethod
    def age_loe(age: int | None) -> Predicate:
        return FilterOperator.loe(Member.age, age)

    @classmethod
    def all_eq(cls, username: str | None, age: int | None) -> Predicate:
        return cls.username_eq(username) & cls.age_eq(age)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _executor(self) -> QueryExecutor[Any]:
        return QueryExecutor(self._session, QuerySource(Member).left_join(Member.team))

    def _where(self, condition: MemberSearchCondition) -> Predicate:
        return FilterUtils.compose(
            condition,
            username=self.username_eq,
            team_name=self.team_name_eq,
            age_goe=self.age_goe,
            age_loe=self.age_loe,
        )

    @staticmethod
    def _member_team() -> Any:
        return Projections.fields(
            MemberTeamDto,
            Member.id.label("member_id"),
            Member.username,
            Member.age,
            Team.id.label("team_id"),
            Team.name.label("team_name"),
        )

    @staticmethod
    def _default_sort() -> Sort:
        return Sort.of(Order.asc(Member.id))
