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
"""Tests for FilterOperator builders and FilterUtils criteria composition."""

from __future__ import annotations

from collections import namedtuple
from typing import Any

import pytest
from sqlalchemy.orm import Session

from querystudy.data.pageable import Sort
from querystudy.data.relational.filter import FilterOperator, FilterUtils
from querystudy.data.relational.predicate import Predicate
from querystudy.data.relational.query import QueryExecutor
from querystudy.domain import Member, MemberDto, MemberSearchCondition
from querystudy.kernel.exceptions import InvalidArgumentError

# ---------------------------------------------------------------------------
# Helper: run a predicate and return matching usernames in order
# ---------------------------------------------------------------------------


def _usernames(session: Session, predicate: Any) -> list[str]:
    return QueryExecutor(session, Member).fetch_many(predicate, Sort.by("username"), Member.username)


# ---------------------------------------------------------------------------
# FilterOperator
# ---------------------------------------------------------------------------


class TestFilterOperatorComparison:
    def test_eq(self, seeded_session: Session):
        assert _usernames(seeded_session, FilterOperator.eq(Member.username, "member1")) == ["member1"]

    def test_ne(self, seeded_session: Session):
        assert _usernames(seeded_session, FilterOperator.ne(Member.username, "member1")) == [
            "member2",
            "member3",
            "member4",
        ]

    def test_eq_negated(self, seeded_session: Session):
        names = _usernames(seeded_session, ~FilterOperator.eq(Member.username, "member1"))
        assert names == ["member2", "member3", "member4"]

    def test_gt(self, seeded_session: Session):
        assert _usernames(seeded_session, FilterOperator.gt(Member.age, 30)) == ["member4"]

    def test_goe(self, seeded_session: Session):
        assert _usernames(seeded_session, FilterOperator.goe(Member.age, 30)) == ["member3", "member4"]

    def test_lt(self, seeded_session: Session):
        assert _usernames(seeded_session, FilterOperator.lt(Member.age, 20)) == ["member1"]

    def test_loe(self, seeded_session: Session):
        assert _usernames(seeded_session, FilterOperator.loe(Member.age, 20)) == ["member1", "member2"]


class TestFilterOperatorRangeAndSets:
    def test_between(self, seeded_session: Session):
        assert _usernames(seeded_session, FilterOperator.between(Member.age, 10, 30)) == [
            "member1",
            "member2",
            "member3",
        ]

    def test_between_open_low(self, seeded_session: Session):
        assert _usernames(seeded_session, FilterOperator.between(Member.age, None, 20)) == ["member1", "member2"]

    def test_between_open_high(self, seeded_session: Session):
        assert _usernames(seeded_session, FilterOperator.between(Member.age, 35, None)) == ["member4"]

    def test_between_no_bounds_is_none(self):
        assert FilterOperator.between(Member.age, None, None).is_none

    def test_in(self, seeded_session: Session):
        assert _usernames(seeded_session, FilterOperator.in_(Member.age, [10, 20])) == ["member1", "member2"]

    def test_not_in(self, seeded_session: Session):
        assert _usernames(seeded_session, FilterOperator.not_in(Member.age, [10, 20])) == ["member3", "member4"]


class TestFilterOperatorStrings:
    def test_like(self, seeded_session: Session):
        assert len(_usernames(seeded_session, FilterOperator.like(Member.username, "member%"))) == 4

    def test_contains(self, seeded_session: Session):
        assert _usernames(seeded_session, FilterOperator.contains(Member.username, "ber3")) == ["member3"]

    def test_starts_with(self, seeded_session: Session):
        assert len(_usernames(seeded_session, FilterOperator.starts_with(Member.username, "mem"))) == 4


class TestFilterOperatorNulls:
    def test_is_not_null(self, seeded_session: Session):
        assert len(_usernames(seeded_session, FilterOperator.is_not_null(Member.username))) == 4

    def test_is_null(self, seeded_session: Session):
        seeded_session.add(Member(username=None, age=50))
        seeded_session.flush()
        assert _usernames(seeded_session, FilterOperator.is_null(Member.username)) == [None]

    @pytest.mark.parametrize(
        "predicate",
        [
            FilterOperator.eq(Member.username, None),
            FilterOperator.ne(Member.username, None),
            FilterOperator.gt(Member.age, None),
            FilterOperator.goe(Member.age, None),
            FilterOperator.lt(Member.age, None),
            FilterOperator.loe(Member.age, None),
            FilterOperator.in_(Member.age, None),
            FilterOperator.not_in(Member.age, None),
            FilterOperator.like(Member.username, None),
            FilterOperator.contains(Member.username, None),
            FilterOperator.starts_with(Member.username, None),
        ],
    )
    def test_missing_value_yields_none(self, predicate: Predicate):
        assert predicate.is_none

    def test_missing_value_matches_everything(self, seeded_session: Session):
        predicate = FilterOperator.eq(Member.username, None) & FilterOperator.goe(Member.age, None)
        assert len(_usernames(seeded_session, predicate)) == 4


# ---------------------------------------------------------------------------
# FilterUtils
# ---------------------------------------------------------------------------


class TestFilterUtilsBy:
    def test_by_single_field(self, seeded_session: Session):
        assert _usernames(seeded_session, FilterUtils.by(Member, username="member1")) == ["member1"]

    def test_by_skips_none(self, seeded_session: Session):
        assert _usernames(seeded_session, FilterUtils.by(Member, username="member2", age=None)) == ["member2"]

    def test_by_all_none_is_none(self):
        assert FilterUtils.by(Member, username=None, age=None).is_none

    def test_by_unknown_field_raises(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            FilterUtils.by(Member, nickname="x")
        assert exc_info.value.code == "FILTER_FIELD"

    def test_by_method_name_raises(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            FilterUtils.by(Member, change_team=1)
        assert exc_info.value.code == "FILTER_FIELD"

    def test_by_relationship_raises(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            FilterUtils.by(Member, team=1)
        assert exc_info.value.code == "FILTER_FIELD"


class TestFilterUtilsFromDict:
    def test_from_dict_ands_fields(self, seeded_session: Session):
        predicate = FilterUtils.from_dict(Member, {"username": "member1", "age": 10})
        assert _usernames(seeded_session, predicate) == ["member1"]

    def test_from_dict_conflicting_fields_match_nothing(self, seeded_session: Session):
        predicate = FilterUtils.from_dict(Member, {"username": "member1", "age": 20})
        assert _usernames(seeded_session, predicate) == []

    def test_from_dict_empty_is_none(self):
        assert FilterUtils.from_dict(Member, {}).is_none


class TestFilterUtilsFromExample:
    def test_from_example_dataclass(self, seeded_session: Session):
        predicate = FilterUtils.from_example(Member, MemberDto(age=30))
        assert _usernames(seeded_session, predicate) == ["member3"]

    def test_from_example_plain_object(self, seeded_session: Session):
        class Criteria:
            def __init__(self) -> None:
                self.username = "member4"
                self._ignored = "x"

        assert _usernames(seeded_session, FilterUtils.from_example(Member, Criteria())) == ["member4"]

    def test_from_example_named_tuple(self, seeded_session: Session):
        Criteria = namedtuple("Criteria", ["username", "age"])
        predicate = FilterUtils.from_example(Member, Criteria(username=None, age=20))
        assert _usernames(seeded_session, predicate) == ["member2"]

    def test_from_example_slots_object_rejected(self):
        class Criteria:
            __slots__ = ("username",)

            def __init__(self) -> None:
                self.username = "member1"

        with pytest.raises(InvalidArgumentError) as exc_info:
            FilterUtils.from_example(Member, Criteria())
        assert exc_info.value.code == "FILTER_CRITERIA"


class TestFilterUtilsCompose:
    def test_named_tuple_criteria(self, seeded_session: Session):
        Condition = namedtuple("Condition", ["username", "age_goe"])
        builders = {"age_goe": lambda v: FilterOperator.goe(Member.age, v)}
        predicate = FilterUtils.compose(Condition(username=None, age_goe=30), Member, **builders)
        assert _usernames(seeded_session, predicate) == ["member3", "member4"]

    @staticmethod
    def _builders() -> dict[str, Any]:
        return {
            "team_name": lambda v: Predicate.none(),
            "age_goe": lambda v: FilterOperator.goe(Member.age, v),
            "age_loe": lambda v: FilterOperator.loe(Member.age, v),
        }

    def test_nothing_present_is_none(self):
        assert FilterUtils.compose(MemberSearchCondition(), Member, **self._builders()).is_none

    def test_range_criteria(self, seeded_session: Session):
        condition = MemberSearchCondition(age_goe=20, age_loe=30)
        predicate = FilterUtils.compose(condition, Member, **self._builders())
        assert _usernames(seeded_session, predicate) == ["member2", "member3"]

    def test_fallback_to_equality_on_root(self, seeded_session: Session):
        predicate = FilterUtils.compose({"username": "member2"}, Member)
        assert _usernames(seeded_session, predicate) == ["member2"]

    def test_criteria_in_declared_order(self):
        condition = MemberSearchCondition(username="member1", age_goe=10, age_loe=40)
        predicate = FilterUtils.compose(condition, Member, **self._builders())
        assert predicate.to_sql() == "member.username = 'member1' AND member.age >= 10 AND member.age <= 40"

    def test_mapping_insertion_order(self):
        predicate = FilterUtils.compose({"age": 10, "username": "member1"}, Member)
        assert predicate.to_sql() == "member.age = 10 AND member.username = 'member1'"

    def test_unknown_criterion_without_root_raises(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            FilterUtils.compose({"username": "member1"})
        assert exc_info.value.code == "FILTER_CRITERION"

    def test_missing_criterion_without_root_is_fine(self):
        assert FilterUtils.compose({"username": None}).is_none
