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
"""Transfer objects and search criteria for member queries."""

from __future__ import annotations

from dataclasses import dataclass

from querystudy.data.relational.projections import query_projection


@query_projection
@dataclass
class MemberDto:
    username: str | None = None
    age: int | None = None


@dataclass
class UserDto:
    """Same shape as MemberDto under different names; needs aliases for name-based projections."""

    name: str | None = None
    age: int | None = None


@dataclass
class MemberTeamDto:
    member_id: int | None = None
    username: str | None = None
    age: int | None = None
    team_id: int | None = None
    team_name: str | None = None


@dataclass
class MemberSearchCondition:
    """Optional member search criteria; ``None`` fields are not filtered on."""

    username: str | None = None
    team_name: str | None = None
    age_goe: int | None = None
    age_loe: int | None = None
