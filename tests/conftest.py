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
"""Shared fixtures: in-memory SQLite with the member/team sample data."""

from __future__ import annotations

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from querystudy.data.relational.entity import Base
from querystudy.domain import Member, Team


@pytest.fixture
def engine():
    engine = create_engine("sqlite://")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def seeded_session(session: Session) -> Session:
    """teamA: member1 (10), member2 (20); teamB: member3 (30), member4 (40)."""
    team_a = Team(name="teamA")
    team_b = Team(name="teamB")
    session.add_all([team_a, team_b])
    session.add_all(
        [
            Member(username="member1", age=10, team=team_a),
            Member(username="member2", age=20, team=team_a),
            Member(username="member3", age=30, team=team_b),
            Member(username="member4", age=40, team=team_b),
        ]
    )
    session.flush()
    return session
