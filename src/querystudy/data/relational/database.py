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
"""Engine and session factory built from configuration."""

from __future__ import annotations

import structlog
from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from querystudy.config.properties.data import DataProperties
from querystudy.core.config import Config
from querystudy.data.relational.entity import Base

logger = structlog.get_logger("querystudy.data")


def create_session_factory(
    config: Config | None = None,
    base: type[DeclarativeBase] = Base,
) -> sessionmaker[Session]:
    """Create an engine from ``querystudy.data.*`` and return a session factory.

    When ``create_schema`` is enabled every table registered on *base*
    is created; import the modules that declare your entities first.
    """
    props = (config or Config.defaults()).bind(DataProperties)
    engine = create_engine(props.url, echo=props.echo)

    if props.create_schema:
        base.metadata.create_all(engine)
        logger.info("schema_created", tables=len(base.metadata.tables))

    logger.info("session_factory_created", url=engine.url.render_as_string(hide_password=True))
    return sessionmaker(engine, expire_on_commit=False)
