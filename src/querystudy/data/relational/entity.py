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
"""Declarative base and id-carrying base entity."""

from __future__ import annotations

from typing import Any

from sqlalchemy import inspect
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all querystudy entities."""


class BaseEntity(Base):
    """Base entity providing an auto-incremented integer primary key."""

    __abstract__ = True

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)


def column_attribute(entity: Any, name: str) -> Any | None:
    """The mapped column-valued attribute *name* of *entity*, or ``None``.

    Methods, relationships, private names and other plain class attributes
    are not query fields and resolve to ``None``.
    """
    if name.startswith("_"):
        return None
    info = inspect(entity, raiseerr=False)
    mapper = getattr(info, "mapper", None)
    if mapper is None:
        return None
    if name not in mapper.all_orm_descriptors.keys() or name in mapper.relationships:
        return None
    return getattr(entity, name)
