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
"""querystudy relational: SQLAlchemy implementation of the query layer."""

from querystudy.data.relational.database import create_session_factory
from querystudy.data.relational.entity import Base, BaseEntity, column_attribute
from querystudy.data.relational.expressions import CaseBuilder, Expressions
from querystudy.data.relational.filter import FilterOperator, FilterUtils
from querystudy.data.relational.predicate import Predicate
from querystudy.data.relational.projections import (
    BeanProjection,
    ConstructorProjection,
    EntityProjection,
    FieldsProjection,
    Projections,
    QueryTuple,
    ScalarProjection,
    TupleProjection,
    is_query_projection,
    query_projection,
)
from querystudy.data.relational.query import QueryExecutor, clear_persistence_context
from querystudy.data.relational.source import JoinClause, QuerySource

__all__ = [
    "Base",
    "BaseEntity",
    "column_attribute",
    "BeanProjection",
    "CaseBuilder",
    "ConstructorProjection",
    "EntityProjection",
    "Expressions",
    "FieldsProjection",
    "FilterOperator",
    "FilterUtils",
    "JoinClause",
    "Predicate",
    "Projections",
    "QueryExecutor",
    "QuerySource",
    "QueryTuple",
    "ScalarProjection",
    "TupleProjection",
    "clear_persistence_context",
    "create_session_factory",
    "is_query_projection",
    "query_projection",
]
