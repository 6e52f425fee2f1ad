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
"""querystudy data: predicates, paging and projections over a relational store.

Framework-agnostic types (ResultPage, Sort, PageRequest, ports) live
directly in this package; the SQLAlchemy implementation is re-exported
for convenience.
"""

from querystudy.data.filter import BaseFilterUtils
from querystudy.data.page import ResultPage
from querystudy.data.pageable import Order, PageRequest, Sort
from querystudy.data.ports.outbound import DataSession
from querystudy.data.projection import Projection
from querystudy.data.relational import (
    Base,
    BaseEntity,
    Expressions,
    FilterOperator,
    FilterUtils,
    Predicate,
    Projections,
    QueryExecutor,
    QuerySource,
    QueryTuple,
    clear_persistence_context,
    create_session_factory,
    query_projection,
)
from querystudy.data.specification import Specification

__all__ = [
    # Framework-agnostic
    "BaseFilterUtils",
    "DataSession",
    "Order",
    "PageRequest",
    "Projection",
    "ResultPage",
    "Sort",
    "Specification",
    # SQLAlchemy
    "Base",
    "BaseEntity",
    "Expressions",
    "FilterOperator",
    "FilterUtils",
    "Predicate",
    "Projections",
    "QueryExecutor",
    "QuerySource",
    "QueryTuple",
    "clear_persistence_context",
    "create_session_factory",
    "query_projection",
]
