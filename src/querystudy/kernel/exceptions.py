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
"""Unified exception hierarchy for querystudy.

All library exceptions inherit from QueryStudyException so callers can
catch one type, or a specific subclass for targeted handling.

Categories:
- BusinessException: caller mistakes and cardinality violations
- InfrastructureException: failures raised by the underlying database
"""

from __future__ import annotations

# =============================================================================
# Base Exception
# =============================================================================


class QueryStudyException(Exception):
    """Base exception for all querystudy errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "QUERY_001").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Business Exceptions
# =============================================================================


class BusinessException(QueryStudyException):
    """Caller-side errors: bad arguments, unexpected result cardinality."""


class ValidationException(BusinessException):
    """Input validation failures."""


class InvalidArgumentError(ValidationException, ValueError):
    """An argument was rejected before any statement reached the database.

    Raised for negative offsets, non-positive limits, projections whose
    expressions do not fit the destination type, and unknown sort fields.
    """


class MultipleResultsError(BusinessException):
    """A single-row fetch matched more than one row."""


# =============================================================================
# Infrastructure Exceptions
# =============================================================================


class InfrastructureException(QueryStudyException):
    """Infrastructure failures: database connectivity, constraints, dialect."""


class DataSourceError(InfrastructureException):
    """The data source failed while executing a statement.

    The original driver / ORM error is always available as ``__cause__``.
    """
