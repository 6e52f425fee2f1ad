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
"""Tests for the querystudy exception hierarchy."""

from __future__ import annotations

import pytest

from querystudy.kernel.exceptions import (
    BusinessException,
    DataSourceError,
    InfrastructureException,
    InvalidArgumentError,
    MultipleResultsError,
    QueryStudyException,
    ValidationException,
)


class TestQueryStudyException:
    def test_basic_creation(self):
        exc = QueryStudyException("something went wrong")
        assert str(exc) == "something went wrong"
        assert exc.code is None
        assert exc.context == {}

    def test_with_code_and_context(self):
        exc = QueryStudyException("bad page", code="PAGE_LIMIT", context={"limit": 0})
        assert exc.code == "PAGE_LIMIT"
        assert exc.context["limit"] == 0

    def test_context_not_shared(self):
        first = QueryStudyException("a")
        first.context["key"] = "value"
        assert QueryStudyException("b").context == {}


class TestExceptionHierarchy:
    def test_validation_is_business(self):
        assert issubclass(ValidationException, BusinessException)

    def test_invalid_argument_is_validation_and_value_error(self):
        assert issubclass(InvalidArgumentError, ValidationException)
        assert issubclass(InvalidArgumentError, ValueError)

    def test_multiple_results_is_business(self):
        assert issubclass(MultipleResultsError, BusinessException)

    def test_data_source_is_infrastructure(self):
        assert issubclass(DataSourceError, InfrastructureException)

    @pytest.mark.parametrize(
        "exc",
        [
            InvalidArgumentError("bad"),
            MultipleResultsError("many"),
            DataSourceError("down"),
        ],
    )
    def test_catch_all(self, exc: QueryStudyException):
        with pytest.raises(QueryStudyException):
            raise exc

    def test_cause_is_kept(self):
        original = RuntimeError("driver failure")
        try:
            try:
                raise original
            except RuntimeError as inner:
                raise DataSourceError("Statement failed", code="DATA_SOURCE") from inner
        except DataSourceError as exc:
            assert exc.__cause__ is original
