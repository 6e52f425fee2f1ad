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
"""Tests for DataProperties and LoggingProperties binding."""

from __future__ import annotations

import pytest

from querystudy.config.properties import DataProperties, LoggingProperties
from querystudy.core.config import Config


class TestDataProperties:
    def test_defaults(self):
        props = Config({}).bind(DataProperties)
        assert props.url == "sqlite://"
        assert props.echo is False
        assert props.create_schema is True
        assert props.default_page_size == 20

    def test_packaged_defaults_match_model(self):
        assert Config.defaults().bind(DataProperties) == DataProperties()

    def test_provided_values(self):
        config = Config({"querystudy": {"data": {"url": "sqlite:///members.db", "echo": True}}})
        props = config.bind(DataProperties)
        assert props.url == "sqlite:///members.db"
        assert props.echo is True

    def test_env_override_is_validated(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("QUERYSTUDY_DATA_ECHO", "true")
        monkeypatch.setenv("QUERYSTUDY_DATA_DEFAULT_PAGE_SIZE", "50")
        props = Config({}).bind(DataProperties)
        assert props.echo is True
        assert props.default_page_size == 50

    def test_page_size_must_be_positive(self):
        config = Config({"querystudy": {"data": {"default_page_size": 0}}})
        with pytest.raises(ValueError, match="DataProperties"):
            config.bind(DataProperties)


class TestLoggingProperties:
    def test_defaults(self):
        props = Config({}).bind(LoggingProperties)
        assert props.format == "console"
        assert props.level == {"root": "INFO"}

    def test_levels_from_config(self):
        config = Config({"querystudy": {"logging": {"format": "json", "level": {"root": "WARNING"}}}})
        props = config.bind(LoggingProperties)
        assert props.format == "json"
        assert props.level == {"root": "WARNING"}
