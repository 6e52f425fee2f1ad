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
"""StructlogAdapter: default LoggingPort implementation using structlog."""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from querystudy.config.properties.logging import LoggingProperties
from querystudy.core.config import Config

_SHARED_PROCESSORS: tuple[structlog.types.Processor, ...] = (
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.UnicodeDecoder(),
)


def _level(name: str) -> int:
    return getattr(logging, name.upper(), logging.INFO)


def _renderer(fmt: str) -> structlog.types.Processor:
    if fmt == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


class StructlogAdapter:
    """Logging adapter that renders structlog events through stdlib logging.

    Query events go to ``querystudy.data`` and SQL echoed by the engine to
    ``sqlalchemy.engine``; both are plain stdlib loggers, so their levels
    come from the same ``querystudy.logging.level`` map as the root::

        querystudy:
          logging:
            format: json
            level:
              root: WARNING
              querystudy.data: DEBUG
              sqlalchemy.engine: INFO
    """

    def __init__(self) -> None:
        self._properties = LoggingProperties()

    @property
    def format(self) -> str:
        return str(self._properties.format).lower()

    @property
    def root_level(self) -> str:
        return str(self._properties.level.get("root", "INFO")).upper()

    @property
    def module_levels(self) -> dict[str, str]:
        """Per-logger levels, everything in the level map except ``root``."""
        return {name: str(level).upper() for name, level in self._properties.level.items() if name != "root"}

    def configure(self, config: Config) -> None:
        """Bind ``querystudy.logging`` and (re)configure structlog and stdlib logging."""
        self._properties = config.bind(LoggingProperties)

        structlog.configure(
            processors=[*_SHARED_PROCESSORS, _renderer(self.format)],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        logging.basicConfig(format="%(message)s", stream=sys.stdout, level=_level(self.root_level), force=True)

        for name, level in self.module_levels.items():
            self.set_level(name, level)

    def get_logger(self, name: str) -> Any:
        """Get a structlog BoundLogger by name."""
        return structlog.get_logger(name)

    def set_level(self, name: str, level: str) -> None:
        """Set the level of one stdlib logger, e.g. ``sqlalchemy.engine``."""
        logging.getLogger(name).setLevel(_level(level))
