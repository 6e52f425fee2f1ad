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
"""Outbound ports: the session the query layer executes against."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class DataSession(Protocol):
    """Unit of work supplied by the persistence provider.

    ``sqlalchemy.orm.Session`` satisfies this protocol. A session keeps
    an identity map of loaded rows that bulk statements do not update;
    callers flush and clear it (``expunge_all``) after a bulk mutation.
    A session must not be shared between threads.
    """

    def execute(self, statement: Any, *args: Any, **kwargs: Any) -> Any: ...

    def flush(self, *args: Any, **kwargs: Any) -> None: ...

    def expunge_all(self) -> None: ...
