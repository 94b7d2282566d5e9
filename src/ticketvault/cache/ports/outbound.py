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
"""Response cache protocol."""

from __future__ import annotations

from datetime import timedelta
from typing import Any, NamedTuple, Protocol, runtime_checkable


class CacheLookup(NamedTuple):
    """Outcome of a cache read; ``found`` disambiguates a cached ``None``."""

    value: Any
    found: bool


MISS = CacheLookup(None, False)


@runtime_checkable
class ResponseCache(Protocol):
    """Key to serialized-value store with absolute expiration.

    Expired, absent, and unreadable entries are all reported as a miss.
    """

    async def lookup(self, key: str, as_type: Any = None) -> CacheLookup: ...

    async def get(self, key: str, as_type: Any = None) -> Any | None: ...

    async def set(self, key: str, value: Any, ttl: timedelta | None = None) -> None: ...

    async def evict(self, key: str) -> bool: ...

    async def purge_expired(self) -> int: ...
