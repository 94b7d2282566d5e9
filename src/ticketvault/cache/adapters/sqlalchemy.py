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
"""Relational response cache backed by the ``cache`` table."""

from __future__ import annotations

import json
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Any

import structlog
from pydantic import TypeAdapter
from pydantic_core import PydanticSerializationError, to_json
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ticketvault.cache.ports.outbound import MISS, CacheLookup
from ticketvault.data.entity import CACHE_KEY_MAX_LENGTH, utcnow
from ticketvault.data.repository import CacheEntryRepository
from ticketvault.data.transactional import unit_of_work
from ticketvault.kernel.exceptions import SerializationException, ValidationException
from ticketvault.observability.metrics import (
    CACHE_DESERIALIZATION_FAILURES,
    CACHE_LOOKUPS,
    MetricsRegistry,
)

DEFAULT_TTL = timedelta(minutes=5)


class RelationalResponseCache:
    """Cache whose entries live in a relational table.

    Values are serialized to JSON with pydantic-core, so models,
    dataclasses, datetimes and UUIDs round-trip when read back with
    ``as_type``. Every call opens its own unit of work; there is no
    in-memory layer.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        default_ttl: timedelta = DEFAULT_TTL,
        max_key_length: int = CACHE_KEY_MAX_LENGTH,
        logger: Any | None = None,
        metrics: MetricsRegistry | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._session_factory = session_factory
        self._default_ttl = default_ttl
        self._max_key_length = max_key_length
        self._logger = logger if logger is not None else structlog.get_logger(__name__)
        self._metrics = metrics if metrics is not None else MetricsRegistry()
        self._clock = clock
        self._adapters: dict[Any, TypeAdapter[Any]] = {}

        self._lookups = self._metrics.counter(CACHE_LOOKUPS, "Cache reads by outcome", ["outcome"])
        self._malformed = self._metrics.counter(
            CACHE_DESERIALIZATION_FAILURES, "Cache entries that could not be deserialized"
        )

    async def lookup(self, key: str, as_type: Any = None) -> CacheLookup:
        """Read *key*, reporting absent, expired and malformed entries as a miss."""
        async with unit_of_work(self._session_factory, "cache.lookup") as session:
            entry = await CacheEntryRepository(session=session).find_valid(key, self._clock())
            raw = entry.data if entry is not None else None

        if raw is None:
            self._lookups.labels(outcome="miss").inc()
            return MISS

        try:
            value = self._deserialize(raw, as_type)
        except (ValueError, TypeError) as exc:
            self._lookups.labels(outcome="malformed").inc()
            self._malformed.inc()
            self._logger.warning("cache_deserialization_failed", key=key, error=str(exc))
            return MISS

        self._lookups.labels(outcome="hit").inc()
        return CacheLookup(value, True)

    async def get(self, key: str, as_type: Any = None) -> Any | None:
        """Cached value for *key*, or ``None`` on a miss."""
        return (await self.lookup(key, as_type)).value

    async def set(self, key: str, value: Any, ttl: timedelta | None = None) -> None:
        """Insert or overwrite *key*; the entry expires ``ttl`` from now.

        An existing row keeps its identity; both its payload and its
        expiration are replaced. Concurrent writers of one key do not
        fail: the last write wins.
        """
        ttl = self._default_ttl if ttl is None else ttl
        if ttl <= timedelta(0):
            raise ValidationException("Cache TTL must be positive", context={"key": key, "ttl": str(ttl)})
        if len(key) > self._max_key_length:
            raise ValidationException(
                f"Cache key exceeds {self._max_key_length} characters",
                context={"key": key[: self._max_key_length]},
            )

        payload = self._serialize(key, value)

        async with unit_of_work(self._session_factory, "cache.set") as session:
            expiration = self._clock() + ttl
            await CacheEntryRepository(session=session).upsert(key, payload, expiration)

        self._logger.debug("cache_entry_stored", key=key, expires_at=expiration.isoformat())

    async def evict(self, key: str) -> bool:
        """Remove *key*. Returns True if a row existed."""
        async with unit_of_work(self._session_factory, "cache.evict") as session:
            return await CacheEntryRepository(session=session).delete_by_key(key)

    async def purge_expired(self) -> int:
        """Delete every entry that has already expired. Returns the number removed."""
        async with unit_of_work(self._session_factory, "cache.purge") as session:
            removed = await CacheEntryRepository(session=session).delete_expired(self._clock())
        self._logger.info("cache_purged", removed=removed)
        return removed

    def _serialize(self, key: str, value: Any) -> str:
        try:
            return to_json(value).decode()
        except (PydanticSerializationError, ValueError) as exc:
            raise SerializationException(
                f"Value for cache key '{key}' is not serializable: {exc}",
                context={"key": key, "type": type(value).__name__},
            ) from exc

    def _deserialize(self, raw: str, as_type: Any) -> Any:
        if as_type is None:
            return json.loads(raw)
        adapter = self._adapters.get(as_type)
        if adapter is None:
            adapter = self._adapters[as_type] = TypeAdapter(as_type)
        return adapter.validate_json(raw)
