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
"""Async engine construction and schema lifecycle."""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from ticketvault.config.properties.data import RelationalProperties
from ticketvault.data.entity import Base

_logger = logging.getLogger(__name__)


def create_engine(properties: RelationalProperties) -> AsyncEngine:
    """Create the shared async engine (and its connection pool)."""
    return create_async_engine(properties.url, echo=properties.echo)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Factory handing out one ``AsyncSession`` per unit of work."""
    return async_sessionmaker(engine, expire_on_commit=False)


class EngineLifecycle:
    """Lifecycle wrapper for the SQLAlchemy async engine.

    On ``start()``, applies the ``ddl-auto`` schema strategy:

    * ``create``: create tables that don't exist (idempotent)
    * ``create-drop``: create on start, drop on shutdown
    * ``none``: skip DDL (for migration-managed databases)
    """

    _VALID_DDL_MODES = {"none", "create", "create-drop"}

    def __init__(self, engine: AsyncEngine, *, ddl_auto: str = "create") -> None:
        if ddl_auto not in self._VALID_DDL_MODES:
            raise ValueError(f"Unknown ddl-auto mode '{ddl_auto}', expected one of {sorted(self._VALID_DDL_MODES)}")
        self._engine = engine
        self._ddl_auto = ddl_auto

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    async def create_schema(self) -> None:
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        _logger.info("Database schema initialized (%d tables)", len(Base.metadata.tables))

    async def start(self) -> None:
        if self._ddl_auto in ("create", "create-drop"):
            _logger.info("Initializing database schema (ddl-auto=%s)", self._ddl_auto)
            await self.create_schema()

    async def stop(self) -> None:
        """Drop the schema when configured, then dispose of the connection pool."""
        if self._ddl_auto == "create-drop":
            _logger.info("Dropping database schema (ddl-auto=create-drop)")
            async with self._engine.begin() as conn:
                await conn.run_sync(Base.metadata.drop_all)
        await self._engine.dispose()
