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
"""TicketVault: assembles the store, cache and gate from configuration."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from ticketvault.cache.adapters.sqlalchemy import RelationalResponseCache
from ticketvault.config.properties.cache import CacheProperties
from ticketvault.config.properties.data import RelationalProperties
from ticketvault.config.properties.session import CookieProperties, SessionProperties
from ticketvault.core.config import Config
from ticketvault.data.lifecycle import EngineLifecycle, create_engine, create_session_factory
from ticketvault.logging.port import LoggingPort
from ticketvault.logging.structlog_adapter import StructlogAdapter
from ticketvault.observability.metrics import MetricsRegistry
from ticketvault.security.cookie import CookieAuthenticationHandler
from ticketvault.security.hook import StoreValidationHook
from ticketvault.session.adapters.sqlalchemy import RelationalTicketStore


class TicketVault:
    """Wires configuration, logging, storage, metrics, store, cache and gate.

    Construction only builds objects; nothing touches the database until
    :meth:`start` applies the schema strategy. :meth:`stop` disposes of
    the engine.

    Usage::

        vault = TicketVault(Config.from_file("ticketvault.yaml"))
        await vault.start()
        key = await vault.store.create(principal)
        ...
        await vault.stop()
    """

    def __init__(
        self,
        config: Config | None = None,
        *,
        logging_adapter: LoggingPort | None = None,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        self._config = config if config is not None else Config.defaults()
        self._logging = logging_adapter if logging_adapter is not None else StructlogAdapter()
        self._logging.configure(self._config)
        self._logger = self._logging.get_logger("ticketvault")

        self.session_properties = self._config.bind(SessionProperties)
        self.cookie_properties = self._config.bind(CookieProperties)
        self.cache_properties = self._config.bind(CacheProperties)
        self.relational_properties = self._config.bind(RelationalProperties)

        self._engine = create_engine(self.relational_properties)
        self._engine_lifecycle = EngineLifecycle(self._engine, ddl_auto=self.relational_properties.ddl_auto)
        self._session_factory = create_session_factory(self._engine)
        self._metrics = metrics if metrics is not None else MetricsRegistry()

        lifetime = self.session_properties.lifetime
        self._store = RelationalTicketStore(
            self._session_factory,
            ticket_lifetime=lifetime,
            remove_orphaned_tickets=self.session_properties.remove_orphaned_tickets,
            logger=self._logging.get_logger("ticketvault.session"),
            metrics=self._metrics,
        )
        self._cache = RelationalResponseCache(
            self._session_factory,
            default_ttl=self.cache_properties.ttl,
            max_key_length=self.cache_properties.max_key_length,
            logger=self._logging.get_logger("ticketvault.cache"),
            metrics=self._metrics,
        )
        self._hook = StoreValidationHook(
            self._store,
            sliding_expiration=self.session_properties.sliding_expiration,
            ticket_lifetime=lifetime,
            logger=self._logging.get_logger("ticketvault.security"),
        )
        self._handler = CookieAuthenticationHandler(
            self._store, self.cookie_properties, ticket_lifetime=lifetime, hook=self._hook
        )
        self._started = False

    @property
    def config(self) -> Config:
        return self._config

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        return self._session_factory

    @property
    def metrics(self) -> MetricsRegistry:
        return self._metrics

    @property
    def store(self) -> RelationalTicketStore:
        return self._store

    @property
    def cache(self) -> RelationalResponseCache:
        return self._cache

    @property
    def hook(self) -> StoreValidationHook:
        return self._hook

    @property
    def authentication(self) -> CookieAuthenticationHandler:
        return self._handler

    async def start(self) -> None:
        if self._started:
            return
        await self._engine_lifecycle.start()
        self._started = True
        self._logger.info(
            "ticketvault_started",
            url=self._engine.url.render_as_string(hide_password=True),
            ddl_auto=self.relational_properties.ddl_auto,
            sources=self._config.loaded_sources,
        )

    async def stop(self) -> None:
        await self._engine_lifecycle.stop()
        self._started = False
        self._logger.info("ticketvault_stopped")

    async def purge_expired(self) -> dict[str, int]:
        """Sweep expired sessions and cache entries. Returns removed counts."""
        return {
            "sessions": await self._store.purge_expired(),
            "cache": await self._cache.purge_expired(),
        }

    async def __aenter__(self) -> TicketVault:
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()
