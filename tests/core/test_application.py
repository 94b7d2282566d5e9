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
"""Tests for the TicketVault assembly."""

from __future__ import annotations

from datetime import timedelta

import pytest

from ticketvault.cache.ports.outbound import ResponseCache
from ticketvault.core.application import TicketVault
from ticketvault.core.config import Config
from ticketvault.data.entity import User
from ticketvault.logging.structlog_adapter import StructlogAdapter
from ticketvault.observability.metrics import CACHE_LOOKUPS, SESSION_OPERATIONS
from ticketvault.session.ports.outbound import TicketStore
from ticketvault.session.principal import ClaimsPrincipal


def _config(tmp_path, **session) -> Config:
    return Config.defaults().with_overrides(
        {
            "ticketvault": {
                "data": {"relational": {"url": f"sqlite+aiosqlite:///{tmp_path / 'vault.db'}"}},
                "session": session,
            }
        }
    )


class TestTicketVaultWiring:
    def test_binds_properties_from_config(self, tmp_path):
        vault = TicketVault(_config(tmp_path, **{"ticket-lifetime": 3600, "sliding-expiration": True}))

        assert vault.session_properties.lifetime == timedelta(hours=1)
        assert vault.session_properties.sliding_expiration is True
        assert vault.store.ticket_lifetime == timedelta(hours=1)
        assert vault.cookie_properties.name == "sessionB"
        assert vault.cache_properties.ttl == timedelta(minutes=5)
        assert vault.authentication.cookie_name == "sessionB"

    def test_components_satisfy_ports(self, tmp_path):
        vault = TicketVault(_config(tmp_path))
        assert isinstance(vault.store, TicketStore)
        assert isinstance(vault.cache, ResponseCache)

    def test_default_config(self):
        vault = TicketVault(logging_adapter=StructlogAdapter())
        assert vault.relational_properties.ddl_auto == "create"
        assert vault.config.loaded_sources == ["ticketvault-defaults.yaml (defaults)"]


class TestTicketVaultLifecycle:
    @pytest.mark.asyncio
    async def test_end_to_end_session_and_cache(self, tmp_path):
        async with TicketVault(_config(tmp_path)) as vault:
            async with vault.session_factory() as session, session.begin():
                user = User(user_name="frank", email="frank@example.com", name="Frank")
                session.add(user)

            key = await vault.store.create(ClaimsPrincipal.for_user(user.id, user.user_name))
            ticket = await vault.hook.validate(key)
            await vault.cache.set("/search?q=frank", {"hits": 1})

            assert ticket.principal.display_name == "frank"
            assert await vault.cache.get("/search?q=frank") == {"hits": 1}
            assert await vault.purge_expired() == {"sessions": 0, "cache": 0}
            assert vault.metrics.value(SESSION_OPERATIONS, {"operation": "create", "outcome": "created"}) == 1.0
            assert vault.metrics.value(CACHE_LOOKUPS, {"outcome": "hit"}) == 1.0

    @pytest.mark.asyncio
    async def test_start_is_idempotent(self, tmp_path):
        vault = TicketVault(_config(tmp_path))
        await vault.start()
        await vault.start()
        await vault.stop()
