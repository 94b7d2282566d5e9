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
"""Tests for StoreValidationHook."""

from __future__ import annotations

from datetime import timedelta

import pytest

from ticketvault.security.hook import StoreValidationHook, TicketValidationHook
from ticketvault.session.adapters.sqlalchemy import RelationalTicketStore
from ticketvault.session.ports.outbound import DEFAULT_TICKET_LIFETIME
from ticketvault.session.principal import ClaimsPrincipal

LIFETIME = timedelta(days=3)


@pytest.fixture
def store(session_factory, clock) -> RelationalTicketStore:
    return RelationalTicketStore(session_factory, ticket_lifetime=LIFETIME, clock=clock)


async def _signed_in(store, make_user) -> str:
    user = await make_user()
    return await store.create(ClaimsPrincipal.for_user(user.id, user.user_name))


class TestStoreValidationHook:
    def test_implements_hook(self, store):
        assert isinstance(StoreValidationHook(store), TicketValidationHook)

    @pytest.mark.asyncio
    async def test_valid_key_returns_ticket(self, store, clock, make_user):
        key = await _signed_in(store, make_user)
        hook = StoreValidationHook(store, ticket_lifetime=LIFETIME, clock=clock)

        ticket = await hook.validate(key)

        assert ticket is not None
        assert ticket.principal.display_name == "alice"
        assert not ticket.renewed

    @pytest.mark.asyncio
    async def test_empty_and_unknown_keys_are_rejected(self, store, clock):
        hook = StoreValidationHook(store, clock=clock)
        assert await hook.validate("") is None
        assert await hook.validate("unknown") is None

    @pytest.mark.asyncio
    async def test_no_sliding_by_default(self, store, clock, make_user):
        key = await _signed_in(store, make_user)
        hook = StoreValidationHook(store, ticket_lifetime=LIFETIME, clock=clock)
        clock.advance(timedelta(days=2))

        ticket = await hook.validate(key)

        assert not ticket.renewed
        assert ticket.remaining(clock.now) == timedelta(days=1)

    @pytest.mark.asyncio
    async def test_sliding_renews_past_half_life(self, store, clock, make_user):
        key = await _signed_in(store, make_user)
        hook = StoreValidationHook(store, sliding_expiration=True, ticket_lifetime=LIFETIME, clock=clock)
        clock.advance(timedelta(days=2))

        ticket = await hook.validate(key)

        assert ticket.renewed
        assert ticket.expires_at == clock.now + LIFETIME
        assert (await store.retrieve(key)).expires_at == clock.now + LIFETIME

    @pytest.mark.asyncio
    async def test_sliding_uses_port_default_lifetime(self, store, clock, make_user):
        key = await _signed_in(store, make_user)
        hook = StoreValidationHook(store, sliding_expiration=True, clock=clock)
        clock.advance(timedelta(days=2))

        ticket = await hook.validate(key)

        assert ticket.expires_at == clock.now + DEFAULT_TICKET_LIFETIME

    @pytest.mark.asyncio
    async def test_sliding_leaves_fresh_ticket_alone(self, store, clock, make_user):
        key = await _signed_in(store, make_user)
        hook = StoreValidationHook(store, sliding_expiration=True, ticket_lifetime=LIFETIME, clock=clock)
        clock.advance(timedelta(hours=1))

        ticket = await hook.validate(key)

        assert not ticket.renewed
