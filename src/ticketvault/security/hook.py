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
"""Ticket validation hook: the gate's single point of contact with the store."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Any, Protocol, runtime_checkable

import structlog

from ticketvault.data.entity import utcnow
from ticketvault.session.ports.outbound import DEFAULT_TICKET_LIFETIME, TicketStore
from ticketvault.session.principal import AuthenticationTicket


@runtime_checkable
class TicketValidationHook(Protocol):
    """Turns a session key from a cookie into an authentication ticket, or ``None``."""

    async def validate(self, key: str) -> AuthenticationTicket | None: ...


class StoreValidationHook:
    """Validates keys against a :class:`TicketStore`.

    With sliding expiration enabled, a ticket with less than half of its
    lifetime left is renewed and returned with ``renewed=True`` so the gate
    can re-issue the cookie.
    """

    def __init__(
        self,
        store: TicketStore,
        *,
        sliding_expiration: bool = False,
        ticket_lifetime: timedelta = DEFAULT_TICKET_LIFETIME,
        clock: Callable[[], datetime] = utcnow,
        logger: Any | None = None,
    ) -> None:
        self._store = store
        self._sliding = sliding_expiration
        self._lifetime = ticket_lifetime
        self._clock = clock
        self._logger = logger if logger is not None else structlog.get_logger(__name__)

    async def validate(self, key: str) -> AuthenticationTicket | None:
        if not key:
            return None
        ticket = await self._store.retrieve(key)
        if ticket is None:
            return None
        if not (self._sliding and ticket.allow_refresh):
            return ticket

        now = self._clock()
        if ticket.remaining(now) >= self._lifetime / 2:
            return ticket

        await self._store.renew(key, ticket.principal)
        self._logger.debug("session_slid", user_id=ticket.principal.user_id)
        return replace(ticket, expires_at=now + self._lifetime, renewed=True)
