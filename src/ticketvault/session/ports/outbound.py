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
"""Ticket store protocol."""

from __future__ import annotations

from datetime import timedelta
from typing import Protocol, runtime_checkable

from ticketvault.session.principal import AuthenticationTicket, ClaimsPrincipal

DEFAULT_TICKET_LIFETIME = timedelta(days=3)


@runtime_checkable
class TicketStore(Protocol):
    """Server-side persistence for authentication tickets.

    Keys are opaque and generated by the store. Unknown and expired keys
    are never errors: ``retrieve`` returns ``None`` and ``renew`` /
    ``remove`` do nothing.
    """

    async def create(self, principal: ClaimsPrincipal) -> str: ...

    async def renew(self, key: str, principal: ClaimsPrincipal | None = None) -> None: ...

    async def retrieve(self, key: str) -> AuthenticationTicket | None: ...

    async def remove(self, key: str) -> bool: ...

    async def purge_expired(self) -> int: ...
