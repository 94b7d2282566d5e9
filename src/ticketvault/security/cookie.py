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
"""Cookie-based sign-in, sign-out and authentication."""

from __future__ import annotations

from datetime import timedelta
from typing import Literal, cast

from starlette.requests import Request
from starlette.responses import Response

from ticketvault.config.properties.session import CookieProperties
from ticketvault.security.hook import StoreValidationHook, TicketValidationHook
from ticketvault.session.ports.outbound import DEFAULT_TICKET_LIFETIME, TicketStore
from ticketvault.session.principal import AuthenticationTicket, ClaimsPrincipal

_SameSite = Literal["lax", "strict", "none"]


class CookieAuthenticationHandler:
    """Binds a :class:`TicketStore` to an HTTP cookie.

    The cookie carries only the opaque session key; the principal itself
    stays server-side.
    """

    def __init__(
        self,
        store: TicketStore,
        cookie: CookieProperties | None = None,
        ticket_lifetime: timedelta = DEFAULT_TICKET_LIFETIME,
        hook: TicketValidationHook | None = None,
    ) -> None:
        self._store = store
        self._cookie = cookie if cookie is not None else CookieProperties()
        self._lifetime = ticket_lifetime
        self._hook = hook if hook is not None else StoreValidationHook(store, ticket_lifetime=ticket_lifetime)

    @property
    def cookie_name(self) -> str:
        return self._cookie.name

    async def authenticate(self, request: Request) -> AuthenticationTicket | None:
        """Ticket for the session cookie on *request*, or ``None``."""
        key = request.cookies.get(self._cookie.name)
        if not key:
            return None
        return await self._hook.validate(key)

    async def sign_in(self, response: Response, principal: ClaimsPrincipal) -> str:
        """Create a session for *principal* and set its cookie on *response*."""
        key = await self._store.create(principal)
        self.write_cookie(response, key)
        return key

    async def sign_out(self, request: Request, response: Response) -> None:
        """Remove the caller's session, if any, and expire the cookie."""
        key = request.cookies.get(self._cookie.name)
        if key:
            await self._store.remove(key)
        response.delete_cookie(
            key=self._cookie.name,
            path=self._cookie.path,
            secure=self._cookie.secure,
            httponly=self._cookie.http_only,
            samesite=cast(_SameSite, self._cookie.same_site),
        )

    def write_cookie(self, response: Response, key: str) -> None:
        response.set_cookie(
            key=self._cookie.name,
            value=key,
            max_age=int(self._lifetime.total_seconds()),
            path=self._cookie.path,
            secure=self._cookie.secure,
            httponly=self._cookie.http_only,
            samesite=cast(_SameSite, self._cookie.same_site),
        )
