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
"""Starlette middleware restoring the session principal from the cookie."""

from __future__ import annotations

from typing import Sequence

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from ticketvault.security.cookie import CookieAuthenticationHandler
from ticketvault.session.principal import ClaimsPrincipal

logger = structlog.get_logger(__name__)


class SessionAuthenticationMiddleware(BaseHTTPMiddleware):
    """Populates ``request.state.principal`` and ``request.state.ticket``.

    Requests without a valid session get an anonymous principal and a
    ``None`` ticket. Storage failures are not masked; they propagate to
    the application's error handling.
    """

    def __init__(
        self,
        app: ASGIApp,
        handler: CookieAuthenticationHandler,
        exclude_paths: Sequence[str] = (),
    ) -> None:
        super().__init__(app)
        self._handler = handler
        self._exclude_paths = set(exclude_paths)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.url.path in self._exclude_paths:
            request.state.principal = ClaimsPrincipal.anonymous()
            request.state.ticket = None
            return await call_next(request)

        ticket = await self._handler.authenticate(request)
        request.state.ticket = ticket
        request.state.principal = ticket.principal if ticket is not None else ClaimsPrincipal.anonymous()

        response = await call_next(request)

        # Keep the cookie in step with a slid expiry unless the handler signed out.
        if ticket is not None and ticket.renewed and ticket.key and not _sets_cookie(response, self._handler):
            self._handler.write_cookie(response, ticket.key)
            logger.debug("session_cookie_refreshed", path=request.url.path)
        return response


def _sets_cookie(response: Response, handler: CookieAuthenticationHandler) -> bool:
    prefix = f"{handler.cookie_name}=".encode()
    return any(
        name == b"set-cookie" and value.startswith(prefix) for name, value in response.raw_headers
    )
