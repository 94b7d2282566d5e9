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
"""Relational ticket store backed by the ``session`` and ``user`` tables."""

from __future__ import annotations

import uuid
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from datetime import datetime, timedelta
from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ticketvault.data.entity import SessionTicket, utcnow
from ticketvault.data.repository import SessionTicketRepository, UserRepository
from ticketvault.data.transactional import unit_of_work
from ticketvault.kernel.exceptions import BackendFailureException, InvalidPrincipalException
from ticketvault.observability.metrics import SESSION_OPERATIONS, MetricsRegistry
from ticketvault.session.ports.outbound import DEFAULT_TICKET_LIFETIME
from ticketvault.session.principal import AuthenticationTicket, ClaimsPrincipal, ClaimTypes


class RelationalTicketStore:
    """Ticket store keeping one row per session in a relational table.

    Lifecycle of a key: created on sign-in, expiry pushed forward by
    :meth:`renew`, destroyed by :meth:`remove`. Expiry is lazy: a row whose
    ``expires_at`` lies in the past is treated as absent but stays in the
    table until removed or purged.

    Each operation runs in its own unit of work. There is no
    compare-and-swap; concurrent writes to one key are last-write-wins.

    Args:
        session_factory: Source of one ``AsyncSession`` per operation.
        ticket_lifetime: Lifetime granted on creation and on every renewal.
        remove_orphaned_tickets: Delete a live ticket whose user no longer
            exists when it is retrieved, instead of leaving it in place.
        logger: Structured logger; defaults to this module's structlog logger.
            Keys are logged under ``session_key``, which the configured
            processor chain masks (see
            :func:`ticketvault.logging.mask_session_keys`).
        metrics: Registry receiving the operation counters.
        clock: Source of the current UTC time.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        ticket_lifetime: timedelta = DEFAULT_TICKET_LIFETIME,
        remove_orphaned_tickets: bool = False,
        logger: Any | None = None,
        metrics: MetricsRegistry | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        if ticket_lifetime <= timedelta(0):
            raise ValueError("ticket_lifetime must be positive")
        self._session_factory = session_factory
        self._lifetime = ticket_lifetime
        self._remove_orphans = remove_orphaned_tickets
        self._logger = logger if logger is not None else structlog.get_logger(__name__)
        self._clock = clock
        metrics = metrics if metrics is not None else MetricsRegistry()
        self._operations = metrics.counter(
            SESSION_OPERATIONS, "Ticket store operations by outcome", ["operation", "outcome"]
        )

    @property
    def ticket_lifetime(self) -> timedelta:
        return self._lifetime

    async def create(self, principal: ClaimsPrincipal) -> str:
        """Persist a new ticket for *principal* and return its key.

        Raises:
            InvalidPrincipalException: The principal has no user-identity
                claim, or the claim is not a UUID.
        """
        user_id = self._resolve_user_id(principal)
        key = str(uuid.uuid4())
        expires_at = self._clock() + self._lifetime

        async with self._unit_of_work("create", key) as session:
            session.add(SessionTicket(key=key, user_id=user_id, expires_at=expires_at))

        self._record("create", "created")
        self._logger.info("session_created", session_key=key, user_id=str(user_id))
        return key

    async def renew(self, key: str, principal: ClaimsPrincipal | None = None) -> None:
        """Push the expiry of a live ticket to ``now + ticket_lifetime``.

        Unknown and expired keys are left alone; renewal never brings a
        session back. The expiry moves in one conditional UPDATE, so a
        ticket removed by a concurrent request is skipped, not an error.
        """
        async with self._unit_of_work("renew", key) as session:
            now = self._clock()
            expires_at = now + self._lifetime
            repository = SessionTicketRepository(session=session)
            if not await repository.extend(key, now, expires_at):
                ticket = await repository.find_by_id(key)
                if ticket is None:
                    self._record("renew", "not_found")
                    self._logger.warning("session_renew_not_found", session_key=key)
                else:
                    self._record("renew", "expired")
                    self._logger.warning(
                        "session_renew_expired", session_key=key, expired_at=ticket.expires_at.isoformat()
                    )
                return

        self._record("renew", "renewed")
        self._logger.info("session_renewed", session_key=key, expires_at=expires_at.isoformat())

    async def retrieve(self, key: str) -> AuthenticationTicket | None:
        """Restore the ticket stored under *key*, or ``None``.

        ``None`` covers unknown keys, expired tickets, and tickets whose
        user has been deleted. On success the user's ``last_active`` is set
        to now in the same transaction.
        """
        async with self._unit_of_work("retrieve", key) as session:
            now = self._clock()
            ticket = await SessionTicketRepository(session=session).find_by_id(key)
            if ticket is None:
                self._record("retrieve", "not_found")
                self._logger.warning("session_not_found", session_key=key)
                return None
            if ticket.is_expired(now):
                self._record("retrieve", "expired")
                self._logger.warning(
                    "session_expired", session_key=key, expired_at=ticket.expires_at.isoformat()
                )
                return None

            user = await UserRepository(session=session).find_by_id(ticket.user_id)
            if user is None:
                self._record("retrieve", "orphaned")
                self._logger.warning(
                    "session_user_missing",
                    session_key=key,
                    user_id=str(ticket.user_id),
                    removed=self._remove_orphans,
                )
                if self._remove_orphans:
                    await session.delete(ticket)
                return None

            user.last_active = now
            restored = AuthenticationTicket(
                principal=ClaimsPrincipal.for_user(user.id, user.user_name),
                expires_at=ticket.expires_at,
                key=key,
            )

        self._record("retrieve", "restored")
        self._logger.info("session_restored", session_key=key, user_id=str(user.id), user_name=user.user_name)
        return restored

    async def remove(self, key: str) -> bool:
        """Delete the ticket under *key*. Returns False when there was nothing to delete."""
        async with self._unit_of_work("remove", key) as session:
            removed = await SessionTicketRepository(session=session).delete(key)

        if removed:
            self._record("remove", "removed")
            self._logger.info("session_removed", session_key=key)
        else:
            self._record("remove", "not_found")
            self._logger.warning("session_remove_not_found", session_key=key)
        return removed

    async def purge_expired(self) -> int:
        """Delete every expired ticket. Returns the number of rows removed."""
        async with self._unit_of_work("purge") as session:
            removed = await SessionTicketRepository(session=session).delete_expired(self._clock())

        self._record("purge", "purged")
        self._logger.info("sessions_purged", removed=removed)
        return removed

    @staticmethod
    def _resolve_user_id(principal: ClaimsPrincipal | None) -> uuid.UUID:
        claim = principal.find_first(ClaimTypes.NAME_IDENTIFIER) if principal is not None else None
        if not claim:
            raise InvalidPrincipalException("User id claim not found in principal")
        try:
            return uuid.UUID(claim)
        except ValueError as exc:
            raise InvalidPrincipalException(
                f"Invalid user id format '{claim}'", context={"user_id": claim}
            ) from exc

    def _record(self, operation: str, outcome: str) -> None:
        self._operations.labels(operation=operation, outcome=outcome).inc()

    @asynccontextmanager
    async def _unit_of_work(self, operation: str, key: str | None = None) -> AsyncIterator[AsyncSession]:
        try:
            async with unit_of_work(self._session_factory, f"session.{operation}") as session:
                yield session
        except BackendFailureException:
            self._record(operation, "error")
            self._logger.exception(
                "session_operation_failed", operation=operation, session_key=key
            )
            raise
