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
"""Per-operation transaction scope over an ``async_sessionmaker``."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ticketvault.kernel.exceptions import BackendFailureException


@asynccontextmanager
async def unit_of_work(
    session_factory: async_sessionmaker[AsyncSession],
    operation: str,
) -> AsyncIterator[AsyncSession]:
    """Open a fresh session and transaction for one logical operation.

    The transaction commits when the block exits normally and rolls back on
    any exception. ``SQLAlchemyError`` is re-raised as
    :class:`BackendFailureException`; every other exception propagates
    unchanged.

    Usage::

        async with unit_of_work(factory, "session.remove") as session:
            await SessionTicketRepository(session=session).delete(key)
    """
    try:
        async with session_factory() as session, session.begin():
            yield session
    except SQLAlchemyError as exc:
        raise BackendFailureException(
            f"Storage backend failed during {operation}",
            context={"operation": operation, "error": type(exc).__name__},
        ) from exc
