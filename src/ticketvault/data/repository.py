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
"""Generic async repository built on SQLAlchemy 2.0, plus the concrete ticketvault repositories."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Generic, TypeVar, cast, get_args, get_origin

from sqlalchemy import delete, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from ticketvault.data.entity import CacheEntry, SessionTicket, User

T = TypeVar("T")
ID = TypeVar("ID")

# Dialects with INSERT ... ON CONFLICT DO UPDATE.
_UPSERT_INSERTS: dict[str, Any] = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class Repository(Generic[T, ID]):
    """Primary-key access to one SQLAlchemy entity.

    Type Parameters:
        T: The entity type (any SQLAlchemy model).
        ID: The primary key type.

    Usage::

        class UserRepository(Repository[User, UUID]):
            pass  # entity type auto-extracted

        users = UserRepository(session=session)
    """

    _entity_type: type | None = None
    _id_type: type | None = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        for base in getattr(cls, "__orig_bases__", []):
            if get_origin(base) is Repository:
                args = get_args(base)
                if args and not isinstance(args[0], TypeVar):
                    cls._entity_type = args[0]
                if len(args) > 1 and not isinstance(args[1], TypeVar):
                    cls._id_type = args[1]
                break

    def __init__(self, model: type[T] | None = None, session: AsyncSession | None = None) -> None:
        resolved = model or getattr(type(self), "_entity_type", None)
        if resolved is None:
            raise TypeError(
                f"{type(self).__name__} requires either Repository[Entity, ID] declaration or explicit model argument"
            )
        self._model: type[T] = cast(type[T], resolved)
        self._session = session

    def _require_session(self) -> AsyncSession:
        if self._session is None:
            raise RuntimeError("No AsyncSession configured for repository")
        return self._session

    async def find_by_id(self, id: ID) -> T | None:
        session = self._require_session()
        return await session.get(self._model, id)

    async def delete(self, id: ID) -> bool:
        """Delete an entity by its primary key. Returns True if it existed."""
        session = self._require_session()
        entity = await self.find_by_id(id)
        if entity is None:
            return False
        await session.delete(entity)
        await session.flush()
        return True


class UserRepository(Repository[User, uuid.UUID]):
    """Lookups against the identity table."""


class SessionTicketRepository(Repository[SessionTicket, str]):
    """Session tickets, keyed by their opaque session key."""

    async def extend(self, key: str, now: datetime, expires_at: datetime) -> bool:
        """Move the expiry of a ticket that is still live at *now* to *expires_at*.

        Runs as a single conditional UPDATE, so a ticket deleted or expired
        in the meantime is simply not matched. Returns True if a row changed.
        """
        session = self._require_session()
        stmt = (
            update(SessionTicket)
            .where(SessionTicket.key == key, SessionTicket.expires_at >= now)
            .values(expires_at=expires_at)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return cast(int, result.rowcount) > 0  # type: ignore[attr-defined]

    async def delete_expired(self, now: datetime) -> int:
        """Bulk-delete tickets whose expiry lies before *now*. Returns the row count."""
        session = self._require_session()
        result = await session.execute(delete(SessionTicket).where(SessionTicket.expires_at < now))
        return cast(int, result.rowcount)  # type: ignore[attr-defined]


class CacheEntryRepository(Repository[CacheEntry, int]):
    """Cache rows, addressed by their unique caller-supplied key."""

    async def find_by_key(self, key: str) -> CacheEntry | None:
        session = self._require_session()
        result = await session.execute(select(CacheEntry).where(CacheEntry.key == key))
        return result.scalar_one_or_none()

    async def find_valid(self, key: str, now: datetime) -> CacheEntry | None:
        """Return the entry for *key* only if it expires after *now*."""
        session = self._require_session()
        stmt = select(CacheEntry).where(CacheEntry.key == key, CacheEntry.expiration_date > now)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def upsert(self, key: str, data: str, expiration_date: datetime) -> None:
        """Insert the entry for *key*, or overwrite its payload and expiry if the key exists.

        On PostgreSQL and SQLite this is one ``INSERT ... ON CONFLICT DO UPDATE``,
        so concurrent writers of a fresh key never trip the unique constraint.
        Other dialects read the row first and update it in place.
        """
        session = self._require_session()
        insert = _UPSERT_INSERTS.get(session.get_bind().dialect.name)
        if insert is None:
            entry = await self.find_by_key(key)
            if entry is None:
                session.add(CacheEntry(key=key, data=data, expiration_date=expiration_date))
            else:
                entry.data = data
                entry.expiration_date = expiration_date
            await session.flush()
            return

        stmt = insert(CacheEntry).values(key=key, data=data, expiration_date=expiration_date)
        stmt = stmt.on_conflict_do_update(
            index_elements=[CacheEntry.key],
            set_={"data": stmt.excluded.data, "expiration_date": stmt.excluded.expiration_date},
        )
        await session.execute(stmt)

    async def delete_by_key(self, key: str) -> bool:
        session = self._require_session()
        result = await session.execute(delete(CacheEntry).where(CacheEntry.key == key))
        return cast(int, result.rowcount) > 0  # type: ignore[attr-defined]

    async def delete_expired(self, now: datetime) -> int:
        """Bulk-delete entries expiring at or before *now*. Returns the row count."""
        session = self._require_session()
        result = await session.execute(delete(CacheEntry).where(CacheEntry.expiration_date <= now))
        return cast(int, result.rowcount)  # type: ignore[attr-defined]
