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
"""Declarative entities for the session, cache, and user tables."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import BigInteger, ForeignKey, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from ticketvault.data.types import UtcDateTime

CACHE_KEY_MAX_LENGTH = 126


def utcnow() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all ticketvault entities."""


class User(Base):
    """Identity record a session ticket resolves to.

    Credentials are owned by the external identity provider; this table
    only carries what the ticket store reads and the activity timestamp
    it writes.
    """

    __tablename__ = "user"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    user_name: Mapped[str] = mapped_column(String(50), unique=True)
    email: Mapped[str] = mapped_column(String(255), unique=True)
    name: Mapped[str] = mapped_column(String(30))
    surname: Mapped[str | None] = mapped_column(String(30), default=None)
    created_at: Mapped[datetime] = mapped_column(UtcDateTime(), default=utcnow)
    last_active: Mapped[datetime] = mapped_column(UtcDateTime(), default=utcnow)


class SessionTicket(Base):
    """Server-held session record addressed by an opaque key."""

    __tablename__ = "session"

    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("user.id", ondelete="CASCADE"), index=True)
    expires_at: Mapped[datetime] = mapped_column(UtcDateTime())

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at < now


class CacheEntry(Base):
    """Serialized payload stored under a caller-chosen key until it expires."""

    __tablename__ = "cache"

    # SQLite only autoincrements INTEGER PRIMARY KEY columns.
    id: Mapped[int] = mapped_column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    key: Mapped[str] = mapped_column(String(CACHE_KEY_MAX_LENGTH), unique=True)
    data: Mapped[str] = mapped_column(Text)
    expiration_date: Mapped[datetime] = mapped_column(UtcDateTime(), default=utcnow)
