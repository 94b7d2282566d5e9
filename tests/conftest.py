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
"""Shared fixtures: in-memory database, frozen clock, seeded users."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from ticketvault.data.entity import Base, User
from ticketvault.data.lifecycle import create_session_factory

T0 = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = T0) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> datetime:
        self.now = self.now + delta
        return self.now


@pytest.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def make_user(session_factory):
    """Insert a user row and return it."""

    async def _make_user(user_name: str = "alice") -> User:
        user = User(user_name=user_name, email=f"{user_name}@example.com", name=user_name.title(), last_active=T0)
        async with session_factory() as session, session.begin():
            session.add(user)
        return user

    return _make_user


class RecordingLogger:
    """Stand-in for a structlog logger that keeps (level, event, fields)."""

    def __init__(self) -> None:
        self.records: list[tuple[str, str, dict]] = []

    def _record(self, level: str, event: str, **fields) -> None:
        self.records.append((level, event, fields))

    def debug(self, event: str, **fields) -> None:
        self._record("debug", event, **fields)

    def info(self, event: str, **fields) -> None:
        self._record("info", event, **fields)

    def warning(self, event: str, **fields) -> None:
        self._record("warning", event, **fields)

    def exception(self, event: str, **fields) -> None:
        self._record("exception", event, **fields)

    def events(self, level: str | None = None) -> list[str]:
        return [event for lvl, event, _ in self.records if level is None or lvl == level]


@pytest.fixture
def recording_logger() -> RecordingLogger:
    return RecordingLogger()
