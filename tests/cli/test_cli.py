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
"""Tests for the ticketvault CLI: db init and purge."""

from __future__ import annotations

import asyncio
from datetime import timedelta
from pathlib import Path

import pytest
from click.testing import CliRunner
from sqlalchemy import func, inspect, select
from sqlalchemy.ext.asyncio import create_async_engine

from ticketvault.cli.main import cli
from ticketvault.data.entity import CacheEntry, SessionTicket, User, utcnow
from ticketvault.data.lifecycle import create_session_factory


def _url(tmp_path: Path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'vault.db'}"


async def _tables(url: str) -> set[str]:
    engine = create_async_engine(url)
    try:
        async with engine.connect() as conn:
            return await conn.run_sync(lambda sync_conn: set(inspect(sync_conn).get_table_names()))
    finally:
        await engine.dispose()


async def _seed_expired_rows(url: str) -> None:
    engine = create_async_engine(url)
    past = utcnow() - timedelta(days=1)
    try:
        async with create_session_factory(engine)() as session, session.begin():
            user = User(user_name="erin", email="erin@example.com", name="Erin")
            session.add(user)
            await session.flush()
            session.add_all([
                SessionTicket(key="stale", user_id=user.id, expires_at=past),
                SessionTicket(key="live", user_id=user.id, expires_at=utcnow() + timedelta(days=1)),
                CacheEntry(key="/old", data="1", expiration_date=past),
            ])
    finally:
        await engine.dispose()


class TestCliGroup:
    def test_help_lists_commands(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "db" in result.output
        assert "purge" in result.output

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestDbInit:
    def test_db_init_creates_tables(self, tmp_path: Path):
        url = _url(tmp_path)
        result = CliRunner().invoke(cli, ["db", "init", "--url", url])

        assert result.exit_code == 0, result.output
        assert "Schema ready" in result.output
        assert asyncio.run(_tables(url)) == {"user", "session", "cache"}

    def test_db_init_is_idempotent(self, tmp_path: Path):
        url = _url(tmp_path)
        runner = CliRunner()
        runner.invoke(cli, ["db", "init", "--url", url])
        result = runner.invoke(cli, ["db", "init", "--url", url])
        assert result.exit_code == 0, result.output

    def test_db_init_reads_config_file(self, tmp_path: Path):
        url = _url(tmp_path)
        config_file = tmp_path / "ticketvault.yaml"
        config_file.write_text(f"ticketvault:\n  data:\n    relational:\n      url: {url}\n")

        result = CliRunner().invoke(cli, ["db", "init", "--config", str(config_file)])

        assert result.exit_code == 0, result.output
        assert asyncio.run(_tables(url)) == {"user", "session", "cache"}

    def test_missing_config_file_fails(self, tmp_path: Path):
        result = CliRunner().invoke(cli, ["db", "init", "--config", str(tmp_path / "absent.yaml")])
        assert result.exit_code != 0
        assert "Config file not found" in result.output


class TestPurge:
    def test_purge_reports_removed_rows(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.chdir(tmp_path)
        url = _url(tmp_path)
        runner = CliRunner()
        runner.invoke(cli, ["db", "init", "--url", url])
        asyncio.run(_seed_expired_rows(url))

        result = runner.invoke(cli, ["purge", "--url", url])

        assert result.exit_code == 0, result.output
        assert "sessions" in result.output
        assert "cache" in result.output

        async def _remaining() -> tuple[int, int]:
            engine = create_async_engine(url)
            try:
                async with create_session_factory(engine)() as session:
                    return (
                        (await session.execute(select(func.count()).select_from(SessionTicket))).scalar_one(),
                        (await session.execute(select(func.count()).select_from(CacheEntry))).scalar_one(),
                    )
            finally:
                await engine.dispose()

        assert asyncio.run(_remaining()) == (1, 0)
