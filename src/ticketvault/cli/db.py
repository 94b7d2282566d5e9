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
"""'ticketvault db' commands for schema management."""

from __future__ import annotations

import asyncio
from pathlib import Path

import click

from ticketvault.cli.console import console
from ticketvault.cli.options import config_options, load_config
from ticketvault.config.properties.data import RelationalProperties
from ticketvault.data.entity import Base
from ticketvault.data.lifecycle import EngineLifecycle, create_engine


@click.group()
def db_group() -> None:
    """Manage the session and cache tables."""


@db_group.command("init")
@config_options
def init_command(config_path: Path | None, url: str | None) -> None:
    """Create the user, session and cache tables if they do not exist."""
    properties = load_config(config_path, url).bind(RelationalProperties)
    asyncio.run(_create_schema(properties))
    console.print(f"[success]Schema ready[/success] ({', '.join(sorted(Base.metadata.tables))})")


async def _create_schema(properties: RelationalProperties) -> None:
    lifecycle = EngineLifecycle(create_engine(properties), ddl_auto="none")
    try:
        await lifecycle.create_schema()
    finally:
        await lifecycle.stop()
