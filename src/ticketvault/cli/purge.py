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
"""'ticketvault purge' command."""

from __future__ import annotations

import asyncio
from pathlib import Path

import click

from ticketvault.cli.console import print_counts
from ticketvault.cli.options import config_options, load_config
from ticketvault.core.application import TicketVault


@click.command("purge")
@config_options
def purge_command(config_path: Path | None, url: str | None) -> None:
    """Delete expired sessions and cache entries."""
    counts = asyncio.run(_purge(TicketVault(load_config(config_path, url))))
    print_counts("Expired rows purged", counts)


async def _purge(vault: TicketVault) -> dict[str, int]:
    async with vault:
        return await vault.purge_expired()
