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
"""Shared Rich console for CLI output."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table
from rich.theme import Theme

TICKETVAULT_THEME = Theme({
    "info": "cyan",
    "success": "bold green",
    "warning": "bold yellow",
    "error": "bold red",
    "ticketvault": "bold magenta",
    "dim": "dim",
})

console = Console(theme=TICKETVAULT_THEME)


def print_counts(title: str, counts: dict[str, int]) -> None:
    """Print a two-column table of ``name -> count``."""
    table = Table(title=f"[ticketvault]{title}[/ticketvault]", border_style="dim")
    table.add_column("Store", style="bold")
    table.add_column("Removed", justify="right")
    for name, count in counts.items():
        table.add_row(name, str(count))
    console.print(table)
