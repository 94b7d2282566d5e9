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
"""Options and config loading shared by the CLI commands."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

from ticketvault.core.config import Config


def config_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach ``--config`` and ``--url`` to a command."""
    func = click.option(
        "--url",
        default=None,
        help="Database URL, overriding ticketvault.data.relational.url.",
    )(func)
    func = click.option(
        "--config",
        "config_path",
        type=click.Path(dir_okay=False, path_type=Path),
        default=None,
        help="YAML or TOML configuration file.",
    )(func)
    return func


def load_config(config_path: Path | None, url: str | None) -> Config:
    """Packaged defaults, then *config_path*, then the ``--url`` override."""
    if config_path is not None and not config_path.is_file():
        raise click.ClickException(f"Config file not found: {config_path}")
    config = Config.from_file(config_path) if config_path is not None else Config.defaults()
    if url is None:
        return config
    return config.with_overrides({"ticketvault": {"data": {"relational": {"url": url}}}})
