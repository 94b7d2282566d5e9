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
"""ticketvault CLI: schema setup and storage hygiene."""

from __future__ import annotations

import click


@click.group()
@click.version_option(package_name="ticketvault")
def cli() -> None:
    """ticketvault: session tickets and response cache on a relational store."""


from ticketvault.cli.db import db_group  # noqa: E402
from ticketvault.cli.purge import purge_command  # noqa: E402

cli.add_command(db_group, name="db")
cli.add_command(purge_command, name="purge")
