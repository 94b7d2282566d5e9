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
"""Session subsystem configuration properties."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from ticketvault.core.config import config_properties


@config_properties(prefix="ticketvault.session")
@dataclass
class SessionProperties:
    """Configuration for the ticket store (ticketvault.session.*)."""

    ticket_lifetime: int = 259200
    remove_orphaned_tickets: bool = False
    sliding_expiration: bool = False

    @property
    def lifetime(self) -> timedelta:
        return timedelta(seconds=self.ticket_lifetime)


@config_properties(prefix="ticketvault.session.cookie")
@dataclass
class CookieProperties:
    """Session cookie settings (ticketvault.session.cookie.*)."""

    name: str = "sessionB"
    http_only: bool = True
    secure: bool = False
    same_site: str = "strict"
    path: str = "/"
