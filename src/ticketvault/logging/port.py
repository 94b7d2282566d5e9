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
"""Logging port: how :class:`~ticketvault.core.application.TicketVault` obtains its loggers."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from ticketvault.core.config import Config


@runtime_checkable
class LoggingPort(Protocol):
    """Backend configured once from the ``ticketvault.logging`` section.

    The loggers it hands out take structlog-style calls,
    ``logger.info("session_created", session_key=key)``, and must never
    render a ``session_key`` field in full.
    """

    def configure(self, config: Config) -> None: ...

    def get_logger(self, name: str) -> Any: ...
