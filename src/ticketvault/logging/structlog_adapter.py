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
"""structlog setup for ticketvault: level map, renderer choice and session-key masking."""

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from ticketvault.core.config import Config

SESSION_KEY_FIELD = "session_key"
LOG_FORMATS = ("console", "json")

_KEY_PREFIX_LENGTH = 8


def mask_session_keys(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Processor that cuts the ``session_key`` field down to its first eight characters.

    Session keys are bearer credentials. The prefix is enough to follow one
    session through the logs without making the log a credential store.
    """
    value = event_dict.get(SESSION_KEY_FIELD)
    if isinstance(value, str) and len(value) > _KEY_PREFIX_LENGTH:
        event_dict[SESSION_KEY_FIELD] = value[:_KEY_PREFIX_LENGTH] + "..."
    return event_dict


def build_processors(log_format: str) -> list[Processor]:
    """Processor chain for *log_format*; masking always runs before rendering."""
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        mask_session_keys,
    ]
    if log_format == "json":
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer())
    return processors


def _level_name(value: Any) -> str:
    name = str(value).upper()
    if not isinstance(logging.getLevelName(name), int):
        raise ValueError(f"Unknown log level '{value}'")
    return name


@dataclass(frozen=True)
class LoggingSettings:
    """The parsed ``ticketvault.logging`` section."""

    format: str = "console"
    root_level: str = "INFO"
    module_levels: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_config(cls, config: Config) -> LoggingSettings:
        levels = {name: _level_name(value) for name, value in config.get_section("ticketvault.logging.level").items()}
        log_format = str(config.get("ticketvault.logging.format", "console")).lower()
        if log_format not in LOG_FORMATS:
            raise ValueError(f"Unknown log format '{log_format}', expected one of: {', '.join(LOG_FORMATS)}")
        return cls(format=log_format, root_level=levels.pop("root", "INFO"), module_levels=levels)


class StructlogAdapter:
    """:class:`~ticketvault.logging.port.LoggingPort` over structlog and the stdlib ``logging`` tree.

    ``configure`` reads::

        ticketvault:
          logging:
            format: json          # or console
            level:
              root: INFO
              ticketvault.cache: WARNING

    Unknown formats and level names raise ``ValueError``.
    """

    def __init__(self) -> None:
        self.settings = LoggingSettings()

    def configure(self, config: Config) -> None:
        self.settings = LoggingSettings.from_config(config)

        structlog.configure(
            processors=build_processors(self.settings.format),
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        logging.basicConfig(format="%(message)s", stream=sys.stdout, level=self.settings.root_level, force=True)
        for name, level in self.settings.module_levels.items():
            logging.getLogger(name).setLevel(level)

    def get_logger(self, name: str) -> Any:
        return structlog.get_logger(name)
