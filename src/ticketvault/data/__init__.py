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
"""Relational storage backend: entities, repositories, unit of work."""

from ticketvault.data.entity import Base, CacheEntry, SessionTicket, User
from ticketvault.data.lifecycle import EngineLifecycle, create_engine, create_session_factory
from ticketvault.data.repository import (
    CacheEntryRepository,
    Repository,
    SessionTicketRepository,
    UserRepository,
)
from ticketvault.data.transactional import unit_of_work
from ticketvault.data.types import UtcDateTime

__all__ = [
    "Base",
    "CacheEntry",
    "CacheEntryRepository",
    "EngineLifecycle",
    "Repository",
    "SessionTicket",
    "SessionTicketRepository",
    "User",
    "UserRepository",
    "UtcDateTime",
    "create_engine",
    "create_session_factory",
    "unit_of_work",
]
