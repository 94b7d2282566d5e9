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
"""Cache subsystem configuration properties."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from ticketvault.core.config import config_properties


@config_properties(prefix="ticketvault.cache")
@dataclass
class CacheProperties:
    """Configuration for the response cache (ticketvault.cache.*)."""

    default_ttl: int = 300
    max_key_length: int = 126

    @property
    def ttl(self) -> timedelta:
        return timedelta(seconds=self.default_ttl)
