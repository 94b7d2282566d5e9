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
"""ticketvault cache: TTL response cache over the relational store."""

from ticketvault.cache.adapters.sqlalchemy import RelationalResponseCache
from ticketvault.cache.decorators import cache, cache_evict
from ticketvault.cache.keys import request_cache_key
from ticketvault.cache.ports.outbound import MISS, CacheLookup, ResponseCache

__all__ = [
    "MISS",
    "CacheLookup",
    "RelationalResponseCache",
    "ResponseCache",
    "cache",
    "cache_evict",
    "request_cache_key",
]
