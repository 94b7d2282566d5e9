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
"""Cache keys derived from request URLs."""

from __future__ import annotations

from urllib.parse import parse_qsl, urlencode


def request_cache_key(path: str, query_string: str = "") -> str:
    """Build a per-distinct-query key from a request path and query string.

    Trailing slashes are dropped and query parameters are sorted, so
    ``/search/?b=2&a=1`` and ``/search?a=1&b=2`` share one entry.
    """
    path = path.strip() or "/"
    if len(path) > 1:
        path = path.rstrip("/") or "/"

    query_string = query_string.lstrip("?")
    pairs = sorted(parse_qsl(query_string, keep_blank_values=True))
    if not pairs:
        return path
    return f"{path}?{urlencode(pairs)}"
