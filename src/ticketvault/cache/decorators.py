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
"""Declarative caching for async request handlers."""

from __future__ import annotations

import functools
import inspect
from collections.abc import Callable
from datetime import timedelta
from typing import Any, TypeVar

from ticketvault.cache.ports.outbound import ResponseCache

F = TypeVar("F", bound=Callable[..., Any])


def cache(
    backend: ResponseCache,
    key: str,
    ttl: timedelta | None = None,
    as_type: Any = None,
) -> Callable[[F], F]:
    """Cache the return value of an async function.

    The *key* template is expanded with the function's arguments, so
    ``key="/search?q={query}"`` caches one result per distinct query. A
    cached ``None`` is still a hit.

    Args:
        backend: Cache to read from and write to.
        key: Key template with {param} placeholders.
        ttl: Time-to-live for stored results; the backend default when omitted.
        as_type: Type to validate cached payloads against on read.
    """

    def decorator(func: F) -> F:
        sig = inspect.signature(func)

        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            bound = sig.bind(*args, **kwargs)
            bound.apply_defaults()
            resolved_key = key.format(**bound.arguments)

            cached = await backend.lookup(resolved_key, as_type)
            if cached.found:
                return cached.value

            result = await func(*args, **kwargs)
            await backend.set(resolved_key, result, ttl=ttl)
            return result

        return wrapper  # type: ignore[return-value]

    return decorator


def cache_evict(backend: ResponseCache, key: str) -> Callable[[F], F]:
    """Evict the entry for the expanded *key* after the function runs."""

    def decorator(func: F) -> F:
        sig = inspect.signature(func)

        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            result = await func(*args, **kwargs)
            bound = sig.bind(*args, **kwargs)
            bound.apply_defaults()
            await backend.evict(key.format(**bound.arguments))
            return result

        return wrapper  # type: ignore[return-value]

    return decorator
