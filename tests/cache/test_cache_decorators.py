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
"""Tests for the @cache and @cache_evict decorators over the relational cache."""

from __future__ import annotations

from datetime import timedelta

import pytest

from ticketvault.cache.adapters.sqlalchemy import RelationalResponseCache
from ticketvault.cache.decorators import cache, cache_evict


@pytest.fixture
def backend(session_factory, clock) -> RelationalResponseCache:
    return RelationalResponseCache(session_factory, clock=clock)


class TestCacheDecorator:
    @pytest.mark.asyncio
    async def test_second_call_served_from_cache(self, backend):
        calls = 0

        @cache(backend, key="/search?q={query}")
        async def search(query: str) -> dict:
            nonlocal calls
            calls += 1
            return {"query": query, "hits": [query.upper()]}

        assert await search("tomb") == {"query": "tomb", "hits": ["TOMB"]}
        assert await search("tomb") == {"query": "tomb", "hits": ["TOMB"]}
        assert calls == 1
        assert await backend.get("/search?q=tomb") == {"query": "tomb", "hits": ["TOMB"]}

    @pytest.mark.asyncio
    async def test_distinct_arguments_get_distinct_entries(self, backend):
        calls = 0

        @cache(backend, key="/search?q={query}&page={page}")
        async def search(query: str, page: int = 1) -> list[str]:
            nonlocal calls
            calls += 1
            return [f"{query}-{page}"]

        await search("a")
        await search("a", page=2)
        await search("a", 1)
        assert calls == 2

    @pytest.mark.asyncio
    async def test_none_result_is_cached(self, backend):
        calls = 0

        @cache(backend, key="lookup:{name}")
        async def lookup(name: str) -> None:
            nonlocal calls
            calls += 1
            return None

        await lookup("x")
        await lookup("x")
        assert calls == 1

    @pytest.mark.asyncio
    async def test_recomputes_after_ttl(self, backend, clock):
        calls = 0

        @cache(backend, key="tick", ttl=timedelta(seconds=30))
        async def tick() -> int:
            nonlocal calls
            calls += 1
            return calls

        assert await tick() == 1
        clock.advance(timedelta(seconds=31))
        assert await tick() == 2

    @pytest.mark.asyncio
    async def test_preserves_function_metadata(self, backend):
        @cache(backend, key="k")
        async def documented() -> int:
            """Docstring."""
            return 1

        assert documented.__name__ == "documented"
        assert documented.__doc__ == "Docstring."


class TestCacheEvictDecorator:
    @pytest.mark.asyncio
    async def test_evicts_after_call(self, backend):
        await backend.set("user:1", {"name": "old"})

        @cache_evict(backend, key="user:{user_id}")
        async def rename(user_id: str, name: str) -> str:
            return name

        assert await rename("1", "new") == "new"
        assert (await backend.lookup("user:1")).found is False
