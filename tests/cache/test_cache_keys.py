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
"""Tests for request_cache_key."""

from ticketvault.cache.keys import request_cache_key


class TestRequestCacheKey:
    def test_path_only(self):
        assert request_cache_key("/search") == "/search"

    def test_query_appended(self):
        assert request_cache_key("/search", "q=tomb") == "/search?q=tomb"

    def test_query_parameters_sorted(self):
        assert request_cache_key("/search", "b=2&a=1") == request_cache_key("/search", "a=1&b=2")

    def test_trailing_slash_ignored(self):
        assert request_cache_key("/search/", "?q=x") == "/search?q=x"

    def test_root_path_kept(self):
        assert request_cache_key("/") == "/"
        assert request_cache_key("") == "/"

    def test_blank_values_kept(self):
        assert request_cache_key("/search", "q=") == "/search?q="

    def test_distinct_queries_distinct_keys(self):
        assert request_cache_key("/search", "q=a") != request_cache_key("/search", "q=b")
