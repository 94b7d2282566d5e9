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
"""Prometheus-compatible counters for cache and session outcomes."""

from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter, generate_latest

CACHE_LOOKUPS = "ticketvault_cache_lookups_total"
CACHE_DESERIALIZATION_FAILURES = "ticketvault_cache_deserialization_failures_total"
SESSION_OPERATIONS = "ticketvault_session_operations_total"


class MetricsRegistry:
    """Registry for library metrics.

    Wraps prometheus_client so each metric name is registered only once.
    Every instance owns its own ``CollectorRegistry``; pass an existing one
    (e.g. ``prometheus_client.REGISTRY``) to expose the metrics from a
    process-wide endpoint.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self._registry = registry if registry is not None else CollectorRegistry()
        self._counters: dict[str, Counter] = {}

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry

    def counter(self, name: str, description: str, labels: list[str] | None = None) -> Counter:
        """Get or create a counter metric."""
        if name not in self._counters:
            self._counters[name] = Counter(name, description, labels or [], registry=self._registry)
        return self._counters[name]

    def value(self, name: str, labels: dict[str, str] | None = None) -> float:
        """Current sample value of a counter, 0.0 if never incremented."""
        sample = self._registry.get_sample_value(name, labels or {})
        return sample if sample is not None else 0.0

    def export(self) -> bytes:
        """Render all metrics in the Prometheus text exposition format."""
        return generate_latest(self._registry)
