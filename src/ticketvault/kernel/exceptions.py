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
"""Exception hierarchy for ticketvault.

All library exceptions inherit from TicketVaultException so callers can
catch one type at the boundary, or a specific subclass for targeted handling.

Categories:
- BusinessException: domain rule violations (bad principal, unserializable value)
- InfrastructureException: storage backend failures

Lookups on unknown or expired keys are not errors; they return ``None``
(or a not-found :class:`~ticketvault.cache.ports.outbound.CacheLookup`).
"""

from __future__ import annotations


class TicketVaultException(Exception):
    """Base exception for all ticketvault errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "SESSION_INVALID_PRINCIPAL").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


class BusinessException(TicketVaultException):
    """Domain rule violations and caller errors."""


class ValidationException(BusinessException):
    """Input validation failures."""


class InvalidPrincipalException(ValidationException):
    """The principal lacks a usable user-identity claim."""

    def __init__(self, message: str, context: dict | None = None) -> None:
        super().__init__(message, code="SESSION_INVALID_PRINCIPAL", context=context)


class SerializationException(BusinessException):
    """A value could not be serialized for storage."""

    def __init__(self, message: str, context: dict | None = None) -> None:
        super().__init__(message, code="CACHE_SERIALIZATION", context=context)


class InfrastructureException(TicketVaultException):
    """Infrastructure failures: database, network."""


class BackendFailureException(InfrastructureException):
    """The storage backend failed while executing an operation."""

    def __init__(self, message: str, context: dict | None = None) -> None:
        super().__init__(message, code="STORAGE_BACKEND_FAILURE", context=context)
