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
"""Claims-based principal and the authentication ticket that carries it."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

APPLICATION_SCHEME = "ticketvault.application"


class ClaimTypes:
    """Well-known claim type names."""

    NAME_IDENTIFIER = "nameidentifier"
    NAME = "name"
    USER_DATA = "userdata"


@dataclass(frozen=True)
class Claim:
    type: str
    value: str


@dataclass(frozen=True)
class ClaimsPrincipal:
    """Identity of the caller, expressed as a set of claims.

    A principal without an authentication type is anonymous, whatever
    claims it carries.
    """

    claims: tuple[Claim, ...] = ()
    authentication_type: str | None = None

    def find_first(self, claim_type: str) -> str | None:
        """Value of the first claim of *claim_type*, or ``None``."""
        for claim in self.claims:
            if claim.type == claim_type:
                return claim.value
        return None

    @property
    def user_id(self) -> str | None:
        return self.find_first(ClaimTypes.NAME_IDENTIFIER)

    @property
    def display_name(self) -> str | None:
        return self.find_first(ClaimTypes.USER_DATA) or self.find_first(ClaimTypes.NAME)

    @property
    def is_authenticated(self) -> bool:
        return self.authentication_type is not None and self.user_id is not None

    @classmethod
    def for_user(
        cls,
        user_id: Any,
        display_name: str | None,
        authentication_type: str = APPLICATION_SCHEME,
    ) -> ClaimsPrincipal:
        """Build the claim set for a signed-in user."""
        identifier = str(user_id)
        claims = [
            Claim(ClaimTypes.NAME_IDENTIFIER, identifier),
            Claim(ClaimTypes.NAME, identifier),
        ]
        if display_name is not None:
            claims.append(Claim(ClaimTypes.USER_DATA, display_name))
        return cls(claims=tuple(claims), authentication_type=authentication_type)

    @classmethod
    def anonymous(cls) -> ClaimsPrincipal:
        return cls()


@dataclass(frozen=True)
class AuthenticationTicket:
    """A principal restored from the store together with its session properties.

    Attributes:
        principal: The reconstructed caller identity.
        expires_at: Absolute UTC expiry of the underlying session.
        key: The session key the ticket was loaded from.
        is_persistent: Whether the session cookie outlives the browser session.
        allow_refresh: Whether the gate may slide the expiry forward.
        renewed: Set when the gate renewed the session while validating it.
    """

    principal: ClaimsPrincipal
    expires_at: datetime
    key: str | None = None
    is_persistent: bool = True
    allow_refresh: bool = True
    renewed: bool = False

    def remaining(self, now: datetime) -> timedelta:
        return self.expires_at - now
