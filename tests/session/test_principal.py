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
"""Tests for ClaimsPrincipal and AuthenticationTicket."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime, timedelta

from ticketvault.session.principal import (
    APPLICATION_SCHEME,
    AuthenticationTicket,
    Claim,
    ClaimsPrincipal,
    ClaimTypes,
)


class TestClaimsPrincipal:
    def test_for_user_carries_identity_claims(self):
        user_id = uuid.uuid4()
        principal = ClaimsPrincipal.for_user(user_id, "alice")

        assert principal.authentication_type == APPLICATION_SCHEME
        assert principal.user_id == str(user_id)
        assert principal.find_first(ClaimTypes.NAME) == str(user_id)
        assert principal.display_name == "alice"
        assert principal.is_authenticated

    def test_for_user_without_display_name(self):
        principal = ClaimsPrincipal.for_user("u-1", None)
        assert principal.find_first(ClaimTypes.USER_DATA) is None
        assert principal.display_name == "u-1"

    def test_anonymous_is_not_authenticated(self):
        principal = ClaimsPrincipal.anonymous()
        assert not principal.is_authenticated
        assert principal.user_id is None

    def test_claims_without_scheme_are_not_authenticated(self):
        principal = ClaimsPrincipal(claims=(Claim(ClaimTypes.NAME_IDENTIFIER, "u-1"),))
        assert not principal.is_authenticated

    def test_find_first_returns_first_match(self):
        principal = ClaimsPrincipal(claims=(Claim("role", "admin"), Claim("role", "user")))
        assert principal.find_first("role") == "admin"
        assert principal.find_first("missing") is None


class TestAuthenticationTicket:
    def test_remaining(self):
        now = datetime(2026, 1, 1, tzinfo=UTC)
        ticket = AuthenticationTicket(ClaimsPrincipal.anonymous(), expires_at=now + timedelta(hours=2))
        assert ticket.remaining(now) == timedelta(hours=2)

    def test_defaults(self):
        ticket = AuthenticationTicket(ClaimsPrincipal.anonymous(), expires_at=datetime(2026, 1, 1, tzinfo=UTC))
        assert ticket.key is None
        assert ticket.is_persistent
        assert ticket.allow_refresh
        assert not ticket.renewed
