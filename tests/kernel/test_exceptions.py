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
"""Tests for the FlyGuard exception hierarchy."""

import pytest

from flyguard.kernel import (
    FlyGuardException,
    InfrastructureException,
    InvalidAuthenticityToken,
    MalformedToken,
    SecretCorrupted,
    SecurityException,
)


class TestExceptionHierarchy:
    @pytest.mark.parametrize("exc_cls", [InvalidAuthenticityToken, MalformedToken, SecretCorrupted])
    def test_csrf_errors_are_security_exceptions(self, exc_cls):
        assert issubclass(exc_cls, SecurityException)
        assert issubclass(exc_cls, FlyGuardException)

    def test_infrastructure_is_not_security(self):
        assert not issubclass(InfrastructureException, SecurityException)

    def test_code_and_context(self):
        exc = SecretCorrupted("bad secret", context={"key": "_csrf_token"})
        assert str(exc) == "bad secret"
        assert exc.code is None
        assert exc.context == {"key": "_csrf_token"}

    def test_context_defaults_to_empty_dict(self):
        assert FlyGuardException("x").context == {}

    def test_invalid_authenticity_token_is_generic(self):
        exc = InvalidAuthenticityToken()
        assert str(exc) == "Invalid authenticity token"
        assert exc.code == "CSRF_001"
        assert exc.context == {}
