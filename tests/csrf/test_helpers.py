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
"""Tests for the CSRF view helpers."""

from __future__ import annotations

import re

from flyguard.config.properties.forgery import ForgeryProtectionProperties
from flyguard.csrf.guard import ForgeryGuard
from flyguard.csrf.helpers import CsrfHelpers
from flyguard.csrf.verifier import is_valid
from flyguard.csrf.secret import SecretSession
from flyguard.session.session import HttpSession


def _helpers(**properties) -> tuple[CsrfHelpers, HttpSession]:
    session = HttpSession("sid")
    guard = ForgeryGuard(ForgeryProtectionProperties(**properties))
    return CsrfHelpers(guard, session), session


class TestCsrfHelpers:
    def test_form_authenticity_token_validates_against_session(self) -> None:
        helpers, session = _helpers()
        token = helpers.form_authenticity_token()
        assert is_valid(token, SecretSession().get_or_create_secret(session))

    def test_protect_against_forgery_reflects_config(self) -> None:
        assert _helpers()[0].protect_against_forgery() is True
        assert _helpers(enabled=False)[0].protect_against_forgery() is False

    def test_meta_tags(self) -> None:
        helpers, _ = _helpers()
        tags = helpers.csrf_meta_tags()

        assert '<meta name="csrf-param" content="authenticity_token" />' in tags
        match = re.search(r'<meta name="csrf-token" content="([^"]+)" />', tags)
        assert match is not None
        assert len(match.group(1)) == 88

    def test_meta_tags_empty_when_disabled(self) -> None:
        helpers, session = _helpers(enabled=False)
        assert helpers.csrf_meta_tags() == ""
        assert helpers.hidden_field() == ""
        assert session.get_attribute("_csrf_token") is None

    def test_hidden_field_uses_configured_parameter(self) -> None:
        helpers, _ = _helpers(token_parameter="_token")
        field = helpers.hidden_field()
        assert field.startswith('<input type="hidden" name="_token" value="')
        assert helpers.token_parameter == "_token"

    def test_parameter_name_is_escaped(self) -> None:
        helpers, _ = _helpers(token_parameter='a"b')
        assert 'name="a&quot;b"' in helpers.hidden_field()

    def test_rendered_output_never_contains_session_secret(self) -> None:
        helpers, session = _helpers()
        rendered = helpers.csrf_meta_tags() + helpers.hidden_field() + helpers.form_authenticity_token()

        assert session.get_attribute("_csrf_token") not in rendered
        assert not hasattr(helpers, "csrf_token")
