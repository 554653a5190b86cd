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
"""View helpers exposed to templates.

:class:`CsrfFilter` attaches a :class:`CsrfHelpers` to ``request.state.csrf``;
templates render its output into forms and the document ``<head>``::

    <head>{{ request.state.csrf.csrf_meta_tags() | safe }}</head>
    <form method="post">{{ request.state.csrf.hidden_field() | safe }}</form>
"""

from __future__ import annotations

from html import escape

from flyguard.csrf.guard import ForgeryGuard
from flyguard.csrf.secret import SessionAttributes


class CsrfHelpers:
    """Per-request helpers bound to one guard and one session."""

    def __init__(self, guard: ForgeryGuard, session: SessionAttributes) -> None:
        self._guard = guard
        self._session = session

    @property
    def token_parameter(self) -> str:
        """Name of the form field that carries the token."""
        return self._guard.properties.token_parameter

    def protect_against_forgery(self) -> bool:
        return self._guard.protect_against_forgery()

    def form_authenticity_token(self) -> str:
        """Return a freshly masked token for the current session."""
        return self._guard.form_authenticity_token(self._session)

    def csrf_meta_tags(self) -> str:
        """Render ``csrf-param`` and ``csrf-token`` meta tags, or ``""`` when disabled."""
        if not self.protect_against_forgery():
            return ""
        return (
            f'<meta name="csrf-param" content="{escape(self.token_parameter)}" />\n'
            f'<meta name="csrf-token" content="{escape(self.form_authenticity_token())}" />'
        )

    def hidden_field(self) -> str:
        """Render a hidden form input carrying a fresh token, or ``""`` when disabled."""
        if not self.protect_against_forgery():
            return ""
        return (
            f'<input type="hidden" name="{escape(self.token_parameter)}" '
            f'value="{escape(self.form_authenticity_token())}" />'
        )
