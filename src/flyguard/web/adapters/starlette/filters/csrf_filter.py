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
"""CsrfFilter — masked-token CSRF protection for Starlette applications.

Runs after :class:`~flyguard.session.filter.SessionFilter`:

* Every request gets ``request.state.csrf`` (:class:`CsrfHelpers`) so
  templates can render tokens.
* Unsafe methods (anything but GET and HEAD) are verified by
  :class:`ForgeryGuard`. The token is read from the ``token_parameter``
  form field, then the query string, then the ``token_header`` header.
* A rejected request is handed to the guard's strategy. With the default
  ``ResetSession`` the request proceeds with a fresh session; with
  ``RaiseException`` the filter answers ``422``.
"""

from __future__ import annotations

from typing import Any

import structlog
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from flyguard.container.ordering import HIGHEST_PRECEDENCE
from flyguard.csrf.guard import ForgeryGuard, ForgeryRequest
from flyguard.csrf.helpers import CsrfHelpers
from flyguard.csrf.origin import ORIGIN_HEADER, base_origin
from flyguard.kernel.exceptions import InvalidAuthenticityToken
from flyguard.web.filters import OncePerRequestFilter
from flyguard.web.ports.filter import CallNext

logger = structlog.get_logger("flyguard.csrf")

_FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def request_base_origin(request: Request) -> str:
    """Return the ``scheme://host[:port]`` the request was addressed to."""
    url = request.url
    return base_origin(url.scheme, url.hostname or "", url.port)


class CsrfFilter(OncePerRequestFilter):
    """Masked-token CSRF filter.

    ``only`` / ``except`` path globs from the guard's properties become
    ``url_patterns`` / ``exclude_patterns``.
    """

    __flyguard_order__ = HIGHEST_PRECEDENCE + 300

    def __init__(self, guard: ForgeryGuard | None = None) -> None:
        self._guard = guard or ForgeryGuard()
        self.url_patterns = list(self._guard.properties.only)
        self.exclude_patterns = list(self._guard.properties.except_)

    @property
    def guard(self) -> ForgeryGuard:
        return self._guard

    async def do_filter(self, request: Request, call_next: CallNext) -> Response:
        session = getattr(request.state, "session", None)
        if session is None:
            raise RuntimeError("CsrfFilter requires a session; register SessionFilter before it")

        request.state.csrf = CsrfHelpers(self._guard, session)

        if self._guard.requires_verification(request.method):
            forgery_request = ForgeryRequest(
                method=request.method,
                submitted_token=await self._submitted_token(request),
                origin=request.headers.get(ORIGIN_HEADER),
                base_origin=request_base_origin(request),
                session=session,
            )
            try:
                self._guard.verify(forgery_request)
            except InvalidAuthenticityToken as exc:
                return JSONResponse({"error": str(exc)}, status_code=422)

        return await call_next(request)

    async def _submitted_token(self, request: Request) -> Any:
        properties = self._guard.properties
        content_type = request.headers.get("content-type", "").lower()

        if content_type.startswith(_FORM_CONTENT_TYPES):
            # Cache the body so the filter chain can replay it downstream.
            await request.body()
            value = await self._form_token(request, properties.token_parameter)
            if value:
                return value

        value = request.query_params.get(properties.token_parameter)
        if value:
            return value

        return request.headers.get(properties.token_header)

    @staticmethod
    async def _form_token(request: Request, name: str) -> Any:
        # Starlette raises HTTPException(400) instead when the scope carries an app.
        try:
            form = await request.form()
        except (MultiPartException, HTTPException):
            logger.debug("csrf_form_unparseable", content_type=request.headers.get("content-type"))
            return None
        try:
            return form.get(name)
        finally:
            await form.close()
