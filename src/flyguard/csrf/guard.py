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
"""ForgeryGuard — per-request CSRF verification policy.

Decides whether a request needs verification, checks the submitted masked
token and the ``Origin`` header, and hands rejected requests to a
pluggable :class:`UnverifiedRequestHandler`.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

import structlog

from flyguard.config.properties.forgery import ForgeryProtectionProperties
from flyguard.csrf import masking, origin, verifier
from flyguard.csrf.secret import SecretSession, SessionAttributes
from flyguard.kernel.exceptions import InvalidAuthenticityToken, SecretCorrupted

SAFE_METHODS: frozenset[str] = frozenset({"GET", "HEAD"})
"""HTTP methods that never require a token."""


class VerificationOutcome(enum.Enum):
    """Result of :meth:`ForgeryGuard.verify`."""

    NOT_REQUIRED = "not_required"
    VERIFIED = "verified"
    REJECTED = "rejected"


@dataclass(frozen=True)
class ForgeryRequest:
    """What the guard needs to know about one request."""

    method: str
    submitted_token: Any
    origin: str | None
    base_origin: str
    session: SessionAttributes


# ---------------------------------------------------------------------------
# Unverified request strategies
# ---------------------------------------------------------------------------


@runtime_checkable
class UnverifiedRequestHandler(Protocol):
    """Decides what happens to a request that failed verification."""

    def handle_unverified_request(self, request: ForgeryRequest) -> None: ...


class ResetSession:
    """Replace the session with a fresh, secret-free one and let the request proceed."""

    def handle_unverified_request(self, request: ForgeryRequest) -> None:
        request.session.reset()


class RaiseException:
    """Abort the request with :class:`InvalidAuthenticityToken`."""

    def handle_unverified_request(self, request: ForgeryRequest) -> None:
        raise InvalidAuthenticityToken()


class NullHandler:
    """Log-and-continue: leave the session and request untouched."""

    def handle_unverified_request(self, request: ForgeryRequest) -> None:
        return None


_STRATEGIES: dict[str, type[UnverifiedRequestHandler]] = {
    "reset-session": ResetSession,
    "exception": RaiseException,
    "null": NullHandler,
}


def strategy_for(name: str) -> UnverifiedRequestHandler:
    """Return a new strategy instance by its configuration name.

    Raises:
        ValueError: If *name* is not one of ``reset-session``, ``exception``
            or ``null``.
    """
    try:
        return _STRATEGIES[name.lower()]()
    except KeyError:
        raise ValueError(
            f"Unknown forgery protection strategy '{name}'. Expected one of: {', '.join(sorted(_STRATEGIES))}"
        ) from None


# ---------------------------------------------------------------------------
# Guard
# ---------------------------------------------------------------------------


class ForgeryGuard:
    """Verifies requests against the masked-token CSRF scheme.

    Args:
        properties: Protection settings; ``enabled`` is the global switch.
        handler: Strategy invoked on rejection. Defaults to the one named by
            ``properties.strategy``.
        secret_session: Accessor for the per-session secret.
        logger: structlog-style logger; receives one warning per rejection.
    """

    def __init__(
        self,
        properties: ForgeryProtectionProperties | None = None,
        handler: UnverifiedRequestHandler | None = None,
        secret_session: SecretSession | None = None,
        logger: Any = None,
    ) -> None:
        self._properties = properties or ForgeryProtectionProperties()
        self._handler = handler if handler is not None else strategy_for(self._properties.strategy)
        self._secrets = secret_session or SecretSession()
        self._logger = logger if logger is not None else structlog.get_logger("flyguard.csrf")

    @property
    def properties(self) -> ForgeryProtectionProperties:
        return self._properties

    @property
    def handler(self) -> UnverifiedRequestHandler:
        return self._handler

    def protect_against_forgery(self) -> bool:
        """Return ``True`` if forgery protection is switched on."""
        return self._properties.enabled

    def requires_verification(self, method: str) -> bool:
        """Return ``True`` if a request with *method* must carry a valid token."""
        return self.protect_against_forgery() and method.upper() not in SAFE_METHODS

    def form_authenticity_token(self, session: SessionAttributes) -> str:
        """Mint a fresh masked token for *session*, creating its secret if needed."""
        return masking.mint(self._secrets.get_or_create_secret(session))

    def verified_request(self, request: ForgeryRequest) -> bool:
        """Return the verification decision for *request* without side effects on rejection."""
        if not self.requires_verification(request.method):
            return True
        # Both checks run unconditionally.
        token_ok = self._token_valid(request)
        origin_ok = origin.same_origin(request.origin, request.base_origin)
        return token_ok and origin_ok

    def verify(self, request: ForgeryRequest) -> VerificationOutcome:
        """Verify *request*, running the unverified-request strategy on failure.

        Raises:
            InvalidAuthenticityToken: If the configured strategy raises it.
        """
        if not self.requires_verification(request.method):
            return VerificationOutcome.NOT_REQUIRED

        if self.verified_request(request):
            return VerificationOutcome.VERIFIED

        self._logger.warning("csrf_token_unverified", method=request.method.upper())
        self._handler.handle_unverified_request(request)
        return VerificationOutcome.REJECTED

    def _token_valid(self, request: ForgeryRequest) -> bool:
        try:
            secret = self._secrets.get_or_create_secret(request.session)
        except SecretCorrupted:
            return False
        return verifier.is_valid(request.submitted_token, secret)
