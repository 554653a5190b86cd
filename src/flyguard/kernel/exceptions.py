"""Unified exception hierarchy for FlyGuard.

All framework exceptions inherit from FlyGuardException, enabling unified
error handling across modules.

Categories:
- SecurityException: request authenticity failures (CSRF)
- InfrastructureException: session store and other backend failures

Only :class:`InvalidAuthenticityToken` is meant to reach application code.
:class:`MalformedToken` and :class:`SecretCorrupted` are raised and caught
inside the CSRF core so that every failure collapses into one outcome.
"""

from __future__ import annotations


# =============================================================================
# Base Exception
# =============================================================================


class FlyGuardException(Exception):
    """Base exception for all FlyGuard errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "CSRF_001").
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


# =============================================================================
# Security Exceptions
# =============================================================================


class SecurityException(FlyGuardException):
    """Request authenticity and session integrity errors."""


class InvalidAuthenticityToken(SecurityException):
    """The request could not be verified as originating from this application.

    Carries no detail about which check failed.
    """

    def __init__(self, message: str = "Invalid authenticity token") -> None:
        super().__init__(message, code="CSRF_001")


class MalformedToken(SecurityException):
    """A submitted token is not strict base64 or has the wrong decoded length."""


class SecretCorrupted(SecurityException):
    """The CSRF secret stored in the session cannot be decoded."""


# =============================================================================
# Infrastructure Exceptions
# =============================================================================


class InfrastructureException(FlyGuardException):
    """Infrastructure failures: session stores, caches, network."""
