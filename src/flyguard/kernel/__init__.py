"""FlyGuard Kernel — Foundation layer with zero external dependencies."""

from flyguard.kernel.exceptions import (
    FlyGuardException,
    InfrastructureException,
    InvalidAuthenticityToken,
    MalformedToken,
    SecretCorrupted,
    SecurityException,
)

__all__ = [
    # Base
    "FlyGuardException",
    # Security
    "SecurityException",
    "InvalidAuthenticityToken",
    "MalformedToken",
    "SecretCorrupted",
    # Infrastructure
    "InfrastructureException",
]
