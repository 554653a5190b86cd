"""FlyGuard Logging — hexagonal logging port and adapters."""

from flyguard.logging.port import LoggingPort
from flyguard.logging.structlog_adapter import StructlogAdapter

__all__ = ["LoggingPort", "StructlogAdapter"]
