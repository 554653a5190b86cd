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
"""Wire session handling and CSRF protection around a Starlette (or any ASGI) app."""

from __future__ import annotations

from collections.abc import Sequence

from starlette.types import ASGIApp

from flyguard.config.properties.forgery import ForgeryProtectionProperties
from flyguard.config.properties.session import SessionProperties
from flyguard.core.config import Config
from flyguard.csrf.guard import ForgeryGuard, UnverifiedRequestHandler
from flyguard.logging.port import LoggingPort
from flyguard.logging.structlog_adapter import StructlogAdapter
from flyguard.session.auto_configuration import session_filter
from flyguard.session.ports.outbound import SessionStore
from flyguard.web.adapters.starlette.filter_chain import WebFilterChainMiddleware
from flyguard.web.adapters.starlette.filters.csrf_filter import CsrfFilter
from flyguard.web.ports.filter import WebFilter


def protect_from_forgery(
    app: ASGIApp,
    config: Config | None = None,
    *,
    store: SessionStore | None = None,
    handler: UnverifiedRequestHandler | None = None,
    filters: Sequence[WebFilter] = (),
    logging_port: LoggingPort | None = None,
    configure_logging: bool = False,
) -> WebFilterChainMiddleware:
    """Wrap *app* in a filter chain with sessions and CSRF verification.

    Example::

        app = Starlette(routes=[...])
        app = protect_from_forgery(app, Config.from_file("flyguard.yaml"))

    Args:
        app: The downstream ASGI application.
        config: Configuration; packaged defaults when omitted.
        store: Session store overriding ``flyguard.session.store``.
        handler: Unverified-request strategy overriding
            ``flyguard.forgery-protection.strategy``.
        filters: Additional filters; ordered with the built-in ones by ``@order``.
        logging_port: Logging backend; supplies the guard's ``flyguard.csrf``
            logger. Defaults to :class:`StructlogAdapter`.
        configure_logging: Configure *logging_port* from ``flyguard.logging.*``.
    """
    config = config if config is not None else Config.defaults()

    logging_port = logging_port if logging_port is not None else StructlogAdapter()
    if configure_logging:
        logging_port.configure(config)

    forgery = config.bind(ForgeryProtectionProperties)
    sessions = config.bind(SessionProperties)

    guard = ForgeryGuard(forgery, handler=handler, logger=logging_port.get_logger("flyguard.csrf"))
    chain: list[WebFilter] = [session_filter(sessions, store), CsrfFilter(guard), *filters]
    return WebFilterChainMiddleware(app, filters=chain)
