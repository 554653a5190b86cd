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
"""Same-origin check on the ``Origin`` request header."""

from __future__ import annotations

ORIGIN_HEADER: str = "origin"
"""Request header carrying the initiating origin."""

_DEFAULT_PORTS: dict[str, int] = {"http": 80, "https": 443}


def base_origin(scheme: str, host: str, port: int | None = None) -> str:
    """Return the canonical ``scheme://host[:port]`` of a request.

    The port is omitted when absent or the default for *scheme*, matching
    what browsers send in ``Origin``.
    """
    scheme = scheme.lower()
    if ":" in host and not host.startswith("["):
        host = f"[{host}]"
    if port is None or _DEFAULT_PORTS.get(scheme) == port:
        return f"{scheme}://{host}"
    return f"{scheme}://{host}:{port}"


def same_origin(origin: str | None, request_base_origin: str) -> bool:
    """Return ``True`` unless a non-empty *origin* differs from the request's own.

    Some user agents omit ``Origin``; token verification remains the
    primary defence, so an absent header passes.
    """
    if not origin:
        return True
    return origin == request_base_origin
