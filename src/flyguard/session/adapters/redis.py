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
"""Redis-backed session store."""

from __future__ import annotations

import json
from typing import Any, cast

import structlog

from flyguard.kernel.exceptions import InfrastructureException

logger = structlog.get_logger("flyguard.session")

_KEY_PREFIX = "flyguard:session:"


class RedisSessionStore:
    """Session store backed by ``redis.asyncio``.

    Values are JSON-serialized before storage.
    Keys are prefixed with ``flyguard:session:`` for namespace isolation.
    An undecodable payload is treated as a missing session, which gives the
    request a fresh session (and so a fresh CSRF secret).
    """

    def __init__(self, client: Any, key_prefix: str = _KEY_PREFIX) -> None:
        self._client = client
        self._key_prefix = key_prefix

    def _key(self, session_id: str) -> str:
        return f"{self._key_prefix}{session_id}"

    async def get(self, session_id: str) -> dict[str, Any] | None:
        """Retrieve and deserialize session data."""
        raw = await self._client.get(self._key(session_id))
        if raw is None:
            return None
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, TypeError, UnicodeDecodeError):
            logger.warning("session_payload_undecodable", session_id=session_id)
            return None
        if not isinstance(data, dict):
            logger.warning("session_payload_undecodable", session_id=session_id)
            return None
        return cast(dict[str, Any], data)

    async def save(self, session_id: str, data: dict[str, Any], ttl: int) -> None:
        """Serialize and store session data with a TTL in seconds."""
        try:
            raw = json.dumps(data)
        except (TypeError, ValueError) as exc:
            raise InfrastructureException(
                "Session data is not JSON-serializable",
                code="SESSION_001",
                context={"session_id": session_id},
            ) from exc
        await self._client.set(self._key(session_id), raw.encode(), ex=ttl)

    async def delete(self, session_id: str) -> None:
        """Remove a session."""
        await self._client.delete(self._key(session_id))

    async def exists(self, session_id: str) -> bool:
        """Check whether a session exists."""
        count = await self._client.exists(self._key(session_id))
        return cast(bool, count > 0)
