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
"""Session store and filter construction from configuration."""

from __future__ import annotations

from flyguard.config.properties.session import SessionProperties
from flyguard.session.filter import SessionFilter
from flyguard.session.ports.outbound import SessionStore


def session_store(properties: SessionProperties) -> SessionStore:
    """Build the session store named by ``flyguard.session.store``.

    ``redis`` requires the ``redis`` extra; anything else falls back to the
    in-memory store.
    """
    if properties.store == "redis":
        import redis.asyncio as aioredis

        from flyguard.session.adapters.redis import RedisSessionStore

        url = str(properties.redis.get("url", "redis://localhost:6379/0"))
        client = aioredis.from_url(url)  # type: ignore[no-untyped-call,unused-ignore]
        return RedisSessionStore(client=client)

    from flyguard.session.adapters.memory import InMemorySessionStore

    return InMemorySessionStore()


def session_filter(properties: SessionProperties, store: SessionStore | None = None) -> SessionFilter:
    """Build a :class:`SessionFilter` for *properties*."""
    return SessionFilter(
        store=store if store is not None else session_store(properties),
        cookie_name=properties.cookie_name,
        ttl=properties.ttl,
    )
