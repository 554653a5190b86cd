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
"""Per-session CSRF secret."""

from __future__ import annotations

import base64
import binascii
import secrets
from typing import Any, Protocol, runtime_checkable

from flyguard.kernel.exceptions import SecretCorrupted

CSRF_SECRET_BYTES: int = 32
"""Length of the raw session secret."""

CSRF_SESSION_KEY: str = "_csrf_token"
"""Reserved session key holding the base64-encoded secret."""


@runtime_checkable
class SessionAttributes(Protocol):
    """The slice of a session the CSRF core reads and writes."""

    def get_attribute(self, name: str) -> Any | None: ...

    def set_attribute(self, name: str, value: Any) -> None: ...

    def reset(self) -> None: ...


class SecretSession:
    """Reads, and lazily creates, the CSRF secret stored in a session.

    Only the reserved key is touched; session lifecycle belongs to the
    session layer. Two concurrent first requests on one session may both
    create a secret; the store keeps the last write.
    """

    def __init__(self, key: str = CSRF_SESSION_KEY) -> None:
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    def get_or_create_secret(self, session: SessionAttributes) -> bytes:
        """Return the raw 32-byte secret for *session*, creating it if absent.

        Raises:
            SecretCorrupted: If the stored value is not strict base64 of
                :data:`CSRF_SECRET_BYTES` bytes.
        """
        stored = session.get_attribute(self._key)
        if stored is None:
            secret = secrets.token_bytes(CSRF_SECRET_BYTES)
            session.set_attribute(self._key, base64.b64encode(secret).decode("ascii"))
            return secret

        if not isinstance(stored, str):
            raise SecretCorrupted("Stored CSRF secret is not a string", context={"key": self._key})
        try:
            secret = base64.b64decode(stored.encode("ascii"), validate=True)
        except (binascii.Error, UnicodeEncodeError, ValueError) as exc:
            raise SecretCorrupted("Stored CSRF secret is not valid base64", context={"key": self._key}) from exc
        if len(secret) != CSRF_SECRET_BYTES:
            raise SecretCorrupted("Stored CSRF secret has the wrong length", context={"key": self._key})
        return secret
