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
"""Masked CSRF token encoding.

A masked token is ``base64(salt || SHA256(salt || session_secret))``. The
salt is fresh on every mint, so two tokens rendered for the same session
never match byte-for-byte, yet both verify against the session secret.
The raw secret never leaves the server.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import secrets
from typing import NamedTuple

from flyguard.kernel.exceptions import MalformedToken

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
SALT_BYTES: int = 32
"""Length of the one-time salt prepended to every masked token."""

DIGEST_BYTES: int = hashlib.sha256().digest_size
"""Length of the SHA-256 digest of ``salt || session_secret``."""

MASKED_TOKEN_BYTES: int = SALT_BYTES + DIGEST_BYTES
"""Exact decoded length of a well-formed masked token."""


class MaskedToken(NamedTuple):
    """A decoded masked token."""

    salt: bytes
    digest: bytes


def digest(salt: bytes, session_secret: bytes) -> bytes:
    """Return ``SHA256(salt || session_secret)``."""
    return hashlib.sha256(salt + session_secret).digest()


def mint(session_secret: bytes) -> str:
    """Mint a fresh masked token for *session_secret*.

    Returns:
        Strict base64 (standard alphabet, padded) of ``salt || digest``.
    """
    salt = secrets.token_bytes(SALT_BYTES)
    return base64.b64encode(salt + digest(salt, session_secret)).decode("ascii")


def decode(token: str) -> MaskedToken:
    """Split a submitted token into its salt and digest.

    Raises:
        MalformedToken: If *token* is not strict base64 or does not decode
            to exactly :data:`MASKED_TOKEN_BYTES` bytes.
    """
    try:
        raw = base64.b64decode(token.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError, ValueError) as exc:
        raise MalformedToken("Token is not valid base64") from exc

    if len(raw) != MASKED_TOKEN_BYTES:
        raise MalformedToken("Token has the wrong length")

    return MaskedToken(salt=raw[:SALT_BYTES], digest=raw[SALT_BYTES:])
