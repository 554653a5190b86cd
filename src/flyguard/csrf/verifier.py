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
"""Masked token verification."""

from __future__ import annotations

import hmac
from typing import Any

from flyguard.csrf import masking
from flyguard.kernel.exceptions import MalformedToken


def is_valid(token: Any, session_secret: bytes) -> bool:
    """Return ``True`` if *token* is a masked token minted from *session_secret*.

    Missing, empty, non-string and malformed values all yield ``False``;
    this function never raises for any submitted value. The digest
    comparison is constant-time.
    """
    if not token or not isinstance(token, str):
        return False

    try:
        masked = masking.decode(token)
    except MalformedToken:
        return False

    expected = masking.digest(masked.salt, session_secret)
    return hmac.compare_digest(masked.digest, expected)
