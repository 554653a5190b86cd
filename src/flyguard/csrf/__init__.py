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
"""FlyGuard CSRF — masked-token request forgery protection.

The core is framework-agnostic: :class:`ForgeryGuard` works on a
:class:`ForgeryRequest` and any session object with ``get_attribute``,
``set_attribute`` and ``reset``. The Starlette glue lives in
``flyguard.web.adapters.starlette``.
"""

from flyguard.csrf.guard import (
    SAFE_METHODS,
    ForgeryGuard,
    ForgeryRequest,
    NullHandler,
    RaiseException,
    ResetSession,
    UnverifiedRequestHandler,
    VerificationOutcome,
    strategy_for,
)
from flyguard.csrf.helpers import CsrfHelpers
from flyguard.csrf.masking import MASKED_TOKEN_BYTES, MaskedToken, decode, mint
from flyguard.csrf.origin import base_origin, same_origin
from flyguard.csrf.secret import CSRF_SESSION_KEY, SecretSession, SessionAttributes
from flyguard.csrf.verifier import is_valid

__all__ = [
    "CSRF_SESSION_KEY",
    "CsrfHelpers",
    "ForgeryGuard",
    "ForgeryRequest",
    "MASKED_TOKEN_BYTES",
    "MaskedToken",
    "NullHandler",
    "RaiseException",
    "ResetSession",
    "SAFE_METHODS",
    "SecretSession",
    "SessionAttributes",
    "UnverifiedRequestHandler",
    "VerificationOutcome",
    "base_origin",
    "decode",
    "is_valid",
    "mint",
    "same_origin",
    "strategy_for",
]
