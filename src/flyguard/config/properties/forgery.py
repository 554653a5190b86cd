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
"""Forgery protection configuration properties."""

from __future__ import annotations

from dataclasses import dataclass, field

from flyguard.core.config import config_properties


@config_properties(prefix="flyguard.forgery-protection")
@dataclass
class ForgeryProtectionProperties:
    """Configuration for CSRF protection (flyguard.forgery-protection.*).

    ``only`` and ``except_`` are glob path patterns selecting which requests
    are verified at all.
    """

    enabled: bool = True
    token_parameter: str = "authenticity_token"
    token_header: str = "X-CSRF-Token"
    strategy: str = "reset-session"
    only: list[str] = field(default_factory=list)
    except_: list[str] = field(default_factory=list)
