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
"""HttpSession — server-side session wrapper."""

from __future__ import annotations

import time
import uuid
from typing import Any


def new_session_id() -> str:
    """Return a fresh, unguessable session identifier."""
    return uuid.uuid4().hex


class HttpSession:
    """Wraps a session data dictionary with convenience accessors.

    Implements the session capability used by the CSRF core
    (``get_attribute`` / ``set_attribute`` / ``reset``).

    Attributes:
        id: The unique session identifier.
        is_new: ``True`` if the session id was issued during the current request.
    """

    def __init__(
        self,
        session_id: str,
        data: dict[str, Any] | None = None,
        *,
        is_new: bool = False,
    ) -> None:
        self._id = session_id
        self._data: dict[str, Any] = data if data is not None else {}
        self._is_new = is_new
        self._invalidated = False
        self._modified = is_new
        self._replaced_ids: list[str] = []

        now = time.time()
        if "_created_at" not in self._data:
            self._data["_created_at"] = now
        self._data["_last_accessed"] = now

    @property
    def id(self) -> str:
        return self._id

    @property
    def is_new(self) -> bool:
        return self._is_new

    @property
    def created_at(self) -> float:
        return float(self._data["_created_at"])

    @property
    def last_accessed(self) -> float:
        return float(self._data["_last_accessed"])

    @property
    def invalidated(self) -> bool:
        return self._invalidated

    @property
    def modified(self) -> bool:
        return self._modified

    @property
    def replaced_ids(self) -> list[str]:
        """Session ids discarded by :meth:`reset` during this request."""
        return list(self._replaced_ids)

    def get_attribute(self, name: str) -> Any | None:
        """Return the session attribute value, or ``None`` if absent."""
        return self._data.get(name)

    def set_attribute(self, name: str, value: Any) -> None:
        """Set a session attribute."""
        self._data[name] = value
        self._modified = True

    def reset(self) -> None:
        """Replace this session with a fresh, empty one under a new id.

        The old id is remembered so the session layer can delete it from
        the store; the CSRF secret and every other attribute are dropped.
        """
        self._replaced_ids.append(self._id)
        self._id = new_session_id()
        now = time.time()
        self._data = {"_created_at": now, "_last_accessed": now}
        self._is_new = True
        self._invalidated = False
        self._modified = True

    def invalidate(self) -> None:
        """Mark the session for deletion."""
        self._invalidated = True
        self._modified = True

    def get_data(self) -> dict[str, Any]:
        """Return the raw session data dictionary."""
        return self._data
