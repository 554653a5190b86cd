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
"""Tests for HttpSession."""

from __future__ import annotations

from flyguard.session.session import HttpSession


class TestHttpSession:
    def test_new_session_is_modified(self) -> None:
        session = HttpSession("sid", is_new=True)
        assert session.is_new is True
        assert session.modified is True

    def test_loaded_session_is_not_modified(self) -> None:
        session = HttpSession("sid", {"user_id": 1})
        assert session.is_new is False
        assert session.modified is False
        assert session.get_attribute("user_id") == 1

    def test_set_attribute_marks_modified(self) -> None:
        session = HttpSession("sid")
        session.set_attribute("cart", [1, 2])
        assert session.get_attribute("cart") == [1, 2]
        assert session.modified is True

    def test_reset_issues_new_id_and_clears_data(self) -> None:
        session = HttpSession("sid", {"user_id": 1, "_csrf_token": "secret"})

        session.reset()

        assert session.id != "sid"
        assert session.replaced_ids == ["sid"]
        assert session.is_new is True
        assert session.modified is True
        assert session.invalidated is False
        assert session.get_attribute("user_id") is None
        assert session.get_attribute("_csrf_token") is None
        assert session.created_at > 0

    def test_repeated_reset_remembers_every_id(self) -> None:
        session = HttpSession("sid")
        session.reset()
        intermediate = session.id
        session.reset()
        assert session.replaced_ids == ["sid", intermediate]

    def test_invalidate(self) -> None:
        session = HttpSession("sid")
        session.invalidate()
        assert session.invalidated is True
