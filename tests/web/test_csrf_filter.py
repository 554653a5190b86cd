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
"""End-to-end tests for CsrfFilter wired with protect_from_forgery()."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock

import pytest
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from flyguard.core.config import Config
from flyguard.csrf.guard import RaiseException
from flyguard.logging.port import LoggingPort
from flyguard.session.adapters.memory import InMemorySessionStore
from flyguard.web.adapters.starlette.app import protect_from_forgery
from flyguard.web.adapters.starlette.filters.csrf_filter import CsrfFilter

COOKIE = "FLYGUARD_SESSION"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def _form_page(request: Request) -> JSONResponse:
    csrf = request.state.csrf
    return JSONResponse(
        {
            "token": csrf.form_authenticity_token(),
            "meta": csrf.csrf_meta_tags(),
            "protect": csrf.protect_against_forgery(),
        }
    )


async def _login(request: Request) -> JSONResponse:
    request.state.session.set_attribute("user_id", 42)
    return JSONResponse({"ok": True})


async def _submit(request: Request) -> JSONResponse:
    await request.body()
    form = await request.form()
    upload = form.get("upload")
    session = request.state.session
    return JSONResponse(
        {
            "name": form.get("name"),
            "upload": getattr(upload, "filename", None),
            "user_id": session.get_attribute("user_id"),
        }
    )


def _make_client(config: Config | None = None, **kwargs) -> TestClient:
    app = Starlette(
        routes=[
            Route("/form", _form_page),
            Route("/login", _login, methods=["POST"]),
            Route("/submit", _submit, methods=["POST", "PUT", "DELETE"]),
            Route("/webhooks/github", _submit, methods=["POST"]),
        ],
    )
    kwargs.setdefault("store", InMemorySessionStore())
    return TestClient(protect_from_forgery(app, config, **kwargs))


def _logged_in_client(config: Config | None = None, **kwargs) -> tuple[TestClient, str]:
    """Return a client with an established session and a token for it."""
    client = _make_client(config, **kwargs)
    token = client.get("/form").json()["token"]
    client.post("/login", data={"authenticity_token": token})
    return client, token


# ---------------------------------------------------------------------------
# Token delivery
# ---------------------------------------------------------------------------


class TestTokenDelivery:
    def test_get_renders_token_and_meta_tags(self) -> None:
        client = _make_client()
        body = client.get("/form").json()

        assert len(body["token"]) == 88
        assert body["protect"] is True
        assert '<meta name="csrf-param" content="authenticity_token" />' in body["meta"]
        assert COOKIE in client.cookies

    def test_each_render_yields_a_new_token(self) -> None:
        client = _make_client()
        assert client.get("/form").json()["token"] != client.get("/form").json()["token"]


# ---------------------------------------------------------------------------
# Verification
# ---------------------------------------------------------------------------


class TestVerifiedRequests:
    def test_form_token_is_accepted_and_body_reaches_endpoint(self) -> None:
        client, token = _logged_in_client()
        session_id = client.cookies[COOKIE]

        resp = client.post("/submit", data={"authenticity_token": token, "name": "ada"})

        assert resp.status_code == 200
        assert resp.json() == {"name": "ada", "upload": None, "user_id": 42}
        assert client.cookies[COOKIE] == session_id

    def test_multipart_form_token_is_accepted(self) -> None:
        client, token = _logged_in_client()

        resp = client.post(
            "/submit",
            data={"authenticity_token": token, "name": "ada"},
            files={"upload": ("notes.txt", b"hello", "text/plain")},
        )

        assert resp.json() == {"name": "ada", "upload": "notes.txt", "user_id": 42}

    def test_header_token_is_accepted(self) -> None:
        client, token = _logged_in_client()
        resp = client.put("/submit", headers={"X-CSRF-Token": token})
        assert resp.json()["user_id"] == 42

    def test_query_token_is_accepted(self) -> None:
        client, token = _logged_in_client()
        resp = client.delete("/submit", params={"authenticity_token": token})
        assert resp.json()["user_id"] == 42

    def test_matching_origin_is_accepted(self) -> None:
        client, token = _logged_in_client()
        resp = client.post(
            "/submit",
            data={"authenticity_token": token},
            headers={"Origin": "http://testserver"},
        )
        assert resp.json()["user_id"] == 42

    def test_token_survives_across_requests(self) -> None:
        client, token = _logged_in_client()
        for _ in range(3):
            assert client.post("/submit", data={"authenticity_token": token}).json()["user_id"] == 42


class TestUnverifiedRequests:
    def test_missing_token_resets_session(self) -> None:
        client, token = _logged_in_client()
        old_id = client.cookies[COOKIE]

        resp = client.post("/submit", data={"name": "mallory"})

        assert resp.status_code == 200
        assert resp.json() == {"name": "mallory", "upload": None, "user_id": None}
        assert client.cookies[COOKIE] != old_id

    def test_old_token_is_useless_after_reset(self) -> None:
        client, token = _logged_in_client()
        client.post("/submit", data={"name": "mallory"})

        resp = client.post("/submit", data={"authenticity_token": token})

        assert resp.json()["user_id"] is None

    def test_foreign_origin_resets_session(self) -> None:
        client, token = _logged_in_client()
        resp = client.post(
            "/submit",
            data={"authenticity_token": token},
            headers={"Origin": "https://evil.example"},
        )
        assert resp.json()["user_id"] is None

    def test_tampered_token_resets_session(self) -> None:
        client, token = _logged_in_client()
        tampered = ("B" if token[0] == "A" else "A") + token[1:]
        resp = client.post("/submit", data={"authenticity_token": tampered})
        assert resp.json()["user_id"] is None

    def test_json_body_without_token_resets_session(self) -> None:
        client, _ = _logged_in_client()
        old_id = client.cookies[COOKIE]

        resp = client.post("/login", json={"user": "x"})

        assert resp.json() == {"ok": True}
        assert client.cookies[COOKIE] != old_id

    def test_exception_strategy_returns_422(self) -> None:
        client, _ = _logged_in_client(handler=RaiseException())
        resp = client.post("/submit", data={"authenticity_token": "nope"})
        assert resp.status_code == 422
        assert resp.json() == {"error": "Invalid authenticity token"}

    def test_exception_strategy_from_config(self) -> None:
        config = Config({"flyguard": {"forgery-protection": {"strategy": "exception"}}})
        client = _make_client(config)
        resp = client.post("/submit", data={"name": "x"})
        assert resp.status_code == 422


class TestUnparseableForms:
    def test_broken_multipart_with_header_token_is_verified(self) -> None:
        client, token = _logged_in_client()
        session_id = client.cookies[COOKIE]

        resp = client.post(
            "/login",
            content=b"garbage",
            headers={"content-type": "multipart/form-data", "X-CSRF-Token": token},
        )

        assert resp.status_code == 200
        assert client.cookies[COOKIE] == session_id

    def test_broken_multipart_without_token_resets_session(self) -> None:
        client, _ = _logged_in_client()
        session_id = client.cookies[COOKIE]

        resp = client.post("/login", content=b"garbage", headers={"content-type": "multipart/form-data"})

        assert resp.status_code == 200
        assert client.cookies[COOKIE] != session_id

    def test_broken_multipart_with_exception_strategy_returns_422(self) -> None:
        client, _ = _logged_in_client(handler=RaiseException())
        resp = client.post("/login", content=b"garbage", headers={"content-type": "multipart/form-data"})
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_parse_error_inside_starlette_app_falls_back_to_header(self) -> None:
        scope = {
            "type": "http",
            "method": "POST",
            "path": "/submit",
            "query_string": b"",
            "headers": [(b"content-type", b"multipart/form-data"), (b"x-csrf-token", b"from-header")],
            "app": Starlette(),
        }

        async def receive() -> dict:
            return {"type": "http.request", "body": b"garbage", "more_body": False}

        token = await CsrfFilter()._submitted_token(Request(scope, receive))

        assert token == "from-header"


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class TestConfiguration:
    def test_disabled_protection_accepts_anything(self) -> None:
        config = Config({"flyguard": {"forgery-protection": {"enabled": False}}})
        client = _make_client(config)
        client.post("/login")
        session_id = client.cookies[COOKIE]

        resp = client.post("/submit", data={"name": "x"})

        assert resp.json()["user_id"] == 42
        assert client.cookies[COOKIE] == session_id
        assert client.get("/form").json()["meta"] == ""

    def test_disabled_via_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FLYGUARD_FORGERY_PROTECTION_ENABLED", "false")
        client = _make_client()
        client.post("/login")
        assert client.post("/submit").json()["user_id"] == 42

    def test_except_patterns_skip_verification(self) -> None:
        config = Config({"flyguard": {"forgery-protection": {"except": ["/webhooks/*"]}}})
        client = _make_client(config)
        client.post("/login")

        resp = client.post("/webhooks/github", data={"name": "push"})

        assert resp.json()["user_id"] == 42

    def test_only_patterns_limit_verification(self) -> None:
        config = Config({"flyguard": {"forgery-protection": {"only": ["/submit"]}}})
        client = _make_client(config)
        client.post("/login")

        assert client.post("/webhooks/github").json()["user_id"] == 42
        assert client.post("/submit").json()["user_id"] is None

    def test_custom_parameter_name(self) -> None:
        config = Config({"flyguard": {"forgery-protection": {"token-parameter": "_token"}}})
        client = _make_client(config)
        token = client.get("/form").json()["token"]
        client.post("/login", data={"_token": token})

        assert client.post("/submit", data={"_token": token}).json()["user_id"] == 42


class TestCsrfFilterUnit:
    @pytest.mark.asyncio
    async def test_requires_session(self) -> None:
        request = SimpleNamespace(method="POST", url=SimpleNamespace(path="/"), state=SimpleNamespace())
        with pytest.raises(RuntimeError, match="SessionFilter"):
            await CsrfFilter().do_filter(request, AsyncMock())

    def test_patterns_come_from_properties(self) -> None:
        config = Config({"flyguard": {"forgery-protection": {"only": ["/a/*"], "except": ["/a/b"]}}})
        chain = protect_from_forgery(Starlette(), config, store=InMemorySessionStore())
        csrf_filter = next(f for f in chain.filters if isinstance(f, CsrfFilter))
        assert csrf_filter.url_patterns == ["/a/*"]
        assert csrf_filter.exclude_patterns == ["/a/b"]


class RecordingLogging:
    """LoggingPort that hands out one Mock logger per name."""

    def __init__(self) -> None:
        self.configured_with: Config | None = None
        self.loggers: dict[str, Mock] = {}

    def configure(self, config: Config) -> None:
        self.configured_with = config

    def get_logger(self, name: str) -> Mock:
        return self.loggers.setdefault(name, Mock())

    def set_level(self, name: str, level: str) -> None:
        pass


class TestLoggingPort:
    def test_recording_logging_satisfies_port(self) -> None:
        assert isinstance(RecordingLogging(), LoggingPort)

    def test_rejection_is_logged_through_port(self) -> None:
        logging_port = RecordingLogging()
        client, _ = _logged_in_client(logging_port=logging_port)

        client.post("/submit", data={"name": "mallory"})

        logging_port.loggers["flyguard.csrf"].warning.assert_called_once_with(
            "csrf_token_unverified", method="POST"
        )

    def test_configure_logging_uses_port(self) -> None:
        logging_port = RecordingLogging()
        config = Config({"flyguard": {"logging": {"format": "json"}}})

        protect_from_forgery(Starlette(), config, logging_port=logging_port, configure_logging=True)

        assert logging_port.configured_with is config

    def test_port_left_unconfigured_by_default(self) -> None:
        logging_port = RecordingLogging()
        protect_from_forgery(Starlette(), logging_port=logging_port)
        assert logging_port.configured_with is None
