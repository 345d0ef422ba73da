"""Shared test fixtures for authflow.

Provides fake authentication clients, an in-memory session store, request
builders and a test application wired with real SessionMiddleware cookies.
"""

import asyncio
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import quote

import pytest
from fastapi import Depends, Request
from fastapi.testclient import TestClient

from authflow.api.dependencies import get_clients, get_current_profile
from authflow.config import Settings
from authflow.core.auth_client import AuthenticationClient, Credentials
from authflow.core.client_registry import ClientRegistry
from authflow.core.http_action import HttpAction, RedirectAction
from authflow.core.session import REQUESTED_URL
from authflow.core.user_profile import UserProfile
from authflow.core.web_context import WebContext
from authflow.main import create_app


class FakeClient(AuthenticationClient):
    """
    Client reading a "code" parameter as its credentials.

    The profile id is the code value. Failures are injected with
    credentials_error / profile_error.
    """

    def __init__(
        self,
        name: str,
        credentials_error: Optional[Exception] = None,
        profile_error: Optional[Exception] = None,
        resolve_profile: bool = True,
    ):
        self.name = name
        self.credentials_error = credentials_error
        self.profile_error = profile_error
        self.resolve_profile = resolve_profile
        self.credentials_calls = 0
        self.profile_calls = 0
        self.ran_in_event_loop: Optional[bool] = None

    def get_client_name(self) -> str:
        return self.name

    def get_redirect_action(self, context: WebContext, callback_url: str) -> HttpAction:
        return RedirectAction(
            f"https://provider.example/{self.name}/authorize?redirect_uri={quote(callback_url, safe='')}"
        )

    def get_credentials(self, context: WebContext) -> Optional[Credentials]:
        self.credentials_calls += 1
        try:
            asyncio.get_running_loop()
            self.ran_in_event_loop = True
        except RuntimeError:
            self.ran_in_event_loop = False

        if self.credentials_error is not None:
            raise self.credentials_error

        code = context.get_request_parameter("code")
        if code is None:
            return None
        return Credentials(client_name=self.name, values={"code": code})

    def get_user_profile(self, credentials: Credentials, context: WebContext) -> Optional[UserProfile]:
        self.profile_calls += 1
        if self.profile_error is not None:
            raise self.profile_error
        if not self.resolve_profile:
            return None
        return UserProfile(
            id=credentials.values["code"],
            client_name=self.name,
            attributes={"email": f"{credentials.values['code']}@example.com"},
        )


class InMemorySessionStore:
    """Dict-backed SessionStore"""

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        self.data: Dict[str, Any] = dict(data or {})
        self.removed: List[str] = []
        self.writes: List[str] = []

    def get(self, key: str) -> Optional[Any]:
        return self.data.get(key)

    def set(self, key: str, value: Any) -> None:
        self.writes.append(key)
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.removed.append(key)
        self.data.pop(key, None)


def make_request(
    path: str = "/",
    method: str = "GET",
    headers: Optional[Dict[str, str]] = None,
    query_string: str = "",
    session: Optional[Dict[str, Any]] = None,
) -> Request:
    """Build a bare Starlette request from an ASGI scope"""
    raw_headers = [
        (name.lower().encode("latin-1"), value.encode("latin-1"))
        for name, value in (headers or {"host": "example.com"}).items()
    ]
    scope: Dict[str, Any] = {
        "type": "http",
        "method": method,
        "scheme": "http",
        "server": ("example.com", 80),
        "path": path,
        "root_path": "",
        "query_string": query_string.encode("latin-1"),
        "headers": raw_headers,
    }
    if session is not None:
        scope["session"] = session
    return Request(scope)


@pytest.fixture
def make_settings() -> Callable[..., Settings]:
    def _make(**overrides: Any) -> Settings:
        values: Dict[str, Any] = {
            "session_secret": "test-session-secret",
            "cors_origins": "http://localhost:3000",
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


@pytest.fixture
def settings(make_settings) -> Settings:
    return make_settings()


@pytest.fixture
def google() -> FakeClient:
    return FakeClient("google")


@pytest.fixture
def github() -> FakeClient:
    return FakeClient("github")


@pytest.fixture
def make_client(settings) -> Callable[..., TestClient]:
    """
    Build a TestClient around create_app() with helper routes:

    - GET /seed?url=...   store a requested URL in the session
    - GET /session        dump the session
    - GET /whoami         current profile (or null)
    - GET /clients        attached client registry
    """

    def _make(
        clients_provider: Callable[[Request], Any],
        app_settings: Optional[Settings] = None,
    ) -> TestClient:
        app_settings = app_settings or settings
        app = create_app(clients_provider=clients_provider, settings=app_settings)
        prefix = app_settings.mount_prefix.strip("/")
        base = f"/{prefix}" if prefix else ""

        @app.get(f"{base}/seed")
        async def seed(request: Request, url: str) -> Dict[str, str]:
            request.session[REQUESTED_URL] = url
            return {"stored": url}

        @app.get(f"{base}/session")
        async def session(request: Request) -> Dict[str, Any]:
            return dict(request.session)

        @app.get(f"{base}/whoami")
        async def whoami(profile: Optional[UserProfile] = Depends(get_current_profile)) -> Any:
            return profile.to_dict() if profile else None

        @app.get(f"{base}/clients")
        async def clients(registry: ClientRegistry = Depends(get_clients)) -> Dict[str, Any]:
            return {"callback_url": registry.callback_url, "names": registry.names}

        @app.get("/outside")
        async def outside(registry: ClientRegistry = Depends(get_clients)) -> Dict[str, Any]:
            return {"names": registry.names}

        return TestClient(app, follow_redirects=False, raise_server_exceptions=False)

    return _make
