"""
Shared test configuration and fixtures.

This module provides:
- An isolated config directory per test (no real ~/.config is touched)
- A fake API server built on httpx.MockTransport that records requests
- Marker registration for integration tests
"""

import json
import pytest
import httpx

from nylax.sdk.client import APIClient

API_SERVER = "https://api.test"


class FakeAPI:
    """
    Route table for httpx.MockTransport.

    Register responses with add(method, path, ...); every request that
    reaches the transport is appended to ``requests``. Unknown routes answer
    404 with an API-style error body.
    """

    def __init__(self):
        self.requests = []
        self.routes = {}

    def add(self, method, path, json=None, status=200, content=None, headers=None):
        self.routes[(method, path)] = (status, json, content, headers or {})

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"message": "Couldn't find resource",
                                             "type": "invalid_request_error"})
        status, body, content, headers = route
        if content is not None:
            return httpx.Response(status, content=content, headers=headers)
        if body is None:
            return httpx.Response(status, headers=headers)
        return httpx.Response(status, json=body, headers=headers)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self):
        return json.loads(self.last.content)

    def make_client(self, access_token="test-token", **kwargs) -> APIClient:
        kwargs.setdefault("app_id", "app-id")
        kwargs.setdefault("app_secret", "app-secret")
        kwargs.setdefault("api_server", API_SERVER)
        return APIClient(access_token=access_token,
                         transport=httpx.MockTransport(self.handler), **kwargs)


@pytest.fixture
def fake_api():
    return FakeAPI()


@pytest.fixture
def client(fake_api):
    c = fake_api.make_client()
    yield c
    c.close()


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """
    Redirect config and profiles into tmp_path and clear NYLAS_* overrides.

    Returns a dict with the config paths.
    """
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    config_file = config_dir / "config.yaml"

    monkeypatch.setenv("NYLAX_CONFIG_DIR", str(config_dir))
    monkeypatch.setenv("NYLAX_CONFIG_FILE", str(config_file))
    for name in ("NYLAS_ACCESS_TOKEN", "NYLAS_API_SERVER", "NYLAS_APP_ID", "NYLAS_APP_SECRET"):
        monkeypatch.delenv(name, raising=False)

    return {
        "config_dir": config_dir,
        "config_file": config_file,
        "profiles_dir": config_dir / "profiles",
    }


# Session-level marker definitions
def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test against the live API"
    )
