"""
Root pytest configuration and shared fixtures.

Provides a fake Runrun.it API (served through httpx.MockTransport) and
helpers for reading tool results.
"""

import json
import logging
from typing import Any, Callable, Dict, List, Union

import httpx
import pytest
from mcp.types import CallToolResult

from runrunit_mcp.config import Credentials, RunrunitSettings, ServerConfig
from runrunit_mcp.core.responses import result_text

BASE_URL = "https://runrun.test/api/v1.0"
API_PATH = "/api/v1.0"

APP_KEY = "app-key-0123456789abcdef"
USER_TOKEN = "user-token-XYZ"

Route = Union[Any, Callable[[httpx.Request], httpx.Response]]


class FakeRunrunit:
    """Route table standing in for the Runrun.it API.

    Each route maps an API path (without the base path) to either JSON data,
    served with status 200, or a callable returning an httpx.Response.
    Callables may also raise httpx errors. Unrouted paths answer 404.
    """

    def __init__(self, routes: Dict[str, Route]):
        self.routes = dict(routes)
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path.startswith(API_PATH):
            path = path[len(API_PATH):]
        route = self.routes.get(path)
        if route is None:
            return httpx.Response(404, text="not found")
        if callable(route):
            return route(request)
        return httpx.Response(200, json=route)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def paths(self) -> List[str]:
        return [request.url.path[len(API_PATH):] for request in self.requests]


def extract_result_json(result: CallToolResult) -> Any:
    """Parse the JSON payload of a successful tool result."""
    assert result.isError is False, result_text(result)
    return json.loads(result_text(result))


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(app_key=APP_KEY, user_token=USER_TOKEN)


@pytest.fixture
def server_config() -> ServerConfig:
    return ServerConfig(
        runrunit=RunrunitSettings(
            app_key=APP_KEY,
            user_token=USER_TOKEN,
            base_url=BASE_URL,
            timeout=5.0,
        ),
        server_name="runrunit-mcp-test",
        server_version="0.1.0",
        log_level="WARNING",
        structured_logging=False,
    )


@pytest.fixture
def fake_api() -> Callable[[Dict[str, Route]], FakeRunrunit]:
    """Factory fixture: fake_api({"/users/me": {...}})."""

    def _factory(routes: Dict[str, Route]) -> FakeRunrunit:
        return FakeRunrunit(routes)

    return _factory


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """Drop handlers installed by configure_logging between tests."""
    yield
    package_logger = logging.getLogger("runrunit_mcp")
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)
