"""Tests for RunrunitClient request building and error normalization."""

import json

import httpx
import pytest

from runrunit_mcp.core.client import RunrunitClient
from runrunit_mcp.core.errors import RunrunitAPIError
from tests.conftest import APP_KEY, BASE_URL, USER_TOKEN


@pytest.fixture
def make_client(credentials):
    def _factory(api):
        return RunrunitClient(
            credentials, base_url=BASE_URL, timeout=5.0, transport=api.transport
        )

    return _factory


class TestHeaders:
    @pytest.mark.asyncio
    async def test_get_sends_auth_and_accept_headers(self, fake_api, make_client):
        api = fake_api({"/users/me": {"id": "me"}})

        result = await make_client(api).call("/users/me")

        assert result == {"id": "me"}
        request = api.requests[0]
        assert request.method == "GET"
        assert str(request.url) == f"{BASE_URL}/users/me"
        assert request.headers["App-Key"] == APP_KEY
        assert request.headers["User-Token"] == USER_TOKEN
        assert request.headers["Accept"] == "application/json"
        assert "Content-Type" not in request.headers

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["POST", "PATCH", "PUT"])
    async def test_body_methods_send_json_content_type(self, fake_api, make_client, method):
        api = fake_api({"/tasks": {"ok": True}})

        await make_client(api).call("/tasks", method=method)

        assert api.requests[0].method == method
        assert api.requests[0].headers["Content-Type"] == "application/json"

    @pytest.mark.asyncio
    async def test_body_is_json_encoded(self, fake_api, make_client):
        api = fake_api({"/tasks": {"ok": True}})

        await make_client(api).call("/tasks", method="POST", body={"title": "New"})

        request = api.requests[0]
        assert json.loads(request.content) == {"title": "New"}
        assert request.headers["Content-Type"] == "application/json"

    @pytest.mark.asyncio
    async def test_extra_headers_override_defaults(self, fake_api, make_client):
        api = fake_api({"/users/me": {}})

        await make_client(api).call(
            "/users/me", extra_headers={"Accept": "text/plain", "X-Trace": "1"}
        )

        request = api.requests[0]
        assert request.headers["Accept"] == "text/plain"
        assert request.headers["X-Trace"] == "1"


class TestResponses:
    @pytest.mark.asyncio
    async def test_json_returned_unchanged(self, fake_api, make_client):
        payload = [{"id": 1, "unknown_field": {"nested": [1, 2]}}]
        api = fake_api({"/tasks": payload})

        assert await make_client(api).call("/tasks") == payload

    @pytest.mark.asyncio
    async def test_empty_success_body_is_none(self, fake_api, make_client):
        api = fake_api({"/tasks/5": lambda request: httpx.Response(204)})

        assert await make_client(api).call("/tasks/5") is None

    @pytest.mark.asyncio
    async def test_non_success_raises_api_error(self, fake_api, make_client):
        api = fake_api({})

        with pytest.raises(RunrunitAPIError) as exc_info:
            await make_client(api).call("/tasks/99")

        error = exc_info.value
        assert error.status_code == 404
        assert error.reason == "Not Found"
        assert error.body == "not found"
        assert error.app_key_length == len(APP_KEY)
        assert error.user_token_length == len(USER_TOKEN)
        message = str(error)
        assert "404" in message
        assert "not found" in message
        assert f"(K:{len(APP_KEY)}, T:{len(USER_TOKEN)})" in message

    @pytest.mark.asyncio
    async def test_error_never_contains_secret_values(self, fake_api, make_client):
        api = fake_api(
            {"/users/me": lambda request: httpx.Response(401, json={"error": "bad key"})}
        )

        with pytest.raises(RunrunitAPIError) as exc_info:
            await make_client(api).get_me()

        assert APP_KEY not in str(exc_info.value)
        assert USER_TOKEN not in str(exc_info.value)
        assert "bad key" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_network_errors_propagate(self, fake_api, make_client):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        api = fake_api({"/users/me": refuse})

        with pytest.raises(httpx.ConnectError):
            await make_client(api).get_me()


class TestEndpoints:
    @pytest.mark.asyncio
    async def test_list_tasks_encodes_query(self, fake_api, make_client):
        api = fake_api({"/tasks": []})

        await make_client(api).list_tasks({"limit": "100", "is_closed": "false"})

        assert dict(api.requests[0].url.params) == {"limit": "100", "is_closed": "false"}

    @pytest.mark.asyncio
    async def test_list_tasks_without_params_has_no_query(self, fake_api, make_client):
        api = fake_api({"/tasks": []})

        await make_client(api).list_tasks()

        assert str(api.requests[0].url) == f"{BASE_URL}/tasks"

    @pytest.mark.asyncio
    async def test_task_paths(self, fake_api, make_client):
        api = fake_api({"/tasks/12": {"id": 12}, "/tasks/12/description": {"description": "d"}})
        client = make_client(api)

        await client.get_task(12)
        await client.get_task_description(12)

        assert api.paths() == ["/tasks/12", "/tasks/12/description"]

    def test_timeout_and_base_url_exposed(self, credentials):
        client = RunrunitClient(credentials, base_url=f"{BASE_URL}/", timeout=12.5)

        assert client.base_url == BASE_URL
        assert client.timeout == 12.5
