"""Async HTTP client for the Runrun.it REST API.

Every request carries the App-Key and User-Token headers and an explicit
timeout. Non-2xx responses are raised as RunrunitAPIError; there are no
retries.

Example usage:
    client = RunrunitClient(credentials)
    task = await client.get_task(1924)
"""

import logging
from typing import Any, Mapping, Optional
from urllib.parse import urlencode

import httpx

from runrunit_mcp.config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, Credentials
from runrunit_mcp.core.errors import RunrunitAPIError

logger = logging.getLogger(__name__)

_BODY_METHODS = frozenset(["POST", "PATCH", "PUT"])


class RunrunitClient:
    """Authenticated caller for the Runrun.it API.

    Args:
        credentials: Validated App-Key / User-Token pair
        base_url: API base URL; endpoint paths are appended verbatim
        timeout: Timeout in seconds for each request
        transport: Optional httpx transport (tests pass httpx.MockTransport)
    """

    def __init__(
        self,
        credentials: Credentials,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._credentials = credentials
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def timeout(self) -> float:
        return self._timeout

    def _build_headers(
        self,
        method: str,
        body: Any,
        extra_headers: Optional[Mapping[str, str]],
    ) -> dict[str, str]:
        headers = {
            "App-Key": self._credentials.app_key,
            "User-Token": self._credentials.user_token,
            "Accept": "application/json",
        }
        if body is not None or method in _BODY_METHODS:
            headers["Content-Type"] = "application/json"
        if extra_headers:
            headers.update(extra_headers)
        return headers

    async def call(
        self,
        endpoint: str,
        method: str = "GET",
        body: Any = None,
        extra_headers: Optional[Mapping[str, str]] = None,
    ) -> Any:
        """Issue a request and return the decoded JSON body.

        Args:
            endpoint: Path and optional query appended to the base URL
            method: HTTP method (default: GET)
            body: JSON-serializable request body
            extra_headers: Headers that override the defaults

        Returns:
            Parsed JSON, or None for an empty success body

        Raises:
            RunrunitAPIError: For any non-2xx response
            httpx.RequestError: For network failures and timeouts
        """
        method = method.upper()
        url = f"{self._base_url}{endpoint}"
        headers = self._build_headers(method, body, extra_headers)

        logger.debug("Runrun.it request: %s %s", method, endpoint)
        async with httpx.AsyncClient(
            timeout=self._timeout, transport=self._transport
        ) as client:
            response = await client.request(
                method,
                url,
                headers=headers,
                json=body,
            )

        if not response.is_success:
            logger.debug(
                "Runrun.it request failed: %s %s -> %s",
                method,
                endpoint,
                response.status_code,
            )
            raise RunrunitAPIError(
                response.status_code,
                response.reason_phrase,
                app_key_length=self._credentials.app_key_length,
                user_token_length=self._credentials.user_token_length,
                body=response.text,
            )

        if not response.content:
            return None
        return response.json()

    async def get_task(self, task_id: int) -> Any:
        return await self.call(f"/tasks/{task_id}")

    async def get_task_description(self, task_id: int) -> Any:
        return await self.call(f"/tasks/{task_id}/description")

    async def list_tasks(self, params: Optional[Mapping[str, str]] = None) -> Any:
        """List tasks; params are encoded into the query string as given."""
        query = urlencode(list(params.items())) if params else ""
        endpoint = f"/tasks?{query}" if query else "/tasks"
        return await self.call(endpoint)

    async def get_me(self) -> Any:
        return await self.call("/users/me")
