"""Exception types raised across runrunit-mcp.

Per-call errors (validation, unknown tool, upstream HTTP) are converted into
error-flagged tool results by the dispatcher. ConfigurationError is raised
before the server starts and is fatal.
"""

from typing import Optional


class RunrunitMCPError(Exception):
    """Base class for runrunit-mcp errors."""


class ConfigurationError(RunrunitMCPError):
    """Required configuration is missing or invalid."""

    def __init__(self, message: str, *, setting: Optional[str] = None):
        self.setting = setting
        super().__init__(message)


class ToolValidationError(RunrunitMCPError):
    """A tool was called with a missing or invalid parameter."""

    def __init__(self, message: str, *, parameter: Optional[str] = None):
        self.parameter = parameter
        super().__init__(message)


class UnknownToolError(RunrunitMCPError):
    """A tool name was not found in the registry."""

    def __init__(self, tool_name: str):
        self.tool_name = tool_name
        super().__init__(f"Unknown tool: {tool_name}")


class RunrunitAPIError(RunrunitMCPError):
    """Non-2xx response from the Runrun.it API.

    Attributes:
        status_code: HTTP status code
        reason: HTTP reason phrase
        app_key_length: Length of the App-Key sent (never the value)
        user_token_length: Length of the User-Token sent (never the value)
        body: Raw response body text
    """

    def __init__(
        self,
        status_code: int,
        reason: str,
        *,
        app_key_length: int,
        user_token_length: int,
        body: str,
    ):
        self.status_code = status_code
        self.reason = reason
        self.app_key_length = app_key_length
        self.user_token_length = user_token_length
        self.body = body
        super().__init__(
            f"Runrun.it API error: {status_code} {reason} "
            f"(K:{app_key_length}, T:{user_token_length}) - {body}"
        )
