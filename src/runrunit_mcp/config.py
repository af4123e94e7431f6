"""
Server configuration for runrunit-mcp.

Supports configuration via:
1. Environment variables (highest priority)
2. A .env file in the working directory (never overrides the real environment)
3. TOML config file (runrunit-mcp.toml)
4. Default values (lowest priority)

Environment variables:
- RUNRUNIT_APP_KEY: Runrun.it App-Key (required)
- RUNRUNIT_USER_TOKEN: Runrun.it User-Token (required)
- RUNRUNIT_API_BASE_URL: API base URL (default: https://runrun.it/api/v1.0)
- RUNRUNIT_API_TIMEOUT: Outbound request timeout in seconds (default: 30)
- RUNRUNIT_MCP_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
- RUNRUNIT_MCP_STRUCTURED_LOGGING: JSON log lines (true/false)
- RUNRUNIT_MCP_CONFIG_FILE: Path to TOML config file

Credential Security:
- Credentials are never logged; startup logs show them masked (abc...xyz)
- Error messages and the get_config_status tool report lengths only
"""

import logging
import os
from dataclasses import dataclass, field
from importlib.metadata import version as get_package_version, PackageNotFoundError
from pathlib import Path
from typing import Any, Dict, Optional

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # Python < 3.11 fallback

from dotenv import find_dotenv, load_dotenv

from runrunit_mcp.core.errors import ConfigurationError
from runrunit_mcp.core.logging_config import configure_logging


logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://runrun.it/api/v1.0"
DEFAULT_TIMEOUT = 30.0

APP_KEY_ENV = "RUNRUNIT_APP_KEY"
USER_TOKEN_ENV = "RUNRUNIT_USER_TOKEN"


def _get_version() -> str:
    """Get package version from metadata (single source of truth: pyproject.toml)."""
    try:
        return get_package_version("runrunit-mcp")
    except PackageNotFoundError:
        return "1.0.0"  # Fallback for dev without install


_PACKAGE_VERSION = _get_version()


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"true", "1", "yes", "on"}


def _clean_secret(value: Optional[str]) -> str:
    """Trim a secret; None and whitespace-only values become empty."""
    if value is None:
        return ""
    return str(value).strip()


def mask_secret(value: str) -> str:
    """Mask a secret for display, keeping three characters on each end."""
    if len(value) <= 6:
        return "*" * len(value)
    return f"{value[:3]}...{value[-3:]}"


@dataclass(frozen=True)
class Credentials:
    """Runrun.it authentication pair.

    Immutable for the lifetime of the process. Construct through
    :meth:`ServerConfig.credentials` so both values are validated.
    """

    app_key: str
    user_token: str

    def __repr__(self) -> str:
        return (
            f"Credentials(app_key={mask_secret(self.app_key)!r}, "
            f"user_token={mask_secret(self.user_token)!r})"
        )

    @property
    def app_key_length(self) -> int:
        return len(self.app_key)

    @property
    def user_token_length(self) -> int:
        return len(self.user_token)

    def status(self) -> Dict[str, Any]:
        """Presence and length of each credential; never the values."""
        return {
            "appKeyPresent": bool(self.app_key),
            "appKeyLength": self.app_key_length,
            "userTokenPresent": bool(self.user_token),
            "userTokenLength": self.user_token_length,
        }


@dataclass
class RunrunitSettings:
    """Connection settings for the Runrun.it API.

    Attributes:
        app_key: App-Key header value
        user_token: User-Token header value
        base_url: API base URL; endpoint paths are appended verbatim
        timeout: Timeout in seconds applied to every outbound request
    """

    app_key: str = ""
    user_token: str = ""
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_toml_dict(cls, data: Dict[str, Any]) -> "RunrunitSettings":
        """Create settings from TOML dict (typically [runrunit] section).

        Raises:
            ConfigurationError: If timeout is not a number
        """
        raw_timeout = data.get("timeout", DEFAULT_TIMEOUT)
        try:
            if isinstance(raw_timeout, bool):
                raise TypeError(raw_timeout)
            timeout = float(raw_timeout)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"[runrunit] timeout must be a number, got {raw_timeout!r}",
                setting="timeout",
            ) from e

        return cls(
            app_key=_clean_secret(data.get("app_key")),
            user_token=_clean_secret(data.get("user_token")),
            base_url=str(data.get("base_url", DEFAULT_BASE_URL)).rstrip("/"),
            timeout=timeout,
        )


@dataclass
class ServerConfig:
    """Server configuration with support for env vars and TOML overrides."""

    # Runrun.it API configuration
    runrunit: RunrunitSettings = field(default_factory=RunrunitSettings)

    # Logging configuration
    log_level: str = "INFO"
    structured_logging: bool = True

    # Server configuration
    server_name: str = "runrunit-mcp"
    server_version: str = field(default_factory=lambda: _PACKAGE_VERSION)

    @classmethod
    def from_env(
        cls,
        config_file: Optional[str] = None,
        *,
        load_env_file: bool = True,
    ) -> "ServerConfig":
        """
        Create configuration from environment variables and optional TOML file.

        Priority (highest to lowest):
        1. Environment variables (including values loaded from .env)
        2. TOML config file
        3. Default values
        """
        config = cls()

        if load_env_file:
            dotenv_path = find_dotenv(usecwd=True)
            if dotenv_path:
                load_dotenv(dotenv_path, override=False)
                logger.debug("Loaded environment file: %s", dotenv_path)

        toml_path = config_file or os.environ.get("RUNRUNIT_MCP_CONFIG_FILE")
        if toml_path:
            config._load_toml(Path(toml_path))
        else:
            for default_path in ["runrunit-mcp.toml", ".runrunit-mcp.toml"]:
                if Path(default_path).exists():
                    config._load_toml(Path(default_path))
                    break

        config._load_env()

        return config

    def _load_toml(self, path: Path) -> None:
        """Load configuration from TOML file."""
        if not path.exists():
            logger.warning("Config file not found: %s", path)
            return

        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigurationError(f"Error loading config file {path}: {e}") from e

        if "runrunit" in data:
            self.runrunit = RunrunitSettings.from_toml_dict(data["runrunit"])

        if "logging" in data:
            log = data["logging"]
            if "level" in log:
                self.log_level = str(log["level"]).upper()
            if "structured" in log:
                self.structured_logging = _parse_bool(log["structured"])

        if "server" in data:
            srv = data["server"]
            if "name" in srv:
                self.server_name = srv["name"]
            if "version" in srv:
                self.server_version = srv["version"]

    def _load_env(self) -> None:
        """Load configuration from environment variables."""
        # Empty strings are treated as unset
        if app_key := _clean_secret(os.environ.get(APP_KEY_ENV)):
            self.runrunit.app_key = app_key

        if user_token := _clean_secret(os.environ.get(USER_TOKEN_ENV)):
            self.runrunit.user_token = user_token

        if base_url := os.environ.get("RUNRUNIT_API_BASE_URL"):
            self.runrunit.base_url = base_url.strip().rstrip("/")

        if timeout := os.environ.get("RUNRUNIT_API_TIMEOUT"):
            try:
                self.runrunit.timeout = float(timeout)
            except ValueError:
                logger.warning("Ignoring invalid RUNRUNIT_API_TIMEOUT: %s", timeout)

        if level := os.environ.get("RUNRUNIT_MCP_LOG_LEVEL"):
            self.log_level = level.upper()

        if structured := os.environ.get("RUNRUNIT_MCP_STRUCTURED_LOGGING"):
            self.structured_logging = _parse_bool(structured)

    def credentials(self) -> Credentials:
        """Build validated credentials.

        Raises:
            ConfigurationError: If either credential is missing or empty
        """
        app_key = _clean_secret(self.runrunit.app_key)
        user_token = _clean_secret(self.runrunit.user_token)

        if not app_key:
            raise ConfigurationError(
                f"{APP_KEY_ENV} is required and must not be empty",
                setting=APP_KEY_ENV,
            )
        if not user_token:
            raise ConfigurationError(
                f"{USER_TOKEN_ENV} is required and must not be empty",
                setting=USER_TOKEN_ENV,
            )
        if self.runrunit.timeout <= 0:
            raise ConfigurationError(
                "RUNRUNIT_API_TIMEOUT must be a positive number of seconds",
                setting="RUNRUNIT_API_TIMEOUT",
            )

        return Credentials(app_key=app_key, user_token=user_token)

    def setup_logging(self) -> None:
        """Configure logging based on settings."""
        configure_logging(
            level=self.log_level,
            format="structured" if self.structured_logging else "human",
        )


# Global configuration instance
_config: Optional[ServerConfig] = None


def get_config() -> ServerConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = ServerConfig.from_env()
    return _config


def set_config(config: Optional[ServerConfig]) -> None:
    """Set (or clear, with None) the global configuration instance."""
    global _config
    _config = config
