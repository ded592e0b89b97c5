"""
Configuration for the trigger flow.

Values are resolved once at startup, in priority order:
1. Command line option
2. Environment variable (GITLAB_*, CI_TRIGGER_STRICT)
3. Config file (~/.ci-trigger/config, key=value lines)
4. Default

The resolved TriggerConfig is validated before any API call is made.
"""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from trigger_client.client import DEFAULT_API_URL

logger = logging.getLogger(__name__)

DEFAULT_BRANCH = "master"
DEFAULT_WEEKS_LIMIT = 2
DEFAULT_TIMEOUT = 30.0
# Keeps now - window inside the datetime range
MAX_WEEKS_LIMIT = 5200

# field name -> environment variable
ENV_VARS = {
    "api_url": "GITLAB_API_URL",
    "project_id": "GITLAB_PROJECT_ID",
    "private_token": "GITLAB_PRIVATE_TOKEN",
    "branch": "GITLAB_BRANCH",
    "weeks_limit": "GITLAB_WEEKS_LIMIT",
    "timeout": "GITLAB_TIMEOUT",
    "verify_ssl": "GITLAB_VERIFY_SSL",
    "strict": "CI_TRIGGER_STRICT",
}

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


class ConfigError(ValueError):
    """Raised when configuration is missing or invalid."""


@dataclass
class TriggerConfig:
    """Settings for one run of the trigger flow."""

    project_id: str
    private_token: str
    api_url: str = DEFAULT_API_URL
    branch: str = DEFAULT_BRANCH
    weeks_limit: int = DEFAULT_WEEKS_LIMIT
    timeout: float = DEFAULT_TIMEOUT
    verify_ssl: bool = True
    strict: bool = False  # Exit non-zero when the flow fails

    def validate(self) -> None:
        """
        Check the configuration before the flow runs.

        Raises:
            ConfigError: If a required value is missing or a value is out of range
        """
        if not self.project_id:
            raise ConfigError(
                f"Missing project id (use --project-id or {ENV_VARS['project_id']})"
            )
        if not self.private_token:
            raise ConfigError(
                f"Missing private token (use --token or {ENV_VARS['private_token']})"
            )
        if not self.private_token.isascii():
            raise ConfigError("Private token must contain only ASCII characters")
        if not self.branch:
            raise ConfigError("Branch name must not be empty")
        if self.weeks_limit <= 0:
            raise ConfigError(f"Weeks limit must be positive, got {self.weeks_limit}")
        if self.weeks_limit > MAX_WEEKS_LIMIT:
            raise ConfigError(
                f"Weeks limit must be at most {MAX_WEEKS_LIMIT}, got {self.weeks_limit}"
            )
        if self.timeout <= 0:
            raise ConfigError(f"Timeout must be positive, got {self.timeout}")
        if not self.api_url.startswith(("http://", "https://")):
            raise ConfigError(f"API URL must start with http:// or https://: {self.api_url}")

    def redacted(self) -> dict[str, Any]:
        """Settings for logging, with the token masked."""
        return {
            "api_url": self.api_url,
            "project_id": self.project_id,
            "private_token": "****" if self.private_token else "(unset)",
            "branch": self.branch,
            "weeks_limit": self.weeks_limit,
            "timeout": self.timeout,
            "verify_ssl": self.verify_ssl,
            "strict": self.strict,
        }


def get_config_path() -> Path:
    """Default config file location."""
    return Path.home() / ".ci-trigger" / "config"


def read_config_file(path: Path) -> dict[str, str]:
    """
    Read key=value lines from a config file.

    Blank lines and lines starting with # are skipped. A missing file yields
    an empty mapping.

    Config file format (~/.ci-trigger/config):
        project_id=12345
        private_token=glpat-...
    """
    values: dict[str, str] = {}
    if not path.exists():
        return values
    try:
        content = path.read_text()
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    for line in content.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        if key in ENV_VARS:
            values[key] = value.strip()
        else:
            logger.warning(f"Ignoring unknown key '{key}' in {path}")
    return values


def is_running_in_docker() -> bool:
    """Detect a Docker container, where .env files are not used."""
    return "DOCKER" in os.environ or Path("/.dockerenv").exists()


def load_env_file(path: str | Path = ".env") -> bool:
    """
    Load a .env file into the process environment.

    Variables already set are not overridden. Skipped inside Docker, where
    the environment is expected to be provided by the container.

    Returns:
        True if a file was loaded
    """
    if is_running_in_docker():
        logger.debug("Running in Docker, not loading .env")
        return False
    return load_dotenv(path, override=False)


def _parse_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ConfigError(f"Invalid boolean for {name}: {value!r}")


def _parse_number(name: str, value: Any, kind: type) -> Any:
    try:
        return kind(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid {kind.__name__} for {name}: {value!r}") from e


def load_config(
    overrides: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
    config_path: Path | None = None,
) -> TriggerConfig:
    """
    Resolve configuration from command line, environment and config file.

    Args:
        overrides: Command line values; None entries are ignored
        environ: Environment mapping (default: os.environ)
        config_path: Config file (default: ~/.ci-trigger/config)

    Returns:
        Unvalidated TriggerConfig; call validate() before use

    Raises:
        ConfigError: If a value cannot be parsed
    """
    overrides = overrides or {}
    environ = os.environ if environ is None else environ
    file_values = read_config_file(config_path or get_config_path())

    def resolve(name: str) -> Any:
        if overrides.get(name) is not None:
            return overrides[name]
        env_value = environ.get(ENV_VARS[name])
        if env_value:
            return env_value
        return file_values.get(name)

    raw = {name: resolve(name) for name in ENV_VARS}

    config = TriggerConfig(
        project_id=str(raw["project_id"] or ""),
        private_token=str(raw["private_token"] or ""),
    )
    if raw["api_url"]:
        config.api_url = str(raw["api_url"])
    if raw["branch"]:
        config.branch = str(raw["branch"])
    if raw["weeks_limit"] is not None:
        config.weeks_limit = _parse_number("weeks_limit", raw["weeks_limit"], int)
    if raw["timeout"] is not None:
        config.timeout = _parse_number("timeout", raw["timeout"], float)
    if raw["verify_ssl"] is not None:
        config.verify_ssl = _parse_bool("verify_ssl", raw["verify_ssl"])
    if raw["strict"] is not None:
        config.strict = _parse_bool("strict", raw["strict"])
    return config
