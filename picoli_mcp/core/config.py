import os
import sys
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from picoli_mcp.core.models import validate_absolute_url

API_KEY_ENV = "PICOLI_API_KEY"
BASE_URL_ENV = "PICOLI_BASE_URL"
CONFIG_FILE_ENV = "PICOLI_CONFIG_FILE"

DEFAULT_BASE_URL = "https://picoli.site"
API_KEY_HELP = "Get your API key at https://picoli.site"
DEFAULT_SETTINGS_PATH = Path(__file__).resolve().parent.parent / "config.yaml"


class ConfigError(Exception):
    """Raised when the server settings are missing or invalid."""

    def __init__(self, issues: list[str]):
        self.issues = list(issues)
        super().__init__("; ".join(self.issues))


class ApiPaths(BaseModel):
    model_config = ConfigDict(frozen=True)

    links_bulk: str = "/api/links/bulk"
    stats_batch: str = "/api/stats/batch"
    links: str = "/api/links"
    stats: str = "/api/stats"


class Config(BaseModel):
    """Immutable settings handed to every tool handler."""

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(..., min_length=1)
    base_url: str = DEFAULT_BASE_URL
    request_timeout: Optional[float] = Field(default=30.0, gt=0)
    server_name: str = "picoli-mcp"
    log_level: str = "INFO"
    log_dir: Optional[str] = None
    api_paths: ApiPaths = Field(default_factory=ApiPaths)

    @field_validator("base_url")
    @classmethod
    def _check_base_url(cls, value: str) -> str:
        return validate_absolute_url(value).rstrip("/")


@lru_cache(maxsize=1)
def get_settings(path: Optional[str] = None) -> dict[str, Any]:
    """
    Load the non-secret settings from YAML. Falls back to the packaged config.yaml.
    """
    settings_path = Path(path) if path else DEFAULT_SETTINGS_PATH
    if not settings_path.exists():
        return {}
    try:
        with open(settings_path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError([f"{settings_path}: invalid YAML ({e})"]) from None
    except OSError as e:
        raise ConfigError([f"{settings_path}: cannot be read ({e.strerror})"]) from None
    if not isinstance(raw, dict):
        raise ConfigError([f"{settings_path}: expected a mapping at the top level"])
    return raw


def _describe(error: dict[str, Any]) -> str:
    field = error["loc"][0] if error["loc"] else ""
    if field == "api_key":
        return f"{API_KEY_ENV} is required. {API_KEY_HELP}"
    if field == "base_url":
        return f"{BASE_URL_ENV} must be a valid absolute URL (got {error.get('input')!r})"
    location = ".".join(str(part) for part in error["loc"])
    return f"{location}: {error['msg']}"


def build_config(env: Mapping[str, str], settings: Optional[Mapping[str, Any]] = None) -> Config:
    """Merge YAML settings with the environment and validate the result.

    Environment values win over the YAML file. Raises ConfigError listing every problem found.
    """
    values = dict(settings or {})
    values = {k: v for k, v in values.items() if v is not None}
    values["api_key"] = env.get(API_KEY_ENV)
    if BASE_URL_ENV in env:
        values["base_url"] = env[BASE_URL_ENV]
    try:
        return Config(**values)
    except ValidationError as e:
        raise ConfigError([_describe(err) for err in e.errors()]) from None


def format_config_error(error: ConfigError) -> str:
    issues = "\n".join(f"  - {issue}" for issue in error.issues)
    return (
        f"picoli-mcp: Configuration error:\n{issues}\n"
        f"\nSet {API_KEY_ENV} in your MCP server configuration.\n"
        f"{API_KEY_HELP}"
    )


def load_config(env: Optional[Mapping[str, str]] = None) -> Config:
    """
    Build the process configuration or terminate with a diagnostic on stderr.
    """
    if env is None:
        load_dotenv()
        env = os.environ
    try:
        return build_config(env, get_settings(env.get(CONFIG_FILE_ENV)))
    except ConfigError as e:
        print(format_config_error(e), file=sys.stderr)
        sys.exit(1)
