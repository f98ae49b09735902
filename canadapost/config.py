"""YAML configuration loader with env var resolution and Pydantic validation.

Loads config from (priority order):
1. Explicit path passed to load_config()
2. ./canadapost.yaml (working directory)
3. ~/.canadapost/config.yaml (user home)

Environment variables override YAML: CANADAPOST_<KEY> (e.g.
CANADAPOST_CUSTOMER_NUMBER). ${VAR} references in YAML values resolve from
environment at load time.

Example canadapost.yaml:
    user_id: ${CPC_USERNAME}
    password: ${CPC_PASSWORD}
    customer_number: "0001234567"
    environment: development
"""

import logging
import os
import re
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, field_validator

from canadapost.services.constants import (
    DEFAULT_LANGUAGE,
    DEVELOPMENT_ENDPOINT,
    PRODUCTION_ENDPOINT,
)

logger = logging.getLogger(__name__)

ENV_PREFIX = "CANADAPOST_"

_ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")

ENDPOINTS: dict[str, str] = {
    "production": PRODUCTION_ENDPOINT,
    "development": DEVELOPMENT_ENDPOINT,
}


def resolve_env_vars(value: str) -> str:
    """Resolve ${VAR} references in a string from environment variables.

    Missing env vars resolve to empty string.
    """
    def _replace(match: re.Match) -> str:
        return os.environ.get(match.group(1), "")

    return _ENV_VAR_PATTERN.sub(_replace, value)


def _resolve_env_vars_recursive(data: Any) -> Any:
    if isinstance(data, str):
        return resolve_env_vars(data)
    elif isinstance(data, dict):
        return {k: _resolve_env_vars_recursive(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [_resolve_env_vars_recursive(item) for item in data]
    return data


class CanadaPostConfig(BaseModel):
    """Static configuration for a CanadaPostClient.

    ``environment`` selects the endpoint host explicitly; ``endpoint`` can
    override it (e.g. for a proxy or a recording server).
    """

    user_id: str
    password: str
    customer_number: str | None = None
    language: str = DEFAULT_LANGUAGE
    environment: Literal["production", "development"] = "development"
    endpoint: str | None = None
    timeout: float | None = 30.0

    @field_validator("customer_number", "endpoint", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        """Treat empty strings (e.g. unset ${VAR}) as not configured."""
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def endpoint_host(self) -> str:
        """Host the client talks to."""
        return self.endpoint or ENDPOINTS[self.environment]


def _find_config_file() -> Path | None:
    candidates = [
        Path.cwd() / "canadapost.yaml",
        Path.cwd() / "canadapost.yml",
        Path.home() / ".canadapost" / "config.yaml",
        Path.home() / ".canadapost" / "config.yml",
    ]
    for candidate in candidates:
        if candidate.exists():
            return candidate
    return None


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Apply CANADAPOST_<KEY> env var overrides to config data.

    Only keys that are fields of CanadaPostConfig are picked up, so
    unrelated variables sharing the prefix are ignored.

    Args:
        data: Parsed YAML config dict.

    Returns:
        Config dict with env var overrides applied.
    """
    known_fields = set(CanadaPostConfig.model_fields)
    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        field = key[len(ENV_PREFIX):].lower()
        if field in known_fields:
            data[field] = value
    return data


def load_config(config_path: str | None = None) -> CanadaPostConfig | None:
    """Load client configuration from YAML with env var resolution.

    Args:
        config_path: Explicit path to config file. If None, searches
            standard locations (cwd, then ~/.canadapost/).

    Returns:
        Validated CanadaPostConfig, or None if no config file was found
        and the environment does not provide the credentials.

    Raises:
        FileNotFoundError: If ``config_path`` does not exist.
        pydantic.ValidationError: If the merged values are invalid.
    """
    if config_path:
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
    else:
        path = _find_config_file()

    raw_data: dict[str, Any] = {}
    if path is not None:
        logger.info("Loading config from %s", path)
        with open(path) as f:
            raw_data = yaml.safe_load(f) or {}

    data = _apply_env_overrides(_resolve_env_vars_recursive(raw_data))
    if not data:
        return None
    return CanadaPostConfig(**data)
