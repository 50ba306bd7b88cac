"""Loading of Slack strategy configuration.

Configuration can be given as a mapping or a YAML file. String values may
reference the environment (`${SLACK_CLIENT_SECRET}`) or a file
(`file://secrets/slack_secret`); references are resolved before validation.
"""

import logging
import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from .models import SlackAuthConfigModel

logger = logging.getLogger(__name__)

ENV_VAR_PATTERN = re.compile(r"\${([A-Za-z0-9_]+)}")
FILE_URL_PATTERN = re.compile(r"file://(.+)")

__all__ = ["interpolate", "load_config", "resolve_env_var", "resolve_file_url"]


def resolve_env_var(value: str) -> str:
    """Resolve environment variable references in a string.

    Raises:
        ValueError: If an environment variable is not set
    """
    matches = ENV_VAR_PATTERN.findall(value)
    if not matches:
        return value

    result = value
    for env_var in matches:
        if env_var not in os.environ:
            raise ValueError(f"Environment variable {env_var} is not set")
        result = result.replace(f"${{{env_var}}}", os.environ[env_var])
    return result


def resolve_file_url(file_url: str, base_path: Path | None = None) -> str:
    """Read a secret from a file:// URL, stripping surrounding whitespace.

    Relative paths resolve against `base_path` (the config file's directory)
    or the working directory.
    """
    match = FILE_URL_PATTERN.match(file_url)
    if not match:
        raise ValueError(f"Invalid file URL format: '{file_url}'")

    path = Path(match.group(1))
    if not path.is_absolute():
        path = (base_path or Path.cwd()) / path

    try:
        return path.read_text().strip()
    except OSError as e:
        raise ValueError(f"Failed to read file '{path}': {e}") from e


def interpolate(config: Any, base_path: Path | None = None) -> Any:
    """Recursively resolve ${ENV} and file:// references."""
    if isinstance(config, Mapping):
        return {key: interpolate(value, base_path) for key, value in config.items()}
    if isinstance(config, list):
        return [interpolate(item, base_path) for item in config]
    if isinstance(config, str):
        if config.startswith("file://"):
            return resolve_file_url(config, base_path)
        return resolve_env_var(config)
    return config


def load_config(source: Mapping[str, Any] | str | Path) -> SlackAuthConfigModel:
    """Load and validate Slack strategy configuration.

    Accepts either a flat mapping or one nested under a top-level `slack` key.

    Raises:
        ValueError: If a reference cannot be resolved or the file is not a mapping
        pydantic.ValidationError: If the resolved configuration is invalid
    """
    base_path: Path | None = None
    if isinstance(source, Mapping):
        raw: Any = source
    else:
        path = Path(source)
        base_path = path.parent
        logger.debug(f"Loading Slack configuration from {path}")
        with open(path) as f:
            raw = yaml.safe_load(f) or {}

    if not isinstance(raw, Mapping):
        raise ValueError("Slack configuration must be a mapping")
    if isinstance(raw.get("slack"), Mapping):
        raw = raw["slack"]

    return SlackAuthConfigModel.model_validate(interpolate(raw, base_path))
