from __future__ import annotations

import json
import os
from pathlib import Path

from htmlfy.formatting.config import DEFAULT_CONFIG, FormatConfig
from htmlfy.formatting.validate import validate_config

CONFIG_ENV = "HTMLFY_CONFIG"
MAX_INPUT_CHARS_ENV = "HTMLFY_MAX_INPUT_CHARS"
LOG_LEVEL_ENV = "HTMLFY_LOG_LEVEL"
LOG_DIR_ENV = "HTMLFY_LOG_DIR"
DISABLE_FILE_LOG_ENV = "HTMLFY_DISABLE_FILE_LOG"

DEFAULT_MAX_INPUT_CHARS = 2_000_000


def env_str(name: str) -> str | None:
    """Stripped value of `name`, or None when unset or blank."""

    raw = str(os.getenv(name, "") or "").strip()
    return raw or None


def env_path(name: str, default: Path) -> Path:
    raw = env_str(name)
    return Path(raw) if raw else default


def env_truthy(name: str) -> bool:
    v = (env_str(name) or "").lower()
    return v in {"1", "true", "yes", "y", "on"}


def env_int(name: str, default: int) -> int:
    raw = env_str(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def env_json_object(name: str) -> dict | None:
    raw = env_str(name)
    if not raw:
        return None
    obj = json.loads(raw)
    if not isinstance(obj, dict):
        raise ValueError(f"{name} must be a JSON object")
    return obj


def config_from_env() -> FormatConfig:
    """Build the process config from `HTMLFY_CONFIG` (a JSON object of overrides)."""

    overrides = env_json_object(CONFIG_ENV)
    if overrides is None:
        return DEFAULT_CONFIG
    return validate_config(overrides)


def max_input_chars() -> int:
    return max(1, env_int(MAX_INPUT_CHARS_ENV, DEFAULT_MAX_INPUT_CHARS))
