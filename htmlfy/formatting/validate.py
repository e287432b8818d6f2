from __future__ import annotations

import logging
import math
from collections.abc import Mapping, MutableMapping, Sequence
from typing import Any

from htmlfy.formatting.config import CONFIG_KEYS, DEFAULT_CONFIG, FormatConfig
from htmlfy.formatting.errors import (
    InvalidConfigType,
    InvalidFieldShape,
    InvalidFieldType,
    TabSizeOutOfRange,
    TabSizeUnsafe,
)
from htmlfy.formatting.merge import merge_config

logger = logging.getLogger(__name__)

# Largest integer a double represents exactly (2**53 - 1).
MAX_SAFE_INTEGER = 9_007_199_254_740_991

TAB_SIZE_MIN = 1
TAB_SIZE_MAX = 16

_ignore_with_forbidden_chars = "<>"


def _json_type_name(value: Any) -> str:
    """Name a value by its JSON type, since configs usually arrive as JSON."""

    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, Mapping):
        return "object"
    if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
        return "array"
    return type(value).__name__


def _is_string_list(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and all(isinstance(e, str) for e in value)


def _is_safe_integer(value: int | float) -> bool:
    if isinstance(value, float) and (not math.isfinite(value) or not value.is_integer()):
        return False
    return abs(value) <= MAX_SAFE_INTEGER


def _validate_tab_size(tab_size: Any) -> int:
    if isinstance(tab_size, bool) or not isinstance(tab_size, (int, float)):
        raise InvalidFieldType(
            f"Tab size must be a number, not {_json_type_name(tab_size)}.",
            field="tab_size",
            actual_type=_json_type_name(tab_size),
        )
    if not _is_safe_integer(tab_size):
        raise TabSizeUnsafe(
            f"Tab size {tab_size} is not a safe integer (expecting an integer with magnitude <= {MAX_SAFE_INTEGER}).",
            field="tab_size",
        )

    # Accept integral floats like 4.0.
    tab_size = math.floor(tab_size)
    if tab_size < TAB_SIZE_MIN or tab_size > TAB_SIZE_MAX:
        raise TabSizeOutOfRange(
            f"Tab size {tab_size} out of range. Expecting {TAB_SIZE_MIN} to {TAB_SIZE_MAX}.",
            field="tab_size",
        )
    return tab_size


def validate_config(config: Any, *, defaults: FormatConfig = DEFAULT_CONFIG) -> FormatConfig:
    """Validate a partial user config and merge it onto `defaults`.

    Returns `defaults` itself when `config` sets none of the known keys.
    A valid `tab_size` is floored and written back into `config`.
    """

    if not isinstance(config, Mapping):
        raise InvalidConfigType(f"Config must be an object, not {_json_type_name(config)}.")

    if not any(key in config for key in CONFIG_KEYS):
        return defaults

    if "tab_size" in config:
        tab_size = _validate_tab_size(config["tab_size"])
        if isinstance(config, MutableMapping):
            config["tab_size"] = tab_size
        else:
            config = {**config, "tab_size": tab_size}

    if "strict" in config and not isinstance(config["strict"], bool):
        actual = _json_type_name(config["strict"])
        raise InvalidFieldType(f"Strict config must be a boolean, not {actual}.", field="strict", actual_type=actual)

    if "ignore" in config and not _is_string_list(config["ignore"]):
        raise InvalidFieldShape("Ignore config must be an array of strings.", field="ignore")

    if "ignore_with" in config:
        ignore_with = config["ignore_with"]
        if not isinstance(ignore_with, str):
            actual = _json_type_name(ignore_with)
            raise InvalidFieldType(
                f"Ignore_with config must be a string, not {actual}.", field="ignore_with", actual_type=actual
            )
        # Markers must survive the formatting pass untouched.
        if not ignore_with or any(ch.isspace() or ch in _ignore_with_forbidden_chars for ch in ignore_with):
            raise InvalidFieldShape(
                "Ignore_with config must be a non-empty string without whitespace, '<' or '>'.",
                field="ignore_with",
            )

    if "trim" in config and not _is_string_list(config["trim"]):
        raise InvalidFieldShape("Trim config must be an array of strings.", field="trim")

    merged = merge_config(defaults, config)
    logger.debug("validated config: %s", merged)
    return merged
