from __future__ import annotations

import copy
import dataclasses
import logging
from collections.abc import Mapping, Sequence
from typing import Any

from htmlfy.formatting.config import CONFIG_KEYS, FormatConfig
from htmlfy.formatting.errors import InvalidArgument

logger = logging.getLogger(__name__)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def _is_container(value: Any) -> bool:
    return isinstance(value, Mapping) or _is_sequence(value)


def _empty_like(value: Any) -> Any:
    return {} if isinstance(value, Mapping) else []


def merge_objects(current: Any, updates: Any) -> Any:
    """Recursively merge `updates` onto `current`.

    - Sequences concatenate (no dedup): `merge_objects([1, 2], [3]) == [1, 2, 3]`.
    - Mappings merge key by key; nested containers recurse, scalars overwrite.

    `current` is never mutated and the result shares no containers with it.
    """

    if current is None or updates is None:
        raise InvalidArgument("both 'current' and 'updates' must be passed to merge_objects()")

    if _is_sequence(current):
        merged = copy.deepcopy(list(current))
        if _is_sequence(updates):
            merged.extend(updates)
        else:
            merged.append(updates)
        return merged

    if isinstance(current, Mapping):
        if not isinstance(updates, Mapping):
            raise InvalidArgument(f"cannot merge {type(updates).__name__} into a mapping")
        merged = {k: copy.deepcopy(v) for k, v in current.items()}
        for key, value in updates.items():
            if not _is_container(value):
                merged[key] = value
                continue
            # Nested container: merge into whatever is there, or an empty one.
            merged[key] = merge_objects(merged.get(key) or _empty_like(value), value)
        return merged

    raise InvalidArgument(f"cannot merge into {type(current).__name__}; expected a mapping or a sequence")


def _as_dict(config: FormatConfig | Mapping[str, Any]) -> dict[str, Any]:
    if isinstance(config, FormatConfig):
        return dataclasses.asdict(config)
    return copy.deepcopy(dict(config))


def merge_config(dconfig: FormatConfig | Mapping[str, Any], config: Mapping[str, Any]) -> FormatConfig:
    """Merge a user config onto a deep copy of `dconfig`.

    No validation happens here; use `validate_config` for untrusted input.
    """

    merged = merge_objects(_as_dict(dconfig), config)

    unknown = sorted(str(k) for k in merged if k not in CONFIG_KEYS)
    if unknown:
        logger.debug("dropping unknown config keys: %s", ", ".join(unknown))

    values = {k: merged[k] for k in CONFIG_KEYS if k in merged}
    for key in ("ignore", "trim"):
        if key in values:
            values[key] = tuple(values[key])
    return FormatConfig(**values)
