from __future__ import annotations

from dataclasses import dataclass, fields


@dataclass(frozen=True)
class FormatConfig:
    # Indentation width used by the formatting pass (1..16).
    tab_size: int = 4
    strict: bool = False

    # Element names whose inner content is shielded from the formatting pass.
    # Order matters when ignored elements nest.
    ignore: tuple[str, ...] = ()

    # Element names whose leading/trailing inner whitespace is stripped.
    trim: tuple[str, ...] = ()

    # Token embedded in sentinel markers, e.g. "-_!i-£___£%_lt-".
    ignore_with: str = "_!i-£___£%_"


CONFIG_KEYS: tuple[str, ...] = tuple(f.name for f in fields(FormatConfig))

DEFAULT_CONFIG = FormatConfig()
