from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from htmlfy.formatting.config import DEFAULT_CONFIG, FormatConfig
from htmlfy.formatting.rules import ignore_element_counted, is_html, trimify_counted
from htmlfy.states import GuardMode

logger = logging.getLogger(__name__)

Formatter = Callable[[str, FormatConfig], str]


@dataclass
class FormatResult:
    text: str
    stats: dict[str, int]


def _identity(html: str, _config: FormatConfig) -> str:
    return html


def format_html(html: str, config: FormatConfig = DEFAULT_CONFIG, formatter: Formatter | None = None) -> FormatResult:
    """Run `formatter` with ignored elements shielded, then trim.

    `config` is expected to come from `validate_config`. Input that does not
    look like HTML is returned unchanged.
    """

    stats: dict[str, int] = {}
    if not is_html(html):
        stats["not_html"] = 1
        return FormatResult(text=html, stats=stats)

    fmt = formatter or _identity

    shielded, n = ignore_element_counted(html, config.ignore, GuardMode.PROTECT, config.ignore_with)
    if n:
        stats["protected_regions"] = n

    formatted = fmt(shielded, config)

    text, restored = ignore_element_counted(formatted, config.ignore, GuardMode.UNPROTECT, config.ignore_with)
    # Counts can differ when ignored elements nest (inner tags are escaped by the outer pass).
    logger.debug("ignored regions: protected=%s restored=%s", n, restored)

    text, n = trimify_counted(text, config.trim)
    if n:
        stats["trimmed_whitespace"] = n

    return FormatResult(text=text, stats=stats)
