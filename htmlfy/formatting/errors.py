"""Exceptions raised by config validation and merging.

All of them derive from ValueError so callers that only care about "bad input"
can keep catching that.
"""

from __future__ import annotations


class HtmlfyError(ValueError):
    code = "htmlfy_error"

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field


class InvalidArgument(HtmlfyError):
    """Raised when merge operands are missing or cannot be merged."""

    code = "invalid_argument"


class ConfigValidationError(HtmlfyError):
    """Base for user configuration errors."""

    code = "invalid_config"


class InvalidConfigType(ConfigValidationError):
    code = "invalid_config_type"


class InvalidFieldType(ConfigValidationError):
    code = "invalid_field_type"

    def __init__(self, message: str, *, field: str, actual_type: str) -> None:
        super().__init__(message, field=field)
        self.actual_type = actual_type


class InvalidFieldShape(ConfigValidationError):
    """A field value does not have the required shape.

    `ignore`/`trim` must be lists of strings. `ignore_with` must be non-empty
    and contain no whitespace, `<` or `>`: markers built from it have to
    survive the formatting pass unchanged.
    """

    code = "invalid_field_shape"


class TabSizeUnsafe(ConfigValidationError):
    code = "tab_size_unsafe"


class TabSizeOutOfRange(ConfigValidationError):
    code = "tab_size_out_of_range"
