from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from htmlfy.formatting.config import FormatConfig
from htmlfy.states import GuardMode


class ErrorEnvelope(BaseModel):
    code: str
    message: str
    field: str | None = None


class ConfigOut(BaseModel):
    tab_size: int
    strict: bool
    ignore: list[str]
    trim: list[str]
    ignore_with: str

    @classmethod
    def from_config(cls, config: FormatConfig) -> ConfigOut:
        return cls(
            tab_size=config.tab_size,
            strict=config.strict,
            ignore=list(config.ignore),
            trim=list(config.trim),
            ignore_with=config.ignore_with,
        )


class ConfigResponse(BaseModel):
    config: ConfigOut


class ValidateConfigRequest(BaseModel):
    # Left untyped: shape and type checks belong to validate_config.
    config: Any = Field(default_factory=dict)


class IsHtmlRequest(BaseModel):
    content: str


class IsHtmlResponse(BaseModel):
    is_html: bool


class IgnoreRequest(BaseModel):
    html: str
    mode: GuardMode = GuardMode.PROTECT
    ignore: list[str] | None = None
    ignore_with: str | None = None


class TrimRequest(BaseModel):
    html: str
    trim: list[str] = Field(default_factory=list)


class HtmlResponse(BaseModel):
    html: str


class FormatRequest(BaseModel):
    html: str
    config: Any = Field(default_factory=dict)


class FormatResponse(BaseModel):
    html: str
    stats: dict[str, int] = Field(default_factory=dict)
