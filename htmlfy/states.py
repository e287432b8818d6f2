from __future__ import annotations

from enum import StrEnum


class GuardMode(StrEnum):
    PROTECT = "protect"
    UNPROTECT = "unprotect"


class MarkerKind(StrEnum):
    LT = "lt"
    GT = "gt"
    NL = "nl"
    CR = "cr"
    WS = "ws"
    # A literal "-{ignore_with}" already present in protected text.
    DASH = "dash"
