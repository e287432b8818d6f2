from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from functools import lru_cache

from htmlfy.states import GuardMode, MarkerKind

# All scans below are linear: opening tags are found with a regex, closing tags
# and tag ends with str.find, and each scan only moves forward.

_open_name_re = re.compile(r"<([A-Za-z]+)\b")

_ws_run_re = re.compile(r"\s+")

_char_to_kind = {
    "<": MarkerKind.LT,
    ">": MarkerKind.GT,
    "\n": MarkerKind.NL,
    "\r": MarkerKind.CR,
    " ": MarkerKind.WS,
}

_kind_to_char = {kind: ch for ch, kind in _char_to_kind.items()}


def is_html(content: str) -> bool:
    """True if some `<name ...>` is followed later by `</name>` (same name).

    First pair wins; nesting is not checked.
    """

    if not isinstance(content, str):
        return False

    last_close: dict[str, int] = {}
    for m in _open_name_re.finditer(content):
        name = m.group(1)
        pos = last_close.get(name)
        if pos is None:
            pos = last_close[name] = content.rfind(f"</{name}>")
        if pos >= m.end():
            return True
    return False


@lru_cache(maxsize=256)
def _open_tag_re(name: str) -> re.Pattern[str]:
    # Exact name: `<pre` must not match `<preview>`.
    return re.compile(rf"<{re.escape(name)}(?=[\s/>])")


def _iter_elements(html: str, name: str) -> Iterator[tuple[int, int]]:
    """Yield `(inner_start, inner_end)` for each `<name ...>...</name>`.

    The first closing tag after an opening tag ends the element.
    """

    open_re = _open_tag_re(name)
    close = f"</{name}>"
    pos = 0
    while True:
        m = open_re.search(html, pos)
        if m is None:
            return
        gt = html.find(">", m.end())
        if gt < 0:
            return
        end = html.find(close, gt + 1)
        if end < 0:
            # No later opening tag can be closed either.
            return
        yield gt + 1, end
        pos = end + len(close)


def _splice(html: str, edits: list[tuple[int, int, str]]) -> str:
    if not edits:
        return html
    parts: list[str] = []
    last = 0
    for start, end, replacement in edits:
        parts.append(html[last:start])
        parts.append(replacement)
        last = end
    parts.append(html[last:])
    return "".join(parts)


def sentinel(kind: MarkerKind | str, ignore_with: str) -> str:
    return f"-{ignore_with}{kind}-"


@lru_cache(maxsize=64)
def _protect_re(ignore_with: str) -> re.Pattern[str]:
    return re.compile(rf"-{re.escape(ignore_with)}|[<>\s]")


@lru_cache(maxsize=64)
def _marker_re(ignore_with: str) -> re.Pattern[str]:
    kinds = "|".join(k.value for k in MarkerKind if k is not MarkerKind.WS)
    return re.compile(rf"-{re.escape(ignore_with)}(?:({kinds})|ws([0-9a-f]*))-")


def _protect_text(text: str, ignore_with: str) -> str:
    def repl(m: re.Match[str]) -> str:
        ch = m.group(0)
        if ch.startswith("-"):
            # Marker prefix already in the text; escape it so it cannot pair
            # with a following marker kind.
            return sentinel(MarkerKind.DASH, ignore_with)
        kind = _char_to_kind.get(ch)
        if kind is not None:
            return sentinel(kind, ignore_with)
        # Tabs, form feeds, NBSP, ...: keep the code point so restoring is lossless.
        return sentinel(f"{MarkerKind.WS}{ord(ch):x}", ignore_with)

    return _protect_re(ignore_with).sub(repl, text)


def _unprotect_text(text: str, ignore_with: str) -> str:
    def repl(m: re.Match[str]) -> str:
        kind, codepoint = m.group(1), m.group(2)
        if kind == MarkerKind.DASH:
            return f"-{ignore_with}"
        if kind is not None:
            return _kind_to_char[MarkerKind(kind)]
        if not codepoint:
            return " "
        value = int(codepoint, 16)
        if value > 0x10FFFF or not chr(value).isspace():
            return m.group(0)
        return chr(value)

    return _marker_re(ignore_with).sub(repl, text)


def ignore_element_counted(
    html: str, ignore: Iterable[str], mode: GuardMode | str, ignore_with: str
) -> tuple[str, int]:
    """Like `ignore_element`, also returning how many regions were rewritten."""

    mode = GuardMode(mode)
    transform = _protect_text if mode is GuardMode.PROTECT else _unprotect_text

    count = 0
    # One pass per name, in list order. Later names see what earlier ones produced.
    for name in ignore:
        if not name:
            continue
        edits = [
            (start, end, transform(html[start:end], ignore_with))
            for start, end in _iter_elements(html, name)
        ]
        html = _splice(html, edits)
        count += len(edits)
    return html, count


def ignore_element(html: str, ignore: Iterable[str], mode: GuardMode | str, ignore_with: str) -> str:
    """Protect or unprotect the inner content of every ignored element.

    Protect replaces `<`, `>`, newlines, carriage returns and other whitespace
    inside `<name ...>...</name>` with sentinel markers built from
    `ignore_with`, and escapes any literal `-{ignore_with}` already there;
    unprotect turns the markers back. Tags themselves are left alone. For
    same-name nesting the first closing tag ends the region.
    """

    return ignore_element_counted(html, ignore, mode, ignore_with)[0]


def _leading_ws_edits(html: str, name: str) -> list[tuple[int, int, str]]:
    open_re = _open_tag_re(name)
    edits: list[tuple[int, int, str]] = []
    pos = 0
    gt = -1
    while True:
        m = open_re.search(html, pos)
        if m is None:
            break
        if gt < m.end():
            gt = html.find(">", m.end())
            if gt < 0:
                break
        ws = _ws_run_re.match(html, gt + 1)
        if ws is None:
            pos = m.start() + 1
            continue
        edits.append((ws.start(), ws.end(), ""))
        pos = ws.end()
    return edits


def _trailing_ws_edits(html: str, name: str) -> list[tuple[int, int, str]]:
    close = f"</{name}>"
    edits: list[tuple[int, int, str]] = []
    last = 0
    pos = html.find(close)
    while pos >= 0:
        start = pos
        while start > last and html[start - 1].isspace():
            start -= 1
        if start < pos:
            edits.append((start, pos, ""))
        last = pos + len(close)
        pos = html.find(close, last)
    return edits


def trimify_counted(html: str, trim: Iterable[str]) -> tuple[str, int]:
    count = 0
    for name in trim:
        if not name:
            continue
        edits = _leading_ws_edits(html, name)
        html = _splice(html, edits)
        count += len(edits)

        edits = _trailing_ws_edits(html, name)
        html = _splice(html, edits)
        count += len(edits)
    return html, count


def trimify(html: str, trim: Iterable[str]) -> str:
    """Strip whitespace right after `<name ...>` and right before `</name>`."""

    return trimify_counted(html, trim)[0]
