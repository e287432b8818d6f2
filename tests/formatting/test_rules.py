from __future__ import annotations

import time

import pytest

from htmlfy.formatting.rules import (
    ignore_element,
    ignore_element_counted,
    is_html,
    sentinel,
    trimify,
    trimify_counted,
)
from htmlfy.states import GuardMode, MarkerKind


def _protect(html: str, ignore: list[str], ignore_with: str = "x") -> str:
    return ignore_element(html, ignore, GuardMode.PROTECT, ignore_with)


def _unprotect(html: str, ignore: list[str], ignore_with: str = "x") -> str:
    return ignore_element(html, ignore, GuardMode.UNPROTECT, ignore_with)


def test_is_html_detects_balanced_pair() -> None:
    assert is_html("<p>hi</p>")
    assert is_html("text before <div class='a'>\n  <span>x</span>\n</div> after")


def test_is_html_rejects_plain_and_unclosed() -> None:
    assert not is_html("plain text")
    assert not is_html("<p>unclosed")
    assert not is_html("<p>mismatched</div>")
    assert not is_html("")


def test_is_html_non_string_is_false() -> None:
    assert not is_html(None)  # type: ignore[arg-type]
    assert not is_html(123)  # type: ignore[arg-type]


def test_is_html_first_pair_needs_a_later_close() -> None:
    assert is_html("<a></b><b>x</a>")
    assert not is_html("</a><a>")
    assert is_html("<a><a>x</a>")


def test_sentinel_shape() -> None:
    assert sentinel(MarkerKind.LT, "abc") == "-abclt-"
    assert sentinel("ws", "abc") == "-abcws-"
    assert sentinel(MarkerKind.DASH, "abc") == "-abcdash-"


def test_protect_escapes_inner_content_only() -> None:
    html = '<div><pre class="x">a <b>\n</pre></div>'
    out = _protect(html, ["pre"])
    assert out == '<div><pre class="x">a-xws--xlt-b-xgt--xnl-</pre></div>'


def test_protect_leaves_attributes_alone_when_they_repeat_the_content() -> None:
    html = '<pre title="a b">a b</pre>'
    assert _protect(html, ["pre"]) == '<pre title="a b">a-xws-b</pre>'


def test_protect_carriage_returns_and_tabs() -> None:
    out = _protect("<pre>\r\n\tx</pre>", ["pre"])
    assert out == "<pre>-xcr--xnl--xws9-x</pre>"
    assert _unprotect(out, ["pre"]) == "<pre>\r\n\tx</pre>"


def test_protect_matches_exact_tag_name() -> None:
    html = "<preview>a b</preview><pre>a b</pre>"
    assert _protect(html, ["pre"]) == "<preview>a b</preview><pre>a-xws-b</pre>"


def test_tag_names_are_case_sensitive() -> None:
    html = "<PRE>a b</PRE>"
    assert _protect(html, ["pre"]) == html


def test_protect_every_occurrence() -> None:
    html = "<code>a b</code> mid <code>c d</code>"
    out, n = ignore_element_counted(html, ["code"], GuardMode.PROTECT, "x")
    assert out == "<code>a-xws-b</code> mid <code>c-xws-d</code>"
    assert n == 2


def test_nested_same_name_first_closing_tag_wins() -> None:
    html = "<div>a<div>b</div>c</div>"
    out = _protect(html, ["div"])
    assert out == "<div>a-xlt-div-xgt-b</div>c</div>"
    assert _unprotect(out, ["div"]) == html


def test_ignore_list_order_is_observable() -> None:
    html = "<a>1<b>2</a>3</b>"

    a_first = _protect(html, ["a", "b"])
    b_first = _protect(html, ["b", "a"])

    assert a_first == "<a>1-xlt-b-xgt-2</a>3</b>"
    assert b_first == "<a>1<b>2-xlt-/a-xgt-3</b>"
    assert _unprotect(a_first, ["a", "b"]) == html
    assert _unprotect(b_first, ["b", "a"]) == html


@pytest.mark.parametrize(
    "html",
    [
        "<div>\n  <pre>\n    line 1\n\tline 2  \n  </pre>\n</div>",
        '<textarea name="t">  <b>not a tag</b> \r\n</textarea><p>x</p>',
        "<pre><code>x y</code></pre>",
        "<script>if (a < b && c > d) {\n  run();\n}</script>",
        "<pre></pre><pre> </pre>",
        "<pre>\u00a0nbsp\u2003em space</pre>",
        "<pre>-xlt x</pre>",
        "<pre>-x-xws--xdash- -_!i-£___£%_nl-</pre>",
        "no html at all",
    ],
)
@pytest.mark.parametrize(
    "ignore",
    [
        ["pre"],
        ["pre", "code"],
        ["code", "pre"],
        ["textarea", "script", "pre"],
    ],
)
def test_protect_unprotect_round_trip(html: str, ignore: list[str]) -> None:
    for ignore_with in ("x", "_!i-£___£%_"):
        assert _unprotect(_protect(html, ignore, ignore_with), ignore, ignore_with) == html


def test_protect_escapes_literal_marker_prefix() -> None:
    html = "<pre>-xlt x</pre>"
    out = _protect(html, ["pre"])
    assert out == "<pre>-xdash-lt-xws-x</pre>"
    assert _unprotect(out, ["pre"]) == html


def test_protected_regions_contain_no_reserved_characters() -> None:
    out = _protect("<pre>\n  <i>a</i>\t\r\n</pre>", ["pre"], "_!i-£___£%_")
    inner = out[len("<pre>") : -len("</pre>")]
    assert not any(ch in inner for ch in "<>\n\r\t ")


def test_empty_ignore_list_is_identity() -> None:
    html = "<pre> a </pre>"
    for mode in GuardMode:
        assert ignore_element(html, [], mode, "x") == html


def test_absent_element_is_a_no_op() -> None:
    html = "<p> a </p>"
    out, n = ignore_element_counted(html, ["pre", ""], GuardMode.PROTECT, "x")
    assert out == html
    assert n == 0


def test_mode_accepts_plain_strings() -> None:
    protected = ignore_element("<pre>a b</pre>", ["pre"], "protect", "x")
    assert protected == "<pre>a-xws-b</pre>"
    assert ignore_element(protected, ["pre"], "unprotect", "x") == "<pre>a b</pre>"


def test_unknown_mode_raises() -> None:
    with pytest.raises(ValueError):
        ignore_element("<pre>a</pre>", ["pre"], "shield", "x")


def test_unprotect_leaves_unknown_code_points_alone() -> None:
    html = "<pre>a-xwsffffffff-b-xws41-c</pre>"
    # 0xffffffff is not a code point and "A" (0x41) is not whitespace.
    assert _unprotect(html, ["pre"]) == html


def test_unprotect_only_touches_ignored_regions() -> None:
    html = "<p>a-xws-b</p><pre>a-xws-b</pre>"
    assert _unprotect(html, ["pre"]) == "<p>a-xws-b</p><pre>a b</pre>"


def test_regex_characters_in_names_and_prefix_are_literal() -> None:
    html = "<x.y>a b</x.y><xzy>a b</xzy>"
    out = ignore_element(html, ["x.y"], GuardMode.PROTECT, "(.*)")
    assert out == "<x.y>a-(.*)ws-b</x.y><xzy>a b</xzy>"
    assert ignore_element(out, ["x.y"], GuardMode.UNPROTECT, "(.*)") == html


def test_trimify_strips_inner_edges() -> None:
    assert trimify("<pre>  \n content \n  </pre>", ["pre"]) == "<pre>content</pre>"


def test_trimify_keeps_inner_whitespace_and_attributes() -> None:
    html = '<td class="c">\n  a   b \n</td>'
    assert trimify(html, ["td"]) == '<td class="c">a   b</td>'


def test_trimify_all_occurrences_and_counts() -> None:
    html = "<li> one </li>\n<li>two</li>\n<li>\tthree</li>"
    out, n = trimify_counted(html, ["li"])
    assert out == "<li>one</li>\n<li>two</li>\n<li>three</li>"
    assert n == 3


def test_trimify_absent_names_and_whitespace_outside() -> None:
    html = " <p> a </p> "
    assert trimify(html, ["pre"]) == html
    assert trimify(html, ["p"]) == " <p>a</p> "
    assert trimify(html, []) == html


def _elapsed(fn, *args) -> float:
    started = time.perf_counter()
    fn(*args)
    return time.perf_counter() - started


@pytest.mark.parametrize(
    "content",
    [
        "<a " * 20000,
        "<a>" * 20000,
        "<a" * 20000 + "</b>",
    ],
)
def test_is_html_is_fast_on_unclosed_tags(content: str) -> None:
    assert not is_html(content)
    assert _elapsed(is_html, content) < 1.0


@pytest.mark.parametrize(
    "html",
    [
        "<pre " * 20000,
        "<pre>" * 20000,
        "<pre>a</pre>" + "<pre>" * 20000,
    ],
)
def test_ignore_element_is_fast_on_unclosed_tags(html: str) -> None:
    for mode in GuardMode:
        assert _elapsed(ignore_element, html, ["pre"], mode, "x") < 1.0


@pytest.mark.parametrize(
    "html",
    [
        "<p>" + " " * 100000,
        "<p>" * 20000,
        "<p " * 20000,
        ("</p>" + " " * 50) * 5000,
    ],
)
def test_trimify_is_fast_on_long_whitespace_runs(html: str) -> None:
    assert _elapsed(trimify, html, ["p"]) < 1.0
