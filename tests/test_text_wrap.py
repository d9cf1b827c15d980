from __future__ import annotations

import pytest

from gemlab.report.pdf_layout import CONTENT_W
from gemlab.report.text_wrap import PLACEHOLDER, font_width, wrap_text
from gemlab.report.theme import FONT, FS_BODY


def _chars(text: str) -> float:
    return float(len(text))


BODY = font_width(FONT, FS_BODY)


@pytest.mark.parametrize("text", [None, "", "   ", "\n\t"])
def test_blank_input_yields_placeholder(text: str | None) -> None:
    assert wrap_text(text, _chars, 20).lines() == [PLACEHOLDER]


def test_greedy_packing_by_width() -> None:
    lines = wrap_text("aaa bbb ccc ddd", _chars, 7).lines()
    assert lines == ["aaa bbb", "ccc ddd"]


def test_exact_fit_stays_on_line() -> None:
    assert wrap_text("ab cd", _chars, 5).lines() == ["ab cd"]


def test_overlong_word_stands_alone_unsplit() -> None:
    lines = wrap_text("a supercalifragilistic b", _chars, 6).lines()
    assert lines == ["a", "supercalifragilistic", "b"]


def test_trailing_line_is_flushed() -> None:
    assert wrap_text("one two three", _chars, 8).lines() == ["one two", "three"]


def test_newlines_are_hard_breaks() -> None:
    lines = wrap_text("first\n\nsecond part", _chars, 50).lines()
    assert lines == ["first", "", "second part"]


def test_iteration_is_restartable() -> None:
    wrapped = wrap_text("alpha beta gamma delta", _chars, 11)
    assert list(wrapped) == list(wrapped)
    assert wrapped.count() == len(wrapped.lines()) == 2


def test_wrapping_never_overflows_real_metrics() -> None:
    text = " ".join(["Fine silk inclusions and a pleasing red hue"] * 20)
    for line in wrap_text(text, BODY, CONTENT_W):
        assert BODY(line) <= CONTENT_W


def test_wrapping_is_complete() -> None:
    text = "Natural corundum  with   heat treatment indications and minor fissures " * 8
    lines = wrap_text(text, BODY, 120).lines()
    assert " ".join(lines).split() == text.split()
