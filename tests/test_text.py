import pytest

from destill.tui.text import (
    clean_log_text,
    split_lines,
    strip_ansi,
    truncate,
    truncate_and_pad,
    visual_width,
    wrap,
)


def test_wrap_short_text():
    assert wrap("hello world", 20) == "hello world"


def test_wrap_exact_width():
    assert wrap("hello world", 11) == "hello world"


def test_wrap_multiple_lines():
    width = 15
    result = wrap("hello world this is a test", width)
    for line in result.split("\n"):
        assert visual_width(line) <= width
    assert result.replace("\n", " ") == "hello world this is a test"


def test_wrap_long_word():
    text = "bk;t=[2025-11-30T15:32:45.123Z]%0|1732983165.701|fatal|rdkafka#consumer-1|"
    width = 40
    result = wrap(text, width)
    lines = result.split("\n")
    assert len(lines) >= 2
    for line in lines:
        assert visual_width(line) <= width
    assert result.replace("\n", "") == text


def test_wrap_very_long_word_shorter_than_width():
    width = 20
    result = wrap("verylongwordthatdoesntfit short", width)
    for line in result.split("\n"):
        assert visual_width(line) <= width


def test_wrap_multibyte_characters():
    width = 25
    result = wrap("Hello 世界 this is a test with emoji 🎉 and more text", width)
    for line in result.split("\n"):
        assert visual_width(line) <= width


def test_wrap_empty_string():
    assert wrap("", 20) == ""


def test_wrap_zero_width():
    assert wrap("hello world", 0) == "hello world"


def test_truncate_with_ellipsis():
    result = truncate("this is a very long text", 10, True)
    assert visual_width(result) <= 10
    assert result.endswith("...")


def test_truncate_without_ellipsis():
    result = truncate("this is a very long text", 10, False)
    assert visual_width(result) <= 10
    assert not result.endswith("...")
    assert "this is a very long text".startswith(result)


def test_truncate_non_positive_width():
    assert truncate("anything", 0, True) == ""


def test_truncate_flattens_and_trims():
    assert truncate("  hi\nthere  ", 40, True) == "hi there"


def test_truncate_strips_ansi():
    assert truncate("\x1b[31mRed text\x1b[0m", 40, False) == "Red text"


def test_truncate_and_pad():
    result = truncate_and_pad("short", 10, False)
    assert visual_width(result) == 10
    assert result.startswith("short")


def test_truncate_and_pad_long_text_fits_exactly():
    result = truncate_and_pad("this is a very long text", 10, True)
    assert visual_width(result) == 10


def test_clean_log_text_buildkite_apc():
    text = "\x1b_bk;t=1732983165\x07%0|1732983165.701|fatal|rdkafka#producer-5|error message"
    assert clean_log_text(text) == "%0|1732983165.701|fatal|rdkafka#producer-5|error message"


def test_clean_log_text_osc():
    assert clean_log_text("\x1b]0;Build Output\x07This is the actual content") == "This is the actual content"


def test_clean_log_text_dcs():
    assert clean_log_text("\x1bPsome device control\x1b\\actual content") == "actual content"


def test_clean_log_text_ansi():
    assert clean_log_text("\x1b[31mRed text\x1b[0m normal") == "Red text normal"


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("line1\r\nline2", "line1\nline2"),
        ("line1\rline2", "line1\nline2"),
        ("line1\r\r\nline2", "line1\nline2"),
        ("a\r\nb\rc\r\r\nd", "a\nb\nc\nd"),
    ],
)
def test_clean_log_text_line_endings(text, expected):
    assert clean_log_text(text) == expected


def test_clean_log_text_c0_controls():
    assert clean_log_text("text\x00with\x07bell\x08and\x1fcontrols") == "textwithbellandcontrols"


def test_clean_log_text_preserves_tabs_and_newlines():
    assert clean_log_text("line1\n\tindented line2") == "line1\n\tindented line2"


def test_clean_log_text_complex():
    text = "\x1b_bk;t=1732983165\x07\x1b[31m%0|1732983165.701|fatal|rdkafka#producer-5|\x1b[0m error\r\r\n"
    assert clean_log_text(text) == "%0|1732983165.701|fatal|rdkafka#producer-5| error\n"


def test_strip_ansi_removes_colour_codes():
    assert strip_ansi("\x1b[1m\x1b[31mbold red\x1b[0m normal") == "bold red normal"


def test_visual_width_ignores_escapes_and_uses_widest_line():
    assert visual_width("\x1b[31mabc\x1b[0m") == visual_width("abc")
    assert visual_width("ab\nabcdef") == visual_width("abcdef")


def test_split_lines():
    assert split_lines("") == []
    assert split_lines("a\nb") == ["a", "b"]