"""Tests for unfolding and folding content lines."""

import pytest

from caltools.errors import ErrorReporter
from caltools.parsing.const import ParseMode
from caltools.parsing.lines import LogicalLine, fold, unfold


def test_unfold_continuation_lines() -> None:
    """Test that continuation lines are joined to the line they continue."""
    lines = list(
        unfold(
            "BEGIN:VEVENT\r\n"
            "DESCRIPTION:This is a lo\r\n"
            " ng description\r\n"
            "\tthat spans lines\r\n"
            "END:VEVENT\r\n"
        )
    )
    assert lines == [
        LogicalLine(1, "BEGIN:VEVENT"),
        LogicalLine(2, "DESCRIPTION:This is a long descriptionthat spans lines"),
        LogicalLine(5, "END:VEVENT"),
    ]


def test_unfold_iterable_source() -> None:
    """Test reading lines from an iterable like a file object."""
    lines = list(unfold(["SUMMARY:a\r\n", " b\r\n", "UID:1\r\n"]))
    assert lines == [LogicalLine(1, "SUMMARY:ab"), LogicalLine(3, "UID:1")]


def test_unfold_no_trailing_newline() -> None:
    """Test the last line is returned without a line terminator."""
    lines = list(unfold("SUMMARY:a\r\nUID:1"))
    assert [line.text for line in lines] == ["SUMMARY:a", "UID:1"]


def test_unfold_escaped_newline() -> None:
    """Test the two character newline escape is converted to a line break."""
    lines = list(unfold("DESCRIPTION:line one\\nline two\\Nthree\r\n"))
    assert lines[0].text == "DESCRIPTION:line one\nline two\nthree"


def test_unfold_escaped_backslash_is_kept() -> None:
    """Test an escaped backslash before an n is not treated as a newline."""
    lines = list(unfold("DESCRIPTION:C:\\\\new\r\n"))
    assert lines[0].text == "DESCRIPTION:C:\\\\new"


def test_continuation_without_previous_line() -> None:
    """Test that a leading space on the first line starts a new line."""
    lines = list(unfold(" SUMMARY:a\r\n"))
    assert lines == [LogicalLine(1, " SUMMARY:a")]


@pytest.mark.parametrize(
    "mode,expected_errors",
    [
        (ParseMode.STRICT, [1]),
        (ParseMode.LOOSE, []),
    ],
)
def test_bare_line_feed(mode: ParseMode, expected_errors: list[int]) -> None:
    """Test lines ending in a bare line feed are reported in strict mode."""
    report = ErrorReporter()
    lines = list(unfold("BEGIN:VEVENT\nSUMMARY:a\n b\r\nEND:VEVENT\r\n", mode, report))
    assert [line.text for line in lines] == [
        "BEGIN:VEVENT",
        "SUMMARY:ab",
        "END:VEVENT",
    ]
    assert [error.line_no for error in report.errors] == expected_errors


def test_bare_line_feed_every_line() -> None:
    """Test every bare line feed is reported when not followed by a fold."""
    report = ErrorReporter()
    list(unfold("BEGIN:VEVENT\nSUMMARY:a\nEND:VEVENT\r\n", ParseMode.STRICT, report))
    assert [error.line_no for error in report.errors] == [1, 2]
    assert report.errors[0].message == "Line terminated with a bare line feed"
    assert report.errors[0].input_data == "BEGIN:VEVENT"


def test_fold_short_line() -> None:
    """Test a short line is terminated but not folded."""
    assert fold("SUMMARY:Lunch") == "SUMMARY:Lunch\r\n"


def test_fold_empty_line() -> None:
    """Test an empty line is encoded as a bare terminator."""
    assert fold("") == "\r\n"


def test_fold_long_line() -> None:
    """Test long lines are split into physical lines of at most 75 octets."""
    text = "DESCRIPTION:" + "x" * 200
    folded = fold(text)
    physical = folded.split("\r\n")
    assert physical[-1] == ""
    assert all(len(line) <= 75 for line in physical)
    assert all(line.startswith(" ") for line in physical[1:-1])
    assert [line.text for line in unfold(folded)] == [text]


def test_fold_escapes_newlines() -> None:
    """Test that a line break in the value is escaped when folding."""
    assert fold("DESCRIPTION:a\nb") == "DESCRIPTION:a\\nb\r\n"
    assert [line.text for line in unfold(fold("DESCRIPTION:a\nb"))] == [
        "DESCRIPTION:a\nb"
    ]
