"""Library for framing rfc5545 text into logical lines.

Long content lines are split ("folded") into multiple physical lines, where a
line that begins with a single space or tab continues the previous line. This
module reverses that process and yields one `LogicalLine` per content line,
tagged with the line number where it started so that errors found later can
point back at the original input.

Text values may also contain the two character escape sequence `\\n`, which
is converted into a real line break in the logical line and escaped again when
folding.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Generator, Iterable
from dataclasses import dataclass

from caltools.errors import ErrorReporter, ParseError
from .const import CRLF, FOLD_INDENT, FOLD_LEN, ParseMode, WSP

_LOGGER = logging.getLogger(__name__)

__all__ = [
    "LogicalLine",
    "unfold",
    "fold",
]

_PHYSICAL_LINE_RE = re.compile(r"[^\n]*\n|[^\n]+\Z")
_ESCAPED_NEWLINE_RE = re.compile(r"\\(\\|n|N)")
_CONTENT_LEN = FOLD_LEN - len(FOLD_INDENT)


@dataclass(frozen=True)
class LogicalLine:
    """A content line after unfolding."""

    line_no: int
    """The 1-based number of the first physical line."""

    text: str

    def __str__(self) -> str:
        return self.text


def _physical_lines(source: str | Iterable[str]) -> Iterable[str]:
    if isinstance(source, str):
        return (match.group(0) for match in _PHYSICAL_LINE_RE.finditer(source))
    return source


def _unescape_newlines(text: str) -> str:
    return _ESCAPED_NEWLINE_RE.sub(
        lambda match: match.group(0) if match.group(1) == "\\" else "\n", text
    )


def unfold(
    source: str | Iterable[str],
    mode: ParseMode = ParseMode.LOOSE,
    report: ErrorReporter | None = None,
) -> Generator[LogicalLine, None, None]:
    """Read physical lines and yield the unfolded logical lines.

    The source may be the full text or any iterable of lines such as a file
    object. Files should be opened with `newline=""` so that the original line
    terminators are preserved, otherwise every line appears to end with a bare
    line feed which is reported in strict mode.
    """
    buffer: list[str] = []
    start_line_no = 0
    bare_lf: tuple[int, str] | None = None
    for line_no, raw in enumerate(_physical_lines(source), start=1):
        continuation = bool(buffer) and raw[:1] in WSP
        if bare_lf is not None and not continuation:
            if mode.strict and report is not None:
                report.report(
                    ParseError(
                        bare_lf[0], "Line terminated with a bare line feed", bare_lf[1]
                    )
                )
        bare_lf = None
        if raw.endswith("\n") and not raw.endswith(CRLF):
            bare_lf = (line_no, raw.rstrip("\n"))
        text = raw.rstrip("\n").replace("\r", "")
        if continuation:
            buffer.append(text[1:])
            continue
        if buffer:
            yield LogicalLine(start_line_no, _unescape_newlines("".join(buffer)))
        start_line_no = line_no
        buffer = [text]
    if bare_lf is not None:
        _LOGGER.debug("Input ended with a bare line feed on line %d", bare_lf[0])
    if buffer:
        yield LogicalLine(start_line_no, _unescape_newlines("".join(buffer)))


def fold(text: str) -> str:
    """Encode a logical line as one or more CRLF terminated physical lines."""
    text = text.replace("\r", "").replace("\n", "\\n")
    chunks = [
        text[pos : pos + _CONTENT_LEN] for pos in range(0, len(text), _CONTENT_LEN)
    ] or [""]
    return FOLD_INDENT.join(chunk + CRLF for chunk in chunks)
