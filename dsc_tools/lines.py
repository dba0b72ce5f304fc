"""Line classification for DSC files: section headers, blank lines, entries.

Whitespace follows the C ``isspace`` set rather than ``str.isspace`` so a
line is classified the same way EDK2's own tooling sees it.
"""

from __future__ import annotations

import re

from .core import SECTION_NAME_RE, LineTooLongError, logger

WHITESPACE = " \t\n\v\f\r"

_HEADER_RE = re.compile(rf"\[({SECTION_NAME_RE.pattern})\]")


def parse_section_header(line: str, max_name_length: int | None = None) -> str | None:
    """Return the section name if *line* is a header, else ``None``.

    A header is optional leading whitespace, ``[``, one or more ASCII
    alphanumerics, ``]``, then anything.  ``[Foo Bar]`` and ``[Foo-1]`` are
    ordinary lines.
    """
    match = _HEADER_RE.match(line.lstrip(WHITESPACE))
    if match is None:
        return None
    name = match.group(1)
    if max_name_length is not None and len(name) > max_name_length:
        logger.warning(
            f"Section name '{name}' truncated to {max_name_length} characters"
        )
        name = name[:max_name_length]
    return name


def is_blank_line(line: str) -> bool:
    return not line.strip(WHITESPACE)


def matches_prefix(line: str, target: str) -> bool:
    """True if *line*, minus leading whitespace, starts with *target*."""
    return line.lstrip(WHITESPACE).startswith(target)


def line_terminator(line: str) -> str:
    if line.endswith("\r\n"):
        return "\r\n"
    if line.endswith("\n"):
        return "\n"
    return ""


def check_line_length(line: str, number: int, max_line_length: int | None) -> None:
    """Raise LineTooLongError if *line* (terminator excluded) exceeds the limit."""
    if max_line_length is None:
        return
    length = len(line) - len(line_terminator(line))
    if length > max_line_length:
        raise LineTooLongError(number, length, max_line_length)
