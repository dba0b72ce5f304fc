"""Section membership tracking for the target section of a DSC file."""

from __future__ import annotations

import enum
from collections.abc import Iterable, Iterator

from .core import logger
from .lines import check_line_length, parse_section_header


class SectionState(enum.Enum):
    OUTSIDE = "outside"
    INSIDE = "inside"
    CLOSED = "closed"


class LineRole(enum.Enum):
    OUTSIDE = "outside"  # not part of the target section
    OPEN = "open"        # header that enters the section
    BODY = "body"
    CLOSE = "close"      # header that ends the section


class SectionLocator:
    """Classify lines as they stream past, tracking the target section.

    The section runs from just after its header to just before the next
    header of any name (or end of file).  Once closed it never reopens, so
    a second ``[Components]`` later in the file is ordinary content.
    """

    def __init__(self, section: str = "Components", max_name_length: int | None = None) -> None:
        self.section = section
        self.max_name_length = max_name_length
        self._state = SectionState.OUTSIDE

    @property
    def state(self) -> SectionState:
        return self._state

    def classify(self, line: str) -> LineRole:
        name = parse_section_header(line, self.max_name_length)

        if self._state is SectionState.INSIDE:
            if name is None:
                return LineRole.BODY
            self._state = SectionState.CLOSED
            logger.debug(f"[{self.section}] closed by header [{name}]")
            return LineRole.CLOSE

        if self._state is SectionState.OUTSIDE and name == self.section:
            self._state = SectionState.INSIDE
            logger.debug(f"[{self.section}] opened")
            return LineRole.OPEN

        return LineRole.OUTSIDE


def iter_section_lines(
    lines: Iterable[str],
    locator: SectionLocator,
    stop_after_close: bool = False,
    max_line_length: int | None = None,
) -> Iterator[tuple[int, str, LineRole]]:
    """Yield ``(number, line, role)`` for each line, numbering from 1.

    *stop_after_close* ends the scan after the closing header; only
    read-only callers may use it.
    """
    for number, line in enumerate(lines, 1):
        check_line_length(line, number, max_line_length)
        role = locator.classify(line)
        yield number, line, role
        if stop_after_close and role is LineRole.CLOSE:
            return
