"""Section-scoped line editor: check, add and delete entries in [Components].

Files are read and written with ``newline="\\n"`` so lines split on LF only
and every terminator (LF or CRLF) is copied through untouched, and with
``surrogateescape`` so bytes that do not decode survive the round trip.
"""

from __future__ import annotations

import contextlib
import dataclasses
import os
from collections.abc import Generator, Iterable, Iterator
from pathlib import Path
from typing import IO

from .core import (
    DestinationNotWritableError,
    EditorSettings,
    SourceNotReadableError,
    WriteFailedError,
    logger,
)
from .lines import is_blank_line, line_terminator, matches_prefix
from .section import LineRole, SectionLocator, iter_section_lines

StrPath = str | os.PathLike


@dataclasses.dataclass(frozen=True)
class LineReport:
    """A line that was matched, added or removed, with its 1-based number."""

    number: int
    text: str


def _locator(settings: EditorSettings) -> SectionLocator:
    return SectionLocator(settings.section, settings.max_section_name_length)


def _scan(lines: Iterable[str], settings: EditorSettings, stop_after_close: bool = False):
    return iter_section_lines(
        lines,
        _locator(settings),
        stop_after_close=stop_after_close,
        max_line_length=settings.max_line_length,
    )


# ── Matcher ──────────────────────────────────────────────────────────


def match_lines(
    lines: Iterable[str],
    target: str,
    settings: EditorSettings | None = None,
) -> list[LineReport]:
    """Return every body line of the target section that starts with *target*."""
    settings = settings or EditorSettings()
    return [
        LineReport(number, line)
        for number, line, role in _scan(lines, settings, stop_after_close=True)
        if role is LineRole.BODY and matches_prefix(line, target)
    ]


# ── Inserter ─────────────────────────────────────────────────────────


class Inserter:
    """Stream lines through, splicing one new entry into the target section.

    The entry goes before the trailing run of blank lines in the section,
    or directly before the closing header when the section does not end
    with a blank line.  If the section is missing, or runs to end of file
    without a trailing blank run, the entry is appended at end of file.

    After ``process()`` is exhausted, ``report`` holds the source line
    number the entry was placed before and the entry text.
    """

    def __init__(self, target: str, settings: EditorSettings | None = None) -> None:
        self.target = target
        self.settings = settings or EditorSettings()
        self.report: LineReport | None = None

    def _entry(self, number: int, eol: str) -> str:
        eol = eol or "\n"
        text = f"{self.settings.indent}{self.target}{eol}"
        self.report = LineReport(number, text)
        logger.debug(f"Inserting entry before line {number}")
        return text

    def process(self, lines: Iterable[str]) -> Iterator[str]:
        # Blank body lines seen since the last non-blank one.
        blanks: list[tuple[int, str]] = []
        eol = ""
        last_line = ""
        count = 0

        for number, line, role in _scan(lines, self.settings):
            count = number
            last_line = line
            eol = eol or line_terminator(line)

            if role is LineRole.BODY:
                if is_blank_line(line):
                    blanks.append((number, line))
                    continue
                # A non-blank line means the buffered run was not trailing.
                yield from (text for _, text in blanks)
                blanks.clear()
            elif role is LineRole.CLOSE:
                yield self._entry(blanks[0][0] if blanks else number, eol)
                yield from (text for _, text in blanks)
                blanks.clear()

            yield line

        if self.report is not None:
            return

        if blanks:
            yield self._entry(blanks[0][0], eol)
            yield from (text for _, text in blanks)
            return

        if last_line and not line_terminator(last_line):
            yield eol or "\n"
        yield self._entry(count + 1, eol)


# ── Remover ──────────────────────────────────────────────────────────


class Remover:
    """Stream lines through, dropping target-section body lines that match.

    Dropped lines are collected in ``removed`` as they are skipped.
    """

    def __init__(self, target: str, settings: EditorSettings | None = None) -> None:
        self.target = target
        self.settings = settings or EditorSettings()
        self.removed: list[LineReport] = []

    def process(self, lines: Iterable[str]) -> Iterator[str]:
        for number, line, role in _scan(lines, self.settings):
            if role is LineRole.BODY and matches_prefix(line, self.target):
                self.removed.append(LineReport(number, line))
                continue
            yield line


# ── File I/O ─────────────────────────────────────────────────────────


def _read_lines(f: IO[str], path: StrPath) -> Iterator[str]:
    try:
        yield from f
    except OSError as exc:
        raise SourceNotReadableError(f"Failed to read file: {path} ({exc})") from exc


@contextlib.contextmanager
def _source_lines(path: StrPath, settings: EditorSettings) -> Generator[Iterator[str], None, None]:
    try:
        f = open(path, encoding=settings.encoding, errors="surrogateescape", newline="\n")
    except OSError as exc:
        raise SourceNotReadableError(f"Failed to open file for read: {path} ({exc.strerror})") from exc
    with f:
        yield _read_lines(f, path)


@contextlib.contextmanager
def _destination(path: StrPath, source: StrPath, settings: EditorSettings) -> Generator[IO[str], None, None]:
    if Path(path).resolve() == Path(source).resolve():
        raise DestinationNotWritableError(f"Destination is the source file: {path}")
    try:
        f = open(path, "w", encoding=settings.encoding, errors="surrogateescape", newline="\n")
    except OSError as exc:
        raise DestinationNotWritableError(f"Failed to open file for write: {path} ({exc.strerror})") from exc
    try:
        with f:
            yield f
    except OSError as exc:
        raise WriteFailedError(f"Failed to write file: {path} ({exc})") from exc


def _copy(chunks: Iterable[str], dst: IO[str]) -> None:
    for chunk in chunks:
        dst.write(chunk)


# ── Entry Points ─────────────────────────────────────────────────────


def count_matches(
    source_path: StrPath,
    target: str,
    settings: EditorSettings | None = None,
) -> tuple[int, list[LineReport]]:
    """Count entries in the target section that start with *target*.

    Zero is a normal result; the file is never modified.
    """
    settings = settings or EditorSettings()
    with _source_lines(source_path, settings) as lines:
        reports = match_lines(lines, target, settings)
    logger.debug(f"count_matches({source_path!s}) found {len(reports)}")
    return len(reports), reports


def insert_entry(
    source_path: StrPath,
    dest_path: StrPath,
    target: str,
    settings: EditorSettings | None = None,
) -> LineReport:
    """Write *source_path* to *dest_path* with one new entry for *target*.

    On failure *dest_path* may be left partial; callers must not use it.
    """
    settings = settings or EditorSettings()
    inserter = Inserter(target, settings)
    with _source_lines(source_path, settings) as lines:
        with _destination(dest_path, source_path, settings) as dst:
            _copy(inserter.process(lines), dst)
    if inserter.report is None:
        raise WriteFailedError(f"No entry was written to {dest_path}")
    return inserter.report


def delete_entries(
    source_path: StrPath,
    dest_path: StrPath,
    target: str,
    settings: EditorSettings | None = None,
) -> list[LineReport]:
    """Write *source_path* to *dest_path* minus the entries matching *target*."""
    settings = settings or EditorSettings()
    remover = Remover(target, settings)
    with _source_lines(source_path, settings) as lines:
        with _destination(dest_path, source_path, settings) as dst:
            _copy(remover.process(lines), dst)
    return remover.removed
