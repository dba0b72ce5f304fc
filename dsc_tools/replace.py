"""Swap an edited copy of a file into place, keeping a backup of the old one."""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

from .core import EditorSettings, ReplaceError, logger

T = TypeVar("T")


def temp_path_for(path: Path, settings: EditorSettings) -> Path:
    return path.with_name(path.name + settings.tmp_extension)


def backup_path_for(path: Path, settings: EditorSettings) -> Path:
    return path.with_name(path.name + settings.bak_extension)


def replace_with_backup(source: Path, temp: Path, backup: Path | None = None) -> None:
    """Move *temp* over *source*.

    With a *backup* path, any existing backup is removed and *source* is
    renamed to it first, so the previous version survives the swap.
    """
    if backup is None:
        try:
            os.replace(temp, source)
        except OSError as exc:
            raise ReplaceError(f"Failed to rename tmp file: {exc.strerror}") from exc
        return

    if backup.exists():
        try:
            backup.unlink()
        except OSError as exc:
            raise ReplaceError(f"Failed to remove bak file: {exc.strerror}") from exc
    try:
        source.rename(backup)
    except OSError as exc:
        raise ReplaceError(f"Failed to rename src file: {exc.strerror}") from exc
    try:
        temp.rename(source)
    except OSError as exc:
        raise ReplaceError(f"Failed to rename tmp file: {exc.strerror}") from exc
    logger.debug(f"Previous version kept at {backup}")


def edit_in_place(
    source: Path,
    settings: EditorSettings,
    edit: Callable[[Path, Path], T],
    *,
    backup: bool = True,
    dry_run: bool = False,
) -> T:
    """Run ``edit(source, temp)`` and swap the temp file into place.

    The temp file is deleted if *edit* raises or on a dry run; the source
    is only touched after *edit* has fully written the temp file.
    """
    temp = temp_path_for(source, settings)
    backup_path = backup_path_for(source, settings) if backup else None

    # Neither the temp nor the backup may alias the source or each other.
    resolved = {source.resolve(), temp.resolve()}
    if backup_path is not None:
        resolved.add(backup_path.resolve())
    if len(resolved) != (3 if backup_path is not None else 2):
        raise ReplaceError(
            f"Temp and backup paths for {source} must differ from it and from each other"
        )

    try:
        result = edit(source, temp)
    except BaseException:
        temp.unlink(missing_ok=True)
        raise

    if dry_run:
        temp.unlink(missing_ok=True)
        logger.info(f"Dry run: {source} left unchanged.")
        return result

    replace_with_backup(source, temp, backup_path)
    return result
