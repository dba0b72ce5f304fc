"""Shared fixtures for dsc_tools tests."""

from __future__ import annotations

import io
import logging
from pathlib import Path

import pytest

from dsc_tools import core


@pytest.fixture(autouse=True)
def reset_tool_registry():
    """Save and restore _TOOL_REGISTRY (and the logger level) around each test."""
    saved = core._TOOL_REGISTRY.copy()
    level = core.logger.level
    yield
    core._TOOL_REGISTRY.clear()
    core._TOOL_REGISTRY.update(saved)
    core.logger.setLevel(level)


@pytest.fixture
def write_dsc(tmp_path: Path):
    """Factory that writes raw DSC content (bytes-exact) to a temp file.

    Usage::

        dsc = write_dsc("[Components]\\n  Foo.inf\\n")
    """
    _counter = 0

    def _make(content: str, name: str | None = None) -> Path:
        nonlocal _counter
        path = tmp_path / (name or f"platform_{_counter}.dsc")
        _counter += 1
        path.write_bytes(content.encode("utf-8"))
        return path

    return _make


@pytest.fixture
def capture_logs():
    """Capture dsc_tools logger output into a StringIO buffer.

    The logger has propagate=False and its own StreamHandler that points
    at the original sys.stderr fd, so capsys/capfd/caplog cannot see it.
    This fixture adds a temporary StringIO handler.
    """
    buf = io.StringIO()
    handler = logging.StreamHandler(buf)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger = logging.getLogger("dsc_tools")
    logger.addHandler(handler)
    yield buf
    logger.removeHandler(handler)
