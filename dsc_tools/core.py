"""Core framework: logging, errors, config loading, DscTool base and registry."""

from __future__ import annotations

import dataclasses
import logging
import re
from pathlib import Path
from typing import Any

import click
import yaml
from colorama import Fore, Style


# ── Logging ──────────────────────────────────────────────────────────


def _level_color(levelno: int) -> str:
    if levelno >= logging.ERROR:
        return Fore.RED
    if levelno >= logging.WARNING:
        return Fore.YELLOW
    return Fore.CYAN


class ToolFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        color = _level_color(record.levelno)
        message = record.getMessage()
        return f"{color}[{record.levelname.lower()}]{Style.RESET_ALL} {message}"


logger = logging.getLogger("dsc_tools")
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(ToolFormatter())
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    logger.propagate = False


# ── Errors ───────────────────────────────────────────────────────────


class DscError(Exception):
    """Base class for every failure reported by dsc_tools."""


class SourceNotReadableError(DscError):
    pass


class DestinationNotWritableError(DscError):
    pass


class WriteFailedError(DscError):
    pass


class LineTooLongError(DscError):
    """A line exceeds the configured ``max_line_length``."""

    def __init__(self, number: int, length: int, limit: int) -> None:
        super().__init__(
            f"Line {number} is {length} characters long (max_line_length is {limit})"
        )
        self.number = number
        self.length = length
        self.limit = limit


class ReplaceError(DscError):
    pass


class ConfigError(DscError):
    pass


# ── Config Loading ───────────────────────────────────────────────────

CONFIG_FILENAME = "dsc_tools.yaml"

# ASCII letters and digits only, as accepted inside a section header.
SECTION_NAME_RE = re.compile(r"[A-Za-z0-9]+")


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load the YAML config file.

    With no explicit path, ``dsc_tools.yaml`` in the current directory is
    used when it exists.  A missing file yields an empty dict.
    """
    if config_path is None:
        config_path = Path.cwd() / CONFIG_FILENAME
    if not config_path.exists():
        return {}
    try:
        data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"{config_path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{config_path.name} must contain a top-level mapping.")
    return data


@dataclasses.dataclass(frozen=True)
class EditorSettings:
    """Knobs shared by the section editor and the file replacement helpers."""

    section: str = "Components"
    indent: str = "  "
    encoding: str = "utf-8"
    max_line_length: int | None = None
    max_section_name_length: int | None = None
    tmp_extension: str = ".tmp"
    bak_extension: str = ".bak"

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> EditorSettings:
        """Build settings from the ``editor`` mapping of a loaded config."""
        section = config.get("editor") or {}
        if not isinstance(section, dict):
            raise ConfigError("'editor' must be a mapping")

        known = {f.name for f in dataclasses.fields(cls)}
        unknown = set(section) - known
        if unknown:
            raise ConfigError(f"'editor' has unknown keys: {sorted(unknown)}")

        for key in ("max_line_length", "max_section_name_length"):
            value = section.get(key)
            if value is not None and (not isinstance(value, int) or value < 1):
                raise ConfigError(f"'editor.{key}' must be a positive integer or null")

        for key in ("section", "indent", "encoding", "tmp_extension", "bak_extension"):
            value = section.get(key)
            if value is not None and not isinstance(value, str):
                raise ConfigError(f"'editor.{key}' must be a string")

        if section.get("section") is not None and not SECTION_NAME_RE.fullmatch(section["section"]):
            raise ConfigError("'editor.section' must be ASCII alphanumeric")

        settings = cls(**section)
        for key in ("tmp_extension", "bak_extension"):
            value = getattr(settings, key)
            if not value or "/" in value or "\\" in value:
                raise ConfigError(f"'editor.{key}' must be a non-empty file suffix")
        if settings.tmp_extension == settings.bak_extension:
            raise ConfigError("'editor.tmp_extension' and 'editor.bak_extension' must differ")
        return settings


# ── ToolContext ───────────────────────────────────────────────────────


@dataclasses.dataclass(frozen=True)
class ToolContext:
    """Immutable context passed to every tool execution."""

    config: dict[str, Any]
    tool_config: dict[str, Any]
    settings: EditorSettings


# ── DscTool Base ─────────────────────────────────────────────────────


class DscTool:
    """Base class for all dscfile subcommands.

    Subclasses set ``name`` and ``help``, then implement ``setup()`` to
    add click options and ``execute()`` to run the tool.
    """

    name: str = ""
    help: str = ""

    def setup(self, cmd: click.Command) -> click.Command:
        """Add click options/arguments to the command. Return the command."""
        return cmd

    def default_args(self) -> dict[str, Any]:
        """Return default args dict before config/CLI merge."""
        return {}

    def execute(self, ctx: ToolContext, args: dict[str, Any]) -> None:
        """Execute the tool with context and tool-specific args."""
        raise NotImplementedError


# ── Tool Registry ────────────────────────────────────────────────────

_TOOL_REGISTRY: dict[str, DscTool] = {}


def register_tool(tool: DscTool) -> None:
    """Add a tool to the global registry."""
    _TOOL_REGISTRY[tool.name] = tool


def get_tool(name: str) -> DscTool | None:
    """Look up a registered tool by name."""
    return _TOOL_REGISTRY.get(name)


def invoke_tool(
    name: str,
    config: dict[str, Any],
    extra_args: dict[str, Any] | None = None,
) -> None:
    """Invoke a registered tool programmatically (e.g. from another script)."""
    tool = get_tool(name)
    if tool is None:
        raise KeyError(f"Tool '{name}' is not registered.")

    tool_config = config.get(name, {})
    if not isinstance(tool_config, dict):
        tool_config = {}

    ctx = ToolContext(
        config=config,
        tool_config=tool_config,
        settings=EditorSettings.from_config(config),
    )

    args: dict[str, Any] = {**tool.default_args()}
    args.update(tool_config)
    if extra_args:
        args.update(extra_args)

    tool.execute(ctx, args)


# ── Reporting ────────────────────────────────────────────────────────


def log_invocation(dsc_file: Path, target: str) -> None:
    logger.info(f"Filename: {dsc_file}")
    logger.info(f'String  : "{target}"')


def log_line(tag: str, number: int, text: str) -> None:
    """Log a matched/added/removed line as ``TAG[  12]: text``."""
    text = text.rstrip("\r\n")
    logger.info(f"{tag}[{number:4d}]: {text}")
