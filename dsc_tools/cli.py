"""Entry point: main(), click group, tool discovery."""

from __future__ import annotations

import importlib
import inspect
import logging
import pkgutil
import sys
from pathlib import Path
from typing import Any

import click
from click.core import ParameterSource

from .core import (
    DscError,
    DscTool,
    EditorSettings,
    ToolContext,
    load_config,
    logger,
    register_tool,
)

# ── Tool Discovery ───────────────────────────────────────────────────


def _discover_tools_from_path(
    package_path: list[str],
    package_name: str,
) -> list[DscTool]:
    """Discover DscTool subclasses from the package's modules."""
    tools: list[DscTool] = []
    for module_info in pkgutil.iter_modules(package_path):
        name = module_info.name
        if name.startswith("_") or name in ("cli", "core"):
            continue
        try:
            module = importlib.import_module(f"{package_name}.{name}")
        except ImportError as exc:
            logger.debug(f"Could not import {package_name}.{name}: {exc}")
            continue

        for _, cls in inspect.getmembers(module, inspect.isclass):
            if cls is DscTool or not issubclass(cls, DscTool):
                continue
            if cls.__module__ != module.__name__:
                continue
            tool = cls()
            if not tool.name:
                logger.warning(f"Skipping tool '{cls.__name__}' with empty name")
                continue
            tools.append(tool)
    return sorted(tools, key=lambda t: t.name)


# ── Click Command Builder ────────────────────────────────────────────


def _build_tool_context(ctx_obj: dict[str, Any], tool_name: str) -> ToolContext:
    """Build a ToolContext from the click context obj dict."""
    config = ctx_obj["config"]
    tool_config = config.get(tool_name, {})
    if not isinstance(tool_config, dict):
        tool_config = {}
    return ToolContext(
        config=config,
        tool_config=tool_config,
        settings=ctx_obj["settings"],
    )


def _make_tool_command(tool: DscTool) -> click.Command:
    """Build a click command for a tool."""

    @click.pass_context
    def callback(ctx: click.Context, **kwargs: Any) -> None:
        context = _build_tool_context(ctx.obj, tool.name)

        # Merge: defaults < tool_config < CLI kwargs.  A flag left at its
        # click default does not override a configured value.
        args: dict[str, Any] = {**tool.default_args()}
        args.update(context.tool_config)
        for k, v in kwargs.items():
            if v is None:
                continue
            if k in args and ctx.get_parameter_source(k) is ParameterSource.DEFAULT:
                continue
            args[k] = v

        tool.execute(context, args)

    cmd = click.Command(
        name=tool.name,
        help=tool.help,
        callback=callback,
    )

    # Let the tool add its own arguments and options
    cmd = tool.setup(cmd)

    return cmd


# ── Main CLI Group ───────────────────────────────────────────────────


def _build_cli() -> click.Group:
    """Build the top-level click group with all discovered tools."""

    @click.group(context_settings={"help_option_names": ["-h", "--help"]})
    @click.option(
        "--config",
        "config_path",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        default=None,
        help="YAML config file (default: ./dsc_tools.yaml if present)",
    )
    @click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
    @click.pass_context
    def cli(ctx: click.Context, config_path: Path | None, verbose: bool) -> None:
        """EDK2 utility script tool.

        Add, delete and check entries in the [Components] section of a DSC file.
        """
        ctx.ensure_object(dict)
        if verbose:
            logger.setLevel(logging.DEBUG)

        try:
            config = load_config(config_path)
            settings = EditorSettings.from_config(config)
        except DscError as exc:
            logger.error(str(exc))
            sys.exit(1)

        ctx.obj["config"] = config
        ctx.obj["settings"] = settings

    import dsc_tools as pkg

    for tool in _discover_tools_from_path(list(pkg.__path__), pkg.__name__):
        register_tool(tool)
        cli.add_command(_make_tool_command(tool))

    return cli


def main() -> None:
    """CLI entry point, installed as the ``dscfile`` console script."""
    from colorama import init as colorama_init
    colorama_init()

    cli = _build_cli()
    cli(prog_name="dscfile", standalone_mode=True)


if __name__ == "__main__":
    main()
