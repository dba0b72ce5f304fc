"""AddTool — insert an entry into the [Components] section."""

from __future__ import annotations

import sys
from functools import partial
from pathlib import Path
from typing import Any

import click

from .core import DscError, DscTool, ToolContext, log_invocation, log_line, logger
from .editor import insert_entry
from .replace import edit_in_place


class AddTool(DscTool):
    name = "add"
    help = "Add an entry for STRING to the [Components] section"

    def setup(self, cmd: click.Command) -> click.Command:
        cmd = click.argument("dsc_file", type=click.Path(dir_okay=False, path_type=Path))(cmd)
        cmd = click.argument("string")(cmd)
        cmd = click.option("--no-backup", is_flag=True, help="Do not keep the previous file as <file>.bak")(cmd)
        cmd = click.option("--dry-run", is_flag=True, help="Show where the entry would go without writing")(cmd)
        return cmd

    def default_args(self) -> dict[str, Any]:
        return {"backup": True, "no_backup": False, "dry_run": False}

    def execute(self, ctx: ToolContext, args: dict[str, Any]) -> None:
        dsc_file = Path(args["dsc_file"])
        target = args["string"]
        backup = bool(args.get("backup", True)) and not args.get("no_backup", False)
        log_invocation(dsc_file, target)

        edit = partial(insert_entry, target=target, settings=ctx.settings)
        try:
            report = edit_in_place(
                dsc_file, ctx.settings, edit,
                backup=backup, dry_run=args.get("dry_run", False),
            )
        except DscError as exc:
            logger.error(str(exc))
            logger.error("Failed to add line")
            sys.exit(1)

        log_line("ADD", report.number, report.text)
