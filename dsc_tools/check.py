"""CheckTool — report matching entries in the [Components] section."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import click

from .core import DscError, DscTool, ToolContext, log_invocation, log_line, logger
from .editor import count_matches


class CheckTool(DscTool):
    name = "check"
    help = "Check for entries in the [Components] section starting with STRING"

    def setup(self, cmd: click.Command) -> click.Command:
        cmd = click.argument("dsc_file", type=click.Path(dir_okay=False, path_type=Path))(cmd)
        cmd = click.argument("string")(cmd)
        return cmd

    def execute(self, ctx: ToolContext, args: dict[str, Any]) -> None:
        dsc_file = Path(args["dsc_file"])
        target = args["string"]
        log_invocation(dsc_file, target)

        try:
            count, reports = count_matches(dsc_file, target, ctx.settings)
        except DscError as exc:
            logger.error(str(exc))
            sys.exit(1)

        for report in reports:
            log_line("CHK", report.number, report.text)
        logger.info(f"{count} matched lines")

        # Nothing found is a failed check, not an error.
        if count == 0:
            sys.exit(1)
