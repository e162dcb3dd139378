# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""``config`` command group."""

from __future__ import annotations

import json
from pathlib import Path

import typer

from ..shared import CLIError, CLIOutput, CommonDirOption, JobsOption, RootOption, build_overrides, exit_with, load_config

config_app = typer.Typer(name="config", help="Inspect assetguard configuration.", no_args_is_help=True)


@config_app.command("show")
def show_config(
    root: RootOption = Path("."),
    common_dir: CommonDirOption = None,
    jobs: JobsOption = None,
) -> None:
    """Print the effective configuration as JSON."""

    try:
        config = load_config(root, build_overrides(common_dir=common_dir, jobs=jobs))
    except CLIError as exc:
        raise exit_with(CLIOutput(use_color=False, use_emoji=False), exc) from exc
    typer.echo(json.dumps(config.to_dict(), indent=2))


__all__ = ["config_app"]
