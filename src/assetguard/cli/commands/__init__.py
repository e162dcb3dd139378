# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command registry."""

from __future__ import annotations

import typer

from .config import config_app
from .resolve import resolve_command
from .validate import validate_command

__all__ = ["register_commands"]


def register_commands(app: typer.Typer) -> None:
    """Register built-in CLI commands on ``app``.

    Args:
        app: Typer application receiving command registrations.
    """

    app.command("resolve")(resolve_command)
    app.command("validate")(validate_command)
    app.add_typer(config_app, name="config")
