# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared utilities for CLI commands (options, configuration, errors)."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

import typer

from ..config import Config, ConfigError
from ..config_loader import ConfigLoader
from .output import CLIOutput, configure_logging

RootOption = Annotated[
    Path,
    typer.Option("--root", "-r", help="Directory searched for pyproject.toml / assetguard.toml."),
]
CommonDirOption = Annotated[
    Path | None,
    typer.Option("--common-dir", help="Cache root holding versions/, assets/ and libraries/."),
]
JobsOption = Annotated[
    int | None,
    typer.Option("--jobs", "-j", min=1, help="Worker threads used for hash verification."),
]
JsonOption = Annotated[bool, typer.Option("--json", help="Emit machine readable JSON.")]
ColorOption = Annotated[bool, typer.Option("--color/--no-color", help="Toggle ANSI colour output.")]
EmojiOption = Annotated[bool, typer.Option("--emoji/--no-emoji", help="Toggle emoji in output.")]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Print debug logging to stderr.")]


class CLIError(RuntimeError):
    """Error raised when a CLI command fails and should exit with a status code."""

    def __init__(self, message: str, *, exit_code: int = 1) -> None:
        super().__init__(message)
        self.exit_code = exit_code


def build_overrides(*, common_dir: Path | None = None, jobs: int | None = None) -> dict[str, Any]:
    """Translate CLI options into a configuration override fragment."""

    overrides: dict[str, Any] = {}
    if common_dir is not None:
        overrides["common_dir"] = str(common_dir)
    if jobs is not None:
        overrides["validation"] = {"jobs": jobs}
    return overrides


def load_config(root: Path, overrides: dict[str, Any], *, verbose: bool = False) -> Config:
    """Load layered configuration for ``root`` applying CLI ``overrides``.

    Raises:
        CLIError: If the configuration is invalid.
    """

    configure_logging(verbose)
    try:
        return ConfigLoader.for_root(root).load(overrides)
    except ConfigError as exc:
        raise CLIError(f"Configuration invalid: {exc}") from exc


def exit_with(output: CLIOutput, error: CLIError) -> typer.Exit:
    """Report ``error`` and return the :class:`typer.Exit` to raise."""

    output.fail(str(error))
    return typer.Exit(code=error.exit_code)


__all__ = [
    "CLIError",
    "CLIOutput",
    "ColorOption",
    "CommonDirOption",
    "EmojiOption",
    "JobsOption",
    "JsonOption",
    "RootOption",
    "VerboseOption",
    "build_overrides",
    "exit_with",
    "load_config",
]
