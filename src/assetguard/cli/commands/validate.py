# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""``validate`` command: list the artifacts a version still needs."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer
from rich import box
from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn
from rich.table import Table

from ...errors import AssetGuardError, OperationCancelledError
from ...models import ValidationResult
from ...session import IndexSession
from ..output import stdout_is_terminal
from ..shared import (
    CLIError,
    CLIOutput,
    ColorOption,
    CommonDirOption,
    EmojiOption,
    JobsOption,
    JsonOption,
    RootOption,
    VerboseOption,
    build_overrides,
    exit_with,
    load_config,
)

DetailsOption = Annotated[bool, typer.Option("--details", help="List every artifact that needs downloading.")]


def validate_command(
    version: Annotated[str, typer.Argument(help="Version id to validate, e.g. 1.16.5.")],
    root: RootOption = Path("."),
    common_dir: CommonDirOption = None,
    jobs: JobsOption = None,
    emit_json: JsonOption = False,
    details: DetailsOption = False,
    use_color: ColorOption = True,
    use_emoji: EmojiOption = True,
    verbose: VerboseOption = False,
) -> None:
    """Verify every artifact of VERSION and report those missing or corrupt."""

    output = CLIOutput(use_color=use_color, use_emoji=use_emoji)
    try:
        config = load_config(root, build_overrides(common_dir=common_dir, jobs=jobs), verbose=verbose)
        session = IndexSession(version, config=config)
        try:
            session.init()
            result = _validate_with_progress(session, output.console, show=not emit_json and stdout_is_terminal())
        except KeyboardInterrupt as exc:
            session.cancel()
            raise CLIError("Validation cancelled.", exit_code=130) from exc
        except OperationCancelledError as exc:
            raise CLIError("Validation cancelled.", exit_code=130) from exc
        except AssetGuardError as exc:
            raise CLIError(str(exc)) from exc
    except CLIError as exc:
        raise exit_with(output, exc) from exc

    if emit_json:
        payload = {key: [item.model_dump(mode="json") for item in items] for key, items in result.as_mapping().items()}
        typer.echo(json.dumps(payload, indent=2))
        return
    _render_summary(result, output, details=details)
    if result.total:
        output.warn(f"{result.total} artifact(s) for {version} need downloading.")
    else:
        output.ok(f"All artifacts for {version} are present and valid.")


def _validate_with_progress(session: IndexSession, console: Console, *, show: bool) -> ValidationResult:
    progress = Progress(
        TextColumn("Verifying"),
        BarColumn(),
        MofNCompleteColumn(),
        console=console,
        transient=True,
        disable=not show,
    )
    with progress:
        task = progress.add_task("verify", total=None)

        def _advance(completed: int, total: int) -> None:
            progress.update(task, completed=completed, total=total)

        return session.validate(on_progress=_advance)


def _render_summary(result: ValidationResult, output: CLIOutput, *, details: bool) -> None:
    table = Table(title="Artifacts to download", box=box.SIMPLE)
    table.add_column("Category", style="bold")
    table.add_column("Count", justify="right")
    table.add_column("Bytes", justify="right")
    for category, items in result.as_mapping().items():
        table.add_row(category, str(len(items)), str(sum(item.size for item in items)))
    output.console.print(table)
    if not details or not result.total:
        return
    output.section("Details")
    for category, items in result.as_mapping().items():
        for item in items:
            output.console.print(f"{category}: {item.id} -> {item.path}", highlight=False)


__all__ = ["validate_command"]
