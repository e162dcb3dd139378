# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""``resolve`` command: load the descriptor and asset index for a version."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer
from rich import box
from rich.table import Table

from ...errors import AssetGuardError, OperationCancelledError
from ...session import IndexSession
from ..shared import (
    CLIError,
    CLIOutput,
    ColorOption,
    CommonDirOption,
    EmojiOption,
    JsonOption,
    RootOption,
    VerboseOption,
    build_overrides,
    exit_with,
    load_config,
)


def resolve_command(
    version: Annotated[str, typer.Argument(help="Version id to resolve, e.g. 1.16.5.")],
    root: RootOption = Path("."),
    common_dir: CommonDirOption = None,
    emit_json: JsonOption = False,
    use_color: ColorOption = True,
    use_emoji: EmojiOption = True,
    verbose: VerboseOption = False,
) -> None:
    """Resolve VERSION against the version manifest and the local cache."""

    output = CLIOutput(use_color=use_color, use_emoji=use_emoji)
    try:
        config = load_config(root, build_overrides(common_dir=common_dir), verbose=verbose)
        session = IndexSession(version, config=config)
        try:
            session.init()
        except KeyboardInterrupt as exc:
            session.cancel()
            raise CLIError("Resolution cancelled.", exit_code=130) from exc
        except OperationCancelledError as exc:
            raise CLIError("Resolution cancelled.", exit_code=130) from exc
        except AssetGuardError as exc:
            raise CLIError(str(exc)) from exc
    except CLIError as exc:
        raise exit_with(output, exc) from exc

    resolved = session.resolved
    summary = {
        "version": resolved.descriptor.id,
        "manifest_available": resolved.manifest_available,
        "descriptor_source": resolved.descriptor_source.value,
        "descriptor_path": str(session.layout.version_json_path(version)),
        "asset_index": resolved.descriptor.asset_index.id,
        "asset_index_source": resolved.asset_catalog_source.value,
        "libraries": len(resolved.descriptor.libraries),
        "assets": len(resolved.asset_catalog.objects),
    }
    if emit_json:
        typer.echo(json.dumps(summary, indent=2))
        return

    table = Table(title=f"Version {resolved.descriptor.id}", box=box.SIMPLE)
    table.add_column("Field", style="bold")
    table.add_column("Value", overflow="fold")
    for key, value in summary.items():
        table.add_row(key.replace("_", " "), str(value))
    output.console.print(table)
    output.info(f"Cache root: {session.layout.common_dir}")
    if not resolved.manifest_available:
        output.warn("Version manifest unreachable; using the cached descriptor without verification.")


__all__ = ["resolve_command"]
