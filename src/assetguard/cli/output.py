# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Console reporting for CLI commands."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from enum import Enum

from rich.console import Console
from rich.rule import Rule
from rich.text import Text


class Tone(Enum):
    """Status line kinds, each carrying an emoji marker and a colour."""

    INFO = ("ℹ️ ", "cyan")
    OK = ("✅ ", "green")
    WARN = ("⚠️ ", "yellow")
    FAIL = ("❌ ", "red")

    @property
    def marker(self) -> str:
        return self.value[0]

    @property
    def style(self) -> str:
        return self.value[1]


def stdout_is_terminal() -> bool:
    """Return ``True`` when stdout is attached to a terminal."""

    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


@dataclass(slots=True)
class CLIOutput:
    """Status lines, section headers and tables for one command invocation.

    Colour is only emitted when requested and stdout is a terminal, so piped
    output and test runners always receive plain text.
    """

    use_color: bool
    use_emoji: bool
    console: Console = field(init=False, repr=False)

    def __post_init__(self) -> None:
        colored = self.use_color and stdout_is_terminal()
        self.console = Console(
            color_system="auto" if colored else None,
            no_color=not colored,
            emoji=self.use_emoji,
            soft_wrap=True,
        )

    @property
    def colored(self) -> bool:
        return self.console.color_system is not None

    def report(self, tone: Tone, message: str) -> None:
        """Print ``message`` as a single status line of kind ``tone``."""

        text = Text(f"{tone.marker if self.use_emoji else ''}{message}")
        if self.colored:
            text.stylize(tone.style)
        self.console.print(text)

    def info(self, message: str) -> None:
        self.report(Tone.INFO, message)

    def ok(self, message: str) -> None:
        self.report(Tone.OK, message)

    def warn(self, message: str) -> None:
        self.report(Tone.WARN, message)

    def fail(self, message: str) -> None:
        self.report(Tone.FAIL, message)

    def section(self, title: str) -> None:
        if self.colored:
            self.console.print()
            self.console.print(Rule(title))
        else:
            self.console.print(f"\n--- {title} ---", highlight=False)


def configure_logging(verbose: bool) -> None:
    """Send library log records to stderr; ``DEBUG`` when verbose, else ``WARNING``."""

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


__all__ = ["CLIOutput", "Tone", "configure_logging", "stdout_is_terminal"]
