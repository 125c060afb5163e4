"""Console output used as the pipeline's logger.

Output is operator-facing text laid out as bullets:

      • building project              <- action(): one per pipeline step
        Archive path: dist/...        <- info()
        warning: temp zip not removed <- warning()
      ⨯ error: build failed           <- error()

``debug()`` lines (captured tool output) are only shown with ``--debug``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Protocol

__all__ = [
    "Style",
    "ConsoleProtocol",
    "RichConsole",
    "MockConsole",
]


class Style(Enum):
    """Text styles for console output."""

    DEFAULT = auto()
    ACTION = auto()
    SUCCESS = auto()
    ERROR = auto()
    WARNING = auto()
    INFO = auto()
    DEBUG = auto()
    DIM = auto()
    HEADER = auto()

    def __str__(self) -> str:
        return self.name.lower()


class ConsoleProtocol(Protocol):
    """Logging interface accepted by the pipeline and the CLI."""

    def print(self, message: str, style: Style = Style.DEFAULT) -> None: ...

    def action(self, message: str) -> None:
        """Top-level bullet announcing a pipeline step."""
        ...

    def info(self, message: str) -> None: ...

    def success(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def debug(self, message: str) -> None:
        """Verbose detail; dropped unless debug output is enabled."""
        ...

    def header(self, message: str) -> None: ...

    def newline(self) -> None: ...


class RichConsole:
    """Production console backed by Rich."""

    def __init__(self, *, debug: bool = False) -> None:
        # Import Rich lazily to avoid import-time dependency
        from rich.console import Console

        self._console = Console(highlight=False)
        self._debug = debug
        self._style_map = {
            Style.DEFAULT: "",
            Style.ACTION: "bold",
            Style.SUCCESS: "green",
            Style.ERROR: "red bold",
            Style.WARNING: "yellow",
            Style.INFO: "",
            Style.DEBUG: "dim",
            Style.DIM: "dim",
            Style.HEADER: "blue bold",
        }

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        rich_style = self._style_map.get(style, "")
        if rich_style:
            self._console.print(message, style=rich_style, markup=False)
        else:
            self._console.print(message, markup=False)

    def action(self, message: str) -> None:
        self._console.print(f"  [bold]•[/bold] {_escape(message)}")

    def info(self, message: str) -> None:
        self._console.print(f"    {_escape(message)}")

    def success(self, message: str) -> None:
        self._console.print(f"  [green]✓[/green] {_escape(message)}")

    def warning(self, message: str) -> None:
        self._console.print(f"    [yellow]warning:[/yellow] {_escape(message)}")

    def error(self, message: str) -> None:
        self._console.print(f"  [red bold]⨯ error:[/red bold] {_escape(message)}")

    def debug(self, message: str) -> None:
        if not self._debug:
            return
        for line in message.rstrip().splitlines():
            self._console.print(f"      {_escape(line)}", style="dim")

    def header(self, message: str) -> None:
        self._console.print(f"\n[blue bold]{_escape(message)}[/blue bold]")

    def newline(self) -> None:
        self._console.print()


def _escape(text: str) -> str:
    from rich.markup import escape

    return escape(text)


@dataclass
class OutputRecord:
    """A single captured line."""

    message: str
    style: Style


def _empty_outputs() -> list[OutputRecord]:
    return []


@dataclass
class MockConsole:
    """Console that records output for assertions in tests."""

    outputs: list[OutputRecord] = field(default_factory=_empty_outputs)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self.outputs.append(OutputRecord(message, style))

    def action(self, message: str) -> None:
        self.outputs.append(OutputRecord(message, Style.ACTION))

    def info(self, message: str) -> None:
        self.outputs.append(OutputRecord(message, Style.INFO))

    def success(self, message: str) -> None:
        self.outputs.append(OutputRecord(message, Style.SUCCESS))

    def warning(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"warning: {message}", Style.WARNING))

    def error(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"error: {message}", Style.ERROR))

    def debug(self, message: str) -> None:
        self.outputs.append(OutputRecord(message, Style.DEBUG))

    def header(self, message: str) -> None:
        self.outputs.append(OutputRecord(message, Style.HEADER))

    def newline(self) -> None:
        self.outputs.append(OutputRecord("", Style.DEFAULT))

    # Test helpers

    @property
    def messages(self) -> list[str]:
        return [o.message for o in self.outputs]

    @property
    def text(self) -> str:
        return "\n".join(self.messages)

    def actions(self) -> list[str]:
        """Step names announced so far, in order."""
        return [o.message for o in self.outputs if o.style == Style.ACTION]

    def has_error(self) -> bool:
        return any(o.style == Style.ERROR for o in self.outputs)

    def has_warning(self) -> bool:
        return any(o.style == Style.WARNING for o in self.outputs)

    def find(self, substring: str) -> list[OutputRecord]:
        return [o for o in self.outputs if substring in o.message]
