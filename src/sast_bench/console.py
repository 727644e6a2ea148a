"""Shared Rich console for sast-bench CLI output.

Messages often embed result paths and rule ids, so they are printed
literally: no markup parsing and no automatic highlighting.
"""

from rich.console import Console

console = Console(highlight=False)

STYLES = {
    "error": "bold red",
    "success": "green",
    "warning": "yellow",
}


def message(text: str, level: str, console: Console = console) -> None:
    """Print ``text`` in the style of ``level`` (one of STYLES)."""
    console.print(text, style=STYLES[level], markup=False, highlight=False)


def error(text: str, console: Console = console) -> None:
    message(text, "error", console=console)


def success(text: str, console: Console = console) -> None:
    message(text, "success", console=console)


def warning(text: str, console: Console = console) -> None:
    message(text, "warning", console=console)
