"""Console utility functions for formatting and output."""

from typing import Any, Iterable, Optional

from rich.console import Console
from rich.table import Table
from rich.theme import Theme


# Status symbols for consistent iconography
STATUS_SYMBOLS = {
    'success': '✨',
    'sparkles': '✨',
    'running': '🚀',
    'gear': '⚙️',
    'info': '💡',
    'warning': '⚠️',
    'error': '❌',
    'check': '✅',
    'list': '📋',
    'preview': '👀',
}

_THEME = Theme({
    "info": "cyan",
    "warning": "yellow",
    "error": "bold red",
    "success": "bold green",
    "highlight": "bold magenta",
    "muted": "dim white",
})

_console: Optional[Console] = None


def _get_console() -> Console:
    """Get the shared Rich console, created on first use."""
    global _console
    if _console is None:
        _console = Console(theme=_THEME, highlight=False)
    return _console


def _rich_echo(message: str, color: str = "white", bold: bool = False, symbol: str = None):
    """Echo message with Rich formatting."""
    if symbol and symbol in STATUS_SYMBOLS:
        message = f"{STATUS_SYMBOLS[symbol]} {message}"

    style = f"bold {color}" if bold else color
    _get_console().print(message, style=style, markup=False)


def _rich_success(message: str, symbol: str = None):
    """Display success message with green color and bold styling."""
    _rich_echo(message, color="green", symbol=symbol, bold=True)


def _rich_error(message: str, symbol: str = None):
    """Display error message with red color."""
    _rich_echo(message, color="red", symbol=symbol)


def _rich_warning(message: str, symbol: str = None):
    """Display warning message with yellow color."""
    _rich_echo(message, color="yellow", symbol=symbol)


def _rich_info(message: str, symbol: str = None):
    """Display info message with blue color."""
    _rich_echo(message, color="blue", symbol=symbol)


def _rich_blank_line():
    """Print a blank line."""
    _get_console().print()


def _create_renames_table(rows: Iterable[Any], title: str = "Renamed assets") -> Table:
    """Create a Rich table of ``(unit, old name, new name)`` rows."""
    table = Table(title=f"📋 {title}", show_header=True, header_style="bold cyan")
    table.add_column("Unit", style="bold white")
    table.add_column("Old name", style="white")
    table.add_column("New name", style="green")

    for row in rows:
        table.add_row(*(str(cell) for cell in row))
    return table


def _print_table(table: Table):
    """Print a table on the shared console."""
    _get_console().print(table)

