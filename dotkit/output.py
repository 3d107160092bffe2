from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

console = Console()
err_console = Console(stderr=True)


def info(msg: str):
    console.print(escape(msg))


def plain(msg: str):
    """Print text verbatim: no markup, highlighting or wrapping."""
    console.print(msg, markup=False, emoji=False, highlight=False, soft_wrap=True)


def plain_err(msg: str):
    err_console.print(msg, markup=False, emoji=False, highlight=False, soft_wrap=True)


def warning(msg: str):
    err_console.print(f'[yellow]![/yellow] {escape(msg)}', soft_wrap=True)


def error(msg: str):
    err_console.print(f'[red]✗[/red] {escape(msg)}', soft_wrap=True)


def section_title(title: str):
    console.print(Panel.fit(escape(title), box=box.HEAVY, padding=(0, 2)))
    console.print()
