from pathlib import Path

import typer

from dotkit import __version__
from dotkit.brewfile import parse_brewfile
from dotkit.constants import BREW, DEFAULT_BREWFILE
from dotkit.errors import DotkitError, MissingManifestError, MissingToolError, missing_tool_message
from dotkit.lint import print_summary, run_lint
from dotkit.output import error, plain_err
from dotkit.packages import list_all_installed, list_leaves
from dotkit.reconcile import reconcile
from dotkit.report import print_diff
from dotkit.tools import verify_required_tools

app = typer.Typer(
    name='dotkit',
    help='Tooling for a macOS dotfiles repository',
    context_settings={
        'help_option_names': ['--help', '-h'],
    },
)


def report_missing_tools(e: MissingToolError):
    for tool in e.tools:
        plain_err(f'{missing_tool_message(tool)}\n')


def fail(e: DotkitError):
    """Print a fatal error on stderr and exit 1."""
    if isinstance(e, MissingToolError):
        report_missing_tools(e)
    elif str(e).startswith('::'):
        # GitHub workflow commands must start the line
        plain_err(str(e))
    else:
        error(str(e))
    raise typer.Exit(1)


def resolve_brewfile(brewfile: Path | None) -> Path:
    """Expand the Brewfile argument and make sure the file exists."""
    path = (brewfile or DEFAULT_BREWFILE).expanduser()
    if not path.is_file():
        raise MissingManifestError(path)
    return path


def version_callback(value: bool):
    if value:
        typer.echo(f'dotkit {__version__}')
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False, '--version', '-v', callback=version_callback, is_eager=True, help='Show version'
    ),
):
    """Tooling for a macOS dotfiles repository."""
    pass


@app.command('brew-sync-check')
def brew_sync_check(
    brewfile: Path | None = typer.Argument(
        None, help='Brewfile to compare against (default: ~/.Brewfile)', show_default=False
    ),
):
    """Show formulae that are only in the Brewfile or only on the system."""
    try:
        verify_required_tools([BREW])
        path = resolve_brewfile(brewfile)

        declared = parse_brewfile(path)
        leaves = list_leaves()
        all_installed = list_all_installed()
    except DotkitError as e:
        fail(e)

    result = reconcile(declared, leaves, all_installed)
    raise typer.Exit(print_diff(result))


@app.command()
def lint(
    ci: bool = typer.Option(False, '--ci', help='Emit GitHub Actions annotations and a job summary'),
):
    """Run the formatters and linters over the tracked dotfiles."""
    try:
        report = run_lint(ci)
    except DotkitError as e:
        fail(e)

    raise typer.Exit(print_summary(report, ci))


def standalone_brew_sync_check() -> typer.Typer:
    """Single-command app behind the `brew-sync-check` script."""
    standalone = typer.Typer(
        name='brew-sync-check',
        add_completion=False,
        context_settings={
            'help_option_names': ['--help', '-h'],
        },
    )
    standalone.command()(brew_sync_check)
    return standalone


def brew_sync_check_main():
    standalone_brew_sync_check()()


def main():
    app()


if __name__ == '__main__':
    main()
