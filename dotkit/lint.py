import os
import shutil
import signal
import subprocess
import tempfile
from collections.abc import Callable
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import typer
from rich.markup import escape
from rich.table import Table

from dotkit.config import LintConfig, load_lint_config
from dotkit.constants import STEP_SUMMARY_TITLE
from dotkit.errors import ExternalToolError, ProjectError
from dotkit.output import console, err_console, info, plain, section_title, warning
from dotkit.tools import capture, run, verify_required_tools

LINT_COMMAND = 'dotkit lint'
PASSED = '✅'
FAILED = '❌'


class Tool(Enum):
    """Formatters and linters, with the executable that must be installed for each."""

    NIXFMT = ('nixfmt', 'treefmt', 'NIXFMT (FORMATTING)')
    RUBOCOP = ('rubocop', 'rubocop', 'RUBOCOP (LINTING & FORMATTING)')
    MDFORMAT = ('mdformat', 'mdformat', 'MDFORMAT (FORMATTING)')
    SHELLCHECK = ('shellcheck', 'shellcheck', 'SHELLCHECK (LINTING)')
    SHFMT = ('shfmt', 'shfmt', 'SHFMT (FORMATTING)')

    def __init__(self, label: str, executable: str, title: str):
        self.label = label
        self.executable = executable
        self.title = title


@dataclass(frozen=True)
class LintTarget:
    tool: Tool
    file: str


@dataclass(frozen=True)
class ToolOutcome:
    target: LintTarget
    returncode: int

    @property
    def passed(self) -> bool:
        return self.returncode == 0


@dataclass(frozen=True)
class LintReport:
    outcomes: tuple[ToolOutcome, ...]

    @property
    def passed(self) -> bool:
        return all(o.passed for o in self.outcomes)

    @property
    def exit_code(self) -> int:
        return 0 if self.passed else 1


def build_targets(config: LintConfig) -> list[LintTarget]:
    """Lint targets in run order."""
    targets = []
    if config.nix_flake:
        targets.append(LintTarget(Tool.NIXFMT, config.nix_flake))
    if config.brewfile:
        targets.append(LintTarget(Tool.RUBOCOP, config.brewfile))
    if config.readme:
        targets.append(LintTarget(Tool.MDFORMAT, config.readme))
    for script in config.shell_scripts:
        targets.append(LintTarget(Tool.SHELLCHECK, script))
    for script in config.shell_scripts:
        targets.append(LintTarget(Tool.SHFMT, script))
    return targets


def required_tools(targets: list[LintTarget]) -> list[str]:
    """Executables needed by the targets, in first-use order."""
    tools = []
    for target in targets:
        if target.tool.executable not in tools:
            tools.append(target.tool.executable)
    return tools


# Project checks
# ---------------


def in_nix_dev_shell() -> bool:
    """IN_NIX_SHELL is only set inside Nix flake dev shells."""
    return os.environ.get('IN_NIX_SHELL', '') in {'pure', 'impure'}


def nix_shell_message(ci: bool) -> str:
    prefix = '::error::' if ci else 'Error:'
    command = f'{LINT_COMMAND} --ci' if ci else LINT_COMMAND
    return (
        f'{prefix} {LINT_COMMAND} must be run inside a Nix flake development shell.\n'
        '\n'
        'To enter the flake shell, run:\n'
        '  $ nix develop\n'
        f'  $ {command}\n'
        '\n'
        'Alternatively, you can run this ad hoc without entering the shell:\n'
        f'  $ nix develop .#adhoc --command {command}'
    )


def ensure_nix_shell(ci: bool = False):
    if not in_nix_dev_shell():
        raise ProjectError(nix_shell_message(ci))


def get_project_root() -> Path:
    """Top level of the enclosing git repository."""
    try:
        root = capture(['git', 'rev-parse', '--show-toplevel'])
    except ExternalToolError as e:
        raise ProjectError('Could not determine project root directory (are you in a Git repository?)') from e
    if not root:
        raise ProjectError('Could not determine project root directory (are you in a Git repository?)')
    return Path(root)


def require_files(root: Path, files: list[str]):
    """Raise ProjectError listing every tracked file missing from the project root."""
    missing = [f for f in files if not (root / f).is_file()]
    if missing:
        lines = [f'The following required file(s) are missing in the project root ({root.name}):']
        lines.extend(f'\t{f}' for f in missing)
        lines.append('Linting & formatting aborted.')
        raise ProjectError('\n'.join(lines))


# Snapshots & diffs
# ------------------


@contextmanager
def file_snapshot(path: Path, root: Path):
    """Yield a temporary copy of path inside root. The copy is always removed."""
    fd, name = tempfile.mkstemp(dir=root, suffix=f'.{path.name}')
    os.close(fd)
    snapshot = Path(name)
    try:
        shutil.copyfile(path, snapshot)
        yield snapshot
    finally:
        snapshot.unlink(missing_ok=True)


@contextmanager
def exit_on_sigterm():
    """Turn SIGTERM into SystemExit so pending cleanup still runs."""

    def handler(signum, frame):
        raise SystemExit(128 + signum)

    previous = signal.signal(signal.SIGTERM, handler)
    try:
        yield
    finally:
        signal.signal(signal.SIGTERM, previous)


def git_diff(snapshot: Path, file: str, root: Path) -> str:
    """Diff the pre-run snapshot against the file as the tool left it."""
    env = {**os.environ, 'GIT_CONFIG_GLOBAL': os.devnull}
    cmd = ['git', 'diff', '--color=always', '--unified=0', '--no-index', str(snapshot), file]
    try:
        result = subprocess.run(cmd, cwd=root, env=env, capture_output=True, text=True)
    except OSError as e:
        raise ExternalToolError(cmd, stderr=str(e)) from e
    # --no-index exits 1 when the files differ
    return result.stdout.rstrip('\n')


def print_diff_section(snapshot: Path, target: LintTarget, root: Path, ci: bool):
    file = target.file
    tool = target.tool.label
    diff = git_diff(snapshot, file, root)
    message = f'{tool} detected formatting/linting issues in {file}. See diff below ↓'

    if ci:
        typer.echo(f'::error file={file}::{message}\n', err=True)
        typer.echo(f"::group::📝 [Diff] → '{file}'", err=True)
        typer.echo(diff, err=True)
        typer.echo('::endgroup::\n', err=True)
    else:
        err_console.print(f'[red]Error: {escape(message)}[/red]\n', highlight=False)
        typer.echo(f"📝 [Diff] → '{file}'", err=True)
        typer.echo('─' * 29, err=True)
        typer.echo(f'{diff}\n', err=True)


# Runners
# --------


def nixfmt_runner(file: str, root: Path, ci: bool) -> int:
    return run(['nix', 'fmt', '--', '--ci', '--quiet', file], cwd=root)


def rubocop_runner(file: str, root: Path, ci: bool) -> int:
    return run(
        ['bundle', 'exec', 'rubocop', '--display-time', '--autocorrect', '--fail-level', 'autocorrect', '--', file],
        cwd=root,
    )


def mdformat_runner(file: str, root: Path, ci: bool) -> int:
    status = run(['mdformat', '--check', file], cwd=root)
    run(['mdformat', file], cwd=root)
    return status


def gcc_to_annotation(line: str) -> str:
    """Convert one `shellcheck --format=gcc` line into a GitHub workflow command."""
    parts = [p.strip() for p in line.split(':', 4)]
    if len(parts) < 5:
        return line
    f, lineno, column, severity, message = parts
    if severity != 'error':
        severity = 'warning'
    return f'::{severity} file={f},line={lineno},col={column}::{f}:{lineno}:{column}: {severity}: {message}'


def shellcheck_runner(file: str, root: Path, ci: bool) -> int:
    if not ci:
        return run(['shellcheck', file], cwd=root)

    cmd = ['shellcheck', '--format=gcc', file]
    try:
        result = subprocess.run(cmd, cwd=root, stdout=subprocess.PIPE, stderr=subprocess.STDOUT, text=True)
    except OSError as e:
        raise ExternalToolError(cmd, stderr=str(e)) from e
    for line in result.stdout.splitlines():
        if line.strip():
            plain(gcc_to_annotation(line))
    return result.returncode


def shfmt_runner(file: str, root: Path, ci: bool) -> int:
    flags = ['-i', '2', '-ci', '-s']
    status = run(['shfmt', *flags, '--diff', file], cwd=root, quiet=True)
    run(['shfmt', *flags, '--write', file], cwd=root)
    return status


RUNNERS: dict[Tool, Callable[[str, Path, bool], int]] = {
    Tool.NIXFMT: nixfmt_runner,
    Tool.RUBOCOP: rubocop_runner,
    Tool.MDFORMAT: mdformat_runner,
    Tool.SHELLCHECK: shellcheck_runner,
    Tool.SHFMT: shfmt_runner,
}


def tool_info(tool: Tool, root: Path) -> tuple[str, str]:
    """Return (path, version) for a tool, or 'unknown' where it cannot be determined."""
    if tool is Tool.RUBOCOP:
        path_cmd = ['bundle', 'exec', 'which', 'rubocop']
        version_cmd = ['bundle', 'exec', 'rubocop', '--version']
    else:
        path_cmd = None
        version_cmd = [tool.executable, '--version']

    if path_cmd:
        try:
            path = capture(path_cmd, cwd=root)
        except ExternalToolError:
            path = ''
    else:
        path = shutil.which(tool.executable) or ''

    try:
        version = capture(version_cmd, cwd=root).splitlines()[0]
    except (ExternalToolError, IndexError):
        version = ''

    return path or 'unknown', version or 'unknown'


def print_tool_info(tool: Tool, root: Path):
    path, version = tool_info(tool, root)
    info('📌 [Info]')
    info('─' * 11)
    plain(f'{tool.executable} path: {path}')
    plain(f'{tool.executable} version: {version}')
    info('')


def run_target(target: LintTarget, root: Path, ci: bool = False) -> int:
    """Run one tool against one file. Returns the tool's exit status."""
    section_title(target.tool.title)
    print_tool_info(target.tool, root)

    with file_snapshot(root / target.file, root) as snapshot:
        info('🛠️ [Execution]')
        info('─' * 16)
        info(f'Running {target.tool.label} on {target.file}...')

        status = RUNNERS[target.tool](target.file, root, ci)
        info('')

        if status != 0:
            print_diff_section(snapshot, target, root, ci)

    return status


# Summary
# --------


def summary_rows(report: LintReport) -> list[tuple[str, str, str]]:
    return [
        (o.target.tool.label, Path(o.target.file).name, PASSED if o.passed else FAILED)
        for o in report.outcomes
    ]


def markdown_summary(report: LintReport) -> str:
    lines = ['| Tool | File | Result |', '| --- | --- | --- |']
    for tool, file, result in summary_rows(report):
        lines.append(f'| {tool} | `{file}` | {result} |')
    return '\n'.join(lines) + '\n'


def write_step_summary(report: LintReport):
    """Append the markdown summary to the GitHub Actions job summary."""
    path = os.environ.get('GITHUB_STEP_SUMMARY')
    if not path:
        warning('GITHUB_STEP_SUMMARY is not set, skipping job summary')
        return
    with open(path, 'a') as f:
        f.write(f'{STEP_SUMMARY_TITLE}\n\n')
        f.write(markdown_summary(report))


def print_summary(report: LintReport, ci: bool = False) -> int:
    """Print the pass/fail table. Returns the process exit code."""
    section_title('SUMMARY')

    if ci:
        write_step_summary(report)

    table = Table(box=None, pad_edge=False, header_style='bold')
    table.add_column('Tool')
    table.add_column('File')
    table.add_column('Result')
    for row in summary_rows(report):
        table.add_row(*row)
    console.print(table)

    return report.exit_code


def run_lint(ci: bool = False, root: Path | None = None) -> LintReport:
    """Check preconditions, then run every configured tool over its file."""
    if root is None:
        root = get_project_root()
    ensure_nix_shell(ci)

    config = load_lint_config(root)
    targets = build_targets(config)
    require_files(root, config.files())
    verify_required_tools(required_tools(targets), cwd=root)

    outcomes = []
    with exit_on_sigterm():
        for target in targets:
            outcomes.append(ToolOutcome(target, run_target(target, root, ci)))
    return LintReport(tuple(outcomes))
