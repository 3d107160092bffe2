import shutil
import subprocess
from pathlib import Path

from dotkit.errors import ExternalToolError, MissingToolError


def has_tool(tool: str) -> bool:
    """Check if an executable is on PATH."""
    return shutil.which(tool) is not None


def has_bundled_rubocop(cwd: Path | None = None) -> bool:
    """Check that RuboCop is available through Bundler."""
    try:
        result = subprocess.run(
            ['bundle', 'exec', 'rubocop', '--version'],
            cwd=cwd,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
    except OSError:
        return False
    return result.returncode == 0


def verify_required_tools(tools: list[str], cwd: Path | None = None):
    """Raise MissingToolError naming every tool that is unavailable."""
    missing = []
    for tool in tools:
        if tool == 'rubocop':
            available = has_bundled_rubocop(cwd)
        else:
            available = has_tool(tool)
        if not available:
            missing.append(tool)

    if missing:
        raise MissingToolError(missing)


def capture(cmd: list[str], cwd: Path | None = None) -> str:
    """Run a command and return its stripped stdout. Raises ExternalToolError on failure."""
    try:
        result = subprocess.run(cmd, cwd=cwd, capture_output=True, text=True)
    except OSError as e:
        raise ExternalToolError(cmd, stderr=str(e)) from e
    if result.returncode != 0:
        raise ExternalToolError(cmd, result.returncode, result.stderr)
    return result.stdout.strip()


def run(cmd: list[str], cwd: Path | None = None, quiet: bool = False) -> int:
    """Run a command attached to the terminal and return its exit status."""
    kwargs = {}
    if quiet:
        kwargs = {'stdout': subprocess.DEVNULL, 'stderr': subprocess.DEVNULL}
    try:
        result = subprocess.run(cmd, cwd=cwd, **kwargs)
    except OSError as e:
        raise ExternalToolError(cmd, stderr=str(e)) from e
    return result.returncode
