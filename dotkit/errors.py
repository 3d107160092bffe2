from pathlib import Path


# Tools that are not installed through Homebrew
REMEDIATION = {
    'rubocop': 'bundle install',
}

MISSING_TOOL_TEMPLATE = """\
Oops! Looks like you don't have {tool} installed.

Please install it and then try again (e.g. {hint})"""


class DotkitError(Exception):
    """Base class for fatal dotkit errors."""


class MissingToolError(DotkitError):
    """One or more required executables are not on PATH."""

    def __init__(self, tools: list[str]):
        self.tools = list(tools)
        super().__init__(f'Missing required tool(s): {", ".join(self.tools)}')


class MissingManifestError(DotkitError):
    """The Brewfile does not exist at the resolved path."""

    def __init__(self, path: Path):
        self.path = Path(path)
        super().__init__(f'Brewfile not found: {self.path}')


class ExternalToolError(DotkitError):
    """A subprocess could not be started or exited non-zero."""

    def __init__(self, command: list[str], returncode: int | None = None, stderr: str = ''):
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr.strip()

        cmd = ' '.join(self.command)
        if returncode is None:
            msg = f'Could not run: {cmd}'
        else:
            msg = f'Command failed with exit code {returncode}: {cmd}'
        if self.stderr:
            msg = f'{msg}\n{self.stderr}'
        super().__init__(msg)


class ProjectError(DotkitError):
    """The project is not in a state where linting can run."""


def missing_tool_message(tool: str) -> str:
    """Remediation text printed for a missing executable."""
    hint = REMEDIATION.get(tool, f'brew install {tool}')
    return MISSING_TOOL_TEMPLATE.format(tool=tool, hint=hint)
