import subprocess

import pytest


class FakeRunner:
    """Stand-in for subprocess.run that answers from a table of canned results."""

    def __init__(self, responses: dict[tuple[str, ...], tuple[int, str]]):
        self.responses = responses
        self.calls = []

    def __call__(self, cmd, *args, **kwargs):
        self.calls.append(list(cmd))
        key = tuple(cmd)
        if key not in self.responses:
            raise FileNotFoundError(cmd[0])
        returncode, stdout = self.responses[key]
        return subprocess.CompletedProcess(cmd, returncode, stdout=stdout, stderr='boom' if returncode else '')


@pytest.fixture
def fake_brew(monkeypatch):
    """Install a fake brew on PATH. Returns a function that sets its output."""

    def install(leaves='', formulae='', leaves_code=0, formulae_code=0):
        runner = FakeRunner({
            ('brew', 'leaves'): (leaves_code, leaves),
            ('brew', 'list', '--formula'): (formulae_code, formulae),
        })
        monkeypatch.setattr('dotkit.tools.shutil.which', lambda tool: f'/opt/homebrew/bin/{tool}')
        monkeypatch.setattr('dotkit.tools.subprocess.run', runner)
        return runner

    return install


@pytest.fixture
def no_brew(monkeypatch):
    runner = FakeRunner({})
    monkeypatch.setattr('dotkit.tools.shutil.which', lambda tool: None)
    monkeypatch.setattr('dotkit.tools.subprocess.run', runner)
    return runner
