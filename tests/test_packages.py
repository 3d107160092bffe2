import pytest

from dotkit.errors import ExternalToolError, MissingToolError
from dotkit.packages import list_all_installed, list_leaves


def test_list_leaves(fake_brew):
    runner = fake_brew(leaves='htop\ngit\n\ngit\n')

    assert list_leaves() == ['git', 'htop']
    assert runner.calls == [['brew', 'leaves']]


def test_list_all_installed_splits_on_whitespace(fake_brew):
    runner = fake_brew(formulae='git  htop\nwget\tgit\nopenssl@3\n')

    assert list_all_installed() == ['git', 'htop', 'openssl@3', 'wget']
    assert runner.calls == [['brew', 'list', '--formula']]


def test_empty_output(fake_brew):
    fake_brew()

    assert list_leaves() == []
    assert list_all_installed() == []


def test_nonzero_exit_raises(fake_brew):
    fake_brew(leaves_code=1)

    with pytest.raises(ExternalToolError) as exc:
        list_leaves()
    assert exc.value.returncode == 1
    assert exc.value.command == ['brew', 'leaves']
    assert 'boom' in str(exc.value)


def test_brew_not_on_path(no_brew):
    with pytest.raises(MissingToolError) as exc:
        list_all_installed()
    assert exc.value.tools == ['brew']
    assert no_brew.calls == []


def test_brew_cannot_start(monkeypatch):
    def broken(cmd, **kwargs):
        raise PermissionError(13, 'Permission denied')

    monkeypatch.setattr('dotkit.tools.shutil.which', lambda tool: '/opt/homebrew/bin/brew')
    monkeypatch.setattr('dotkit.tools.subprocess.run', broken)

    with pytest.raises(ExternalToolError) as exc:
        list_leaves()
    assert exc.value.returncode is None
