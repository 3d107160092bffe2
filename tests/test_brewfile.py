import pytest

from dotkit.brewfile import parse_brewfile, parse_brewfile_text
from dotkit.errors import MissingManifestError

BREWFILE = '''\
# Taps
tap "homebrew/bundle"

brew "git"
brew 'wget'
  brew "htop", restart_service: :changed
brew "git"
cask "firefox"
mas "Xcode", id: 497799835
vscode "ms-python.python"
# brew "commented-out"
brewery "not-a-formula"
'''


def test_parse_extracts_brew_entries_only():
    assert parse_brewfile_text(BREWFILE) == ['git', 'htop', 'wget']


def test_parse_deduplicates():
    assert parse_brewfile_text('brew "jq"\nbrew "jq"\nbrew \'jq\'\n') == ['jq']


def test_parse_is_case_sensitive():
    assert parse_brewfile_text('brew "Foo"\nbrew "foo"\n') == ['Foo', 'foo']


def test_parse_sorts_regardless_of_order():
    assert parse_brewfile_text('brew "zsh"\nbrew "bat"\nbrew "fd"\n') == ['bat', 'fd', 'zsh']


def test_parse_keeps_tap_qualified_names():
    assert parse_brewfile_text('brew "hashicorp/tap/terraform"\n') == ['hashicorp/tap/terraform']


def test_parse_empty():
    assert parse_brewfile_text('') == []
    assert parse_brewfile_text('# nothing here\n\n') == []


def test_parse_rejects_mismatched_quotes():
    assert parse_brewfile_text('brew "git\'\n') == []


def test_parse_brewfile_reads_file(tmp_path):
    path = tmp_path / 'Brewfile'
    path.write_text(BREWFILE)
    assert parse_brewfile(path) == ['git', 'htop', 'wget']


def test_parse_brewfile_missing(tmp_path):
    path = tmp_path / 'nope'
    with pytest.raises(MissingManifestError) as exc:
        parse_brewfile(path)
    assert exc.value.path == path
    assert str(path) in str(exc.value)
