import re
from pathlib import Path

from dotkit.errors import MissingManifestError

# brew "name" or brew 'name', optionally followed by options
BREW_LINE = re.compile(r"""^\s*brew\s+(['"])([^'"]+)\1""")


def parse_brewfile_text(text: str) -> list[str]:
    """Extract formula names from Brewfile contents.

    Only `brew` entries count. Taps, casks, mas/vscode entries, comments and
    blank lines are ignored. Returns sorted, de-duplicated names.
    """
    names = set()
    for line in text.splitlines():
        match = BREW_LINE.match(line)
        if match:
            names.add(match.group(2))
    return sorted(names)


def parse_brewfile(path: Path) -> list[str]:
    """Get declared formulae from a Brewfile."""
    path = Path(path)
    if not path.is_file():
        raise MissingManifestError(path)
    return parse_brewfile_text(path.read_text())
