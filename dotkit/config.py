import yaml
from dataclasses import dataclass, field
from pathlib import Path

from dotkit.constants import LINT_CONFIG_NAME
from dotkit.errors import ProjectError

DEFAULTS = {
    'nix_flake': 'flake.nix',
    'brewfile': 'dot_Brewfile',
    'readme': 'README.md',
    'shell_scripts': [],
}


@dataclass(frozen=True)
class LintConfig:
    """Tracked files to lint, relative to the project root. None skips a target."""

    nix_flake: str | None = DEFAULTS['nix_flake']
    brewfile: str | None = DEFAULTS['brewfile']
    readme: str | None = DEFAULTS['readme']
    shell_scripts: tuple[str, ...] = field(default_factory=tuple)

    def files(self) -> list[str]:
        """All configured files, de-duplicated in declaration order."""
        files = [self.nix_flake, self.brewfile, self.readme, *self.shell_scripts]
        seen = set()
        unique = []
        for f in files:
            if f and f not in seen:
                seen.add(f)
                unique.append(f)
        return unique


def load_yaml(path: Path) -> dict:
    """Load a YAML mapping, or {} if the file is missing or empty."""
    if not path.exists():
        return {}
    with open(path) as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ProjectError(f'Invalid YAML in {path}: {e}') from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ProjectError(f'{path} must contain a mapping')
    return data


def _optional_file(data: dict, key: str, path: Path) -> str | None:
    value = data.get(key, DEFAULTS[key])
    if value is None or value is False:
        return None
    if not isinstance(value, str) or not value:
        raise ProjectError(f'{path}: {key} must be a file path, null or false')
    return value


def load_lint_config(project_root: Path) -> LintConfig:
    """Load lint targets from the project's config file, falling back to defaults."""
    path = Path(project_root) / LINT_CONFIG_NAME
    data = load_yaml(path)

    unknown = sorted(str(k) for k in set(data) - set(DEFAULTS))
    if unknown:
        raise ProjectError(f'{path}: unknown key(s): {", ".join(unknown)}')

    scripts = data.get('shell_scripts', DEFAULTS['shell_scripts'])
    if scripts is None or scripts is False:
        scripts = []
    if not isinstance(scripts, list) or not all(isinstance(s, str) and s for s in scripts):
        raise ProjectError(f'{path}: shell_scripts must be a list of file paths')

    return LintConfig(
        nix_flake=_optional_file(data, 'nix_flake', path),
        brewfile=_optional_file(data, 'brewfile', path),
        readme=_optional_file(data, 'readme', path),
        shell_scripts=tuple(scripts),
    )
