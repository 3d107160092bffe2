from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class Reconciliation:
    """Outcome of comparing a Brewfile with the installed formulae.

    All fields are sorted tuples of formula names.
    """

    declared: tuple[str, ...]
    promoted: tuple[str, ...]
    declared_dependencies: tuple[str, ...]
    only_in_manifest: tuple[str, ...]
    only_on_system: tuple[str, ...]

    @property
    def in_sync(self) -> bool:
        return not self.only_in_manifest and not self.only_on_system

    @property
    def exit_code(self) -> int:
        return 0 if self.in_sync else 1


def promote_leaves(declared: set[str], leaves: set[str], all_installed: set[str]) -> tuple[set[str], set[str]]:
    """Compute the top-level package set from the system's point of view.

    Returns (promoted, declared_dependencies). A declared formula that is
    installed as a dependency of something else counts as top-level too.
    """
    non_leaves = all_installed - leaves
    declared_dependencies = declared & non_leaves
    return leaves | declared_dependencies, declared_dependencies


def reconcile(
    declared: Iterable[str],
    leaves: Iterable[str],
    all_installed: Iterable[str],
) -> Reconciliation:
    """Diff declared formulae against promoted system leaves."""
    declared_set = set(declared)
    promoted, declared_dependencies = promote_leaves(declared_set, set(leaves), set(all_installed))

    return Reconciliation(
        declared=tuple(sorted(declared_set)),
        promoted=tuple(sorted(promoted)),
        declared_dependencies=tuple(sorted(declared_dependencies)),
        only_in_manifest=tuple(sorted(declared_set - promoted)),
        only_on_system=tuple(sorted(promoted - declared_set)),
    )
