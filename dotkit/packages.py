from dotkit.constants import BREW
from dotkit.tools import capture, verify_required_tools


def brew(*args: str) -> str:
    """Run a read-only brew query and return its stdout."""
    verify_required_tools([BREW])
    return capture([BREW, *args])


def list_leaves() -> list[str]:
    """Get installed formulae that nothing else depends on."""
    output = brew('leaves')
    return sorted({line.strip() for line in output.splitlines() if line.strip()})


def list_all_installed() -> list[str]:
    """Get every installed formula, leaves and dependencies alike."""
    output = brew('list', '--formula')
    return sorted(set(output.split()))
