from itertools import zip_longest

from dotkit.constants import COLUMN_WIDTH
from dotkit.output import plain
from dotkit.reconcile import Reconciliation

NO_DIFFERENCES = 'No differences found.'
HEADERS = ('Only in Manifest', 'Only on System')


def diff_rows(left: tuple[str, ...], right: tuple[str, ...]) -> list[tuple[str, str]]:
    """Pair columns by index. The columns are independent listings, not a comparison."""
    return list(zip_longest(left, right, fillvalue=''))


def format_row(c1: str, c2: str) -> str:
    return f'{c1:<{COLUMN_WIDTH}} {c2:<{COLUMN_WIDTH}}'


def render_diff(result: Reconciliation) -> list[str]:
    """Render the two difference columns as fixed-width lines."""
    if result.in_sync:
        return [NO_DIFFERENCES]

    lines = [
        format_row(*HEADERS),
        format_row(*('-' * len(h) for h in HEADERS)),
    ]
    for c1, c2 in diff_rows(result.only_in_manifest, result.only_on_system):
        lines.append(format_row(c1, c2))
    return lines


def print_diff(result: Reconciliation) -> int:
    """Print the diff table. Returns the process exit code."""
    for line in render_diff(result):
        plain(line)
    return result.exit_code
