"""
Line differ — computes a minimal line edit script between two sequences
of lines.

Small inputs are solved with a longest-common-subsequence table; once the
table would grow past ``_LCS_CELL_LIMIT`` cells the differ switches to
Myers' O(ND) greedy algorithm, whose cost follows the size of the edit
rather than the product of the input lengths.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

logger = logging.getLogger(__name__)

SAME = "same"
ADD = "add"
REMOVE = "remove"

_LCS_CELL_LIMIT = 250_000


@dataclass
class LineEditOp:
    """One step of a line edit script."""
    kind: str                         # "same" | "add" | "remove"
    content: str
    old_index: Optional[int] = None   # 0-based, None for additions
    new_index: Optional[int] = None   # 0-based, None for removals

    @property
    def is_change(self) -> bool:
        return self.kind != SAME


def diff_lines(
    original: Sequence[str],
    modified: Sequence[str],
) -> list[LineEditOp]:
    """Return the edit script turning *original* into *modified*.

    Every original line appears exactly once as ``same`` or ``remove`` and
    every modified line exactly once as ``same`` or ``add``, in order.
    Inside a run of consecutive changes all removals come before the
    additions.
    """
    a = list(original)
    b = list(modified)
    n, m = len(a), len(b)

    # Common prefix and suffix never take part in the edit.
    prefix = 0
    while prefix < n and prefix < m and a[prefix] == b[prefix]:
        prefix += 1
    suffix = 0
    while (
        suffix < n - prefix
        and suffix < m - prefix
        and a[n - 1 - suffix] == b[m - 1 - suffix]
    ):
        suffix += 1

    ops = [LineEditOp(SAME, a[i], i, i) for i in range(prefix)]

    mid_a = a[prefix:n - suffix]
    mid_b = b[prefix:m - suffix]
    if mid_a or mid_b:
        if len(mid_a) * len(mid_b) <= _LCS_CELL_LIMIT:
            script = _lcs_script(mid_a, mid_b)
        else:
            logger.debug(
                "[Diff] %dx%d lines exceeds LCS table limit, using Myers",
                len(mid_a), len(mid_b),
            )
            script = _myers_script(mid_a, mid_b)
        ops.extend(_build_ops(script, mid_a, mid_b, prefix))

    for k in range(suffix):
        i = n - suffix + k
        j = m - suffix + k
        ops.append(LineEditOp(SAME, a[i], i, j))

    return ops


# ------------------------------------------------------------------
# Edit script strategies
#
# Both return a list of (kind, i, j) triples indexing into the trimmed
# middle sections; i is None for additions and j is None for removals.
# ------------------------------------------------------------------

def _lcs_script(a: list[str], b: list[str]) -> list[tuple]:
    n, m = len(a), len(b)

    # table[i][j] = length of the LCS of a[i:] and b[j:]
    table = [[0] * (m + 1) for _ in range(n + 1)]
    for i in range(n - 1, -1, -1):
        row = table[i]
        below = table[i + 1]
        line = a[i]
        for j in range(m - 1, -1, -1):
            if line == b[j]:
                row[j] = below[j + 1] + 1
            else:
                row[j] = below[j] if below[j] >= row[j + 1] else row[j + 1]

    script: list[tuple] = []
    i = j = 0
    while i < n and j < m:
        if a[i] == b[j]:
            script.append((SAME, i, j))
            i += 1
            j += 1
        elif table[i + 1][j] >= table[i][j + 1]:
            script.append((REMOVE, i, None))
            i += 1
        else:
            script.append((ADD, None, j))
            j += 1
    while i < n:
        script.append((REMOVE, i, None))
        i += 1
    while j < m:
        script.append((ADD, None, j))
        j += 1
    return script


def _myers_script(a: list[str], b: list[str]) -> list[tuple]:
    n, m = len(a), len(b)
    max_d = n + m
    offset = max_d + 1
    v = [0] * (2 * max_d + 3)
    trace: list[list[int]] = []

    for d in range(max_d + 1):
        trace.append(list(v))
        for k in range(-d, d + 1, 2):
            if k == -d or (k != d and v[offset + k - 1] < v[offset + k + 1]):
                x = v[offset + k + 1]
            else:
                x = v[offset + k - 1] + 1
            y = x - k
            while x < n and y < m and a[x] == b[y]:
                x += 1
                y += 1
            v[offset + k] = x
            if x >= n and y >= m:
                return _myers_backtrack(trace, n, m, offset)

    raise AssertionError("Myers search ended without reaching the end point")


def _myers_backtrack(
    trace: list[list[int]],
    n: int,
    m: int,
    offset: int,
) -> list[tuple]:
    script: list[tuple] = []
    x, y = n, m
    for d in range(len(trace) - 1, -1, -1):
        v = trace[d]
        k = x - y
        if k == -d or (k != d and v[offset + k - 1] < v[offset + k + 1]):
            prev_k = k + 1
        else:
            prev_k = k - 1
        prev_x = v[offset + prev_k]
        prev_y = prev_x - prev_k

        while x > prev_x and y > prev_y:
            x -= 1
            y -= 1
            script.append((SAME, x, y))

        if d > 0:
            if x == prev_x:
                script.append((ADD, None, prev_y))
            else:
                script.append((REMOVE, prev_x, None))
        x, y = prev_x, prev_y

    script.reverse()
    return script


def _build_ops(
    script: list[tuple],
    a: list[str],
    b: list[str],
    base: int,
) -> list[LineEditOp]:
    """Turn a raw script into ops, ordering each change run removals-first."""
    ops: list[LineEditOp] = []
    removed: list[LineEditOp] = []
    added: list[LineEditOp] = []

    for kind, i, j in script:
        if kind == SAME:
            ops.extend(removed)
            ops.extend(added)
            removed.clear()
            added.clear()
            ops.append(LineEditOp(SAME, a[i], base + i, base + j))
        elif kind == REMOVE:
            removed.append(LineEditOp(REMOVE, a[i], base + i, None))
        else:
            added.append(LineEditOp(ADD, b[j], None, base + j))

    ops.extend(removed)
    ops.extend(added)
    return ops
