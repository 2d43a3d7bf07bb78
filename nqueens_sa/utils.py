"""Utility helpers for the N-Queens project.

This module provides reusable, low-level primitives shared by the solver, the
command-line front end and the analysis pipeline: conflict counting, placement
checks, text rendering and conversion to plain coordinate pairs.

Representation
--------------
Placements are lists of ``Queen`` values sorted in canonical (row-major)
order; see ``nqueens_sa.board``.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

from .queen import Queen


def conflicts(state: Sequence[Queen]) -> int:
    """Count the attacking queen pairs in O(N^2).

    Rows, columns and both diagonals are considered; each unordered pair is
    counted once.
    """
    n = len(state)
    conflicts_count = 0
    for i in range(n):
        for j in range(i + 1, n):
            a, b = state[i], state[j]
            if a.y == b.y or a.x == b.x or abs(a.x - b.x) == abs(a.y - b.y):
                conflicts_count += 1
    return conflicts_count


def is_valid_placement(state: Sequence[Queen], size: int) -> bool:
    """Return True if ``state`` satisfies the placement invariants.

    Contract
    - Exactly ``size`` queens
    - Every coordinate within ``[0, size)``
    - Strictly increasing canonical order (which implies distinct cells)
    """
    if len(state) != size:
        return False
    for queen in state:
        if not (0 <= queen.x < size and 0 <= queen.y < size):
            return False
    return all(state[i - 1] < state[i] for i in range(1, len(state)))


def is_valid_solution(state: Sequence[Queen], size: int) -> bool:
    """Return True if ``state`` is a valid, conflict-free placement."""
    return is_valid_placement(state, size) and conflicts(state) == 0


def render_board(state: Sequence[Queen], size: int, queen: str = "Q ", empty: str = "- ") -> str:
    """Render a placement as text, one line per row (top row is ``y == 0``)."""
    lines = []
    for y in range(size):
        cells = []
        for x in range(size):
            occupied = any(q.occupies(x, y) for q in state)
            cells.append(queen if occupied else empty)
        lines.append("".join(cells))
    return "\n".join(lines)


def to_coordinates(state: Iterable[Queen]) -> List[Tuple[int, int]]:
    """Return the placement as a list of ``(x, y)`` tuples."""
    return [(q.x, q.y) for q in state]


def from_coordinates(pairs: Iterable[Tuple[int, int]]) -> List[Queen]:
    """Build a sorted placement from ``(x, y)`` pairs."""
    return sorted(Queen(x, y) for x, y in pairs)
