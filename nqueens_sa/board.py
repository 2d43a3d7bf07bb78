"""Board: placement factory and objective for the N-Queens annealer.

A placement is a list of exactly ``size`` distinct queens kept strictly
increasing in canonical (row-major) order. Queens may share rows, columns and
diagonals: those are conflicts to be scored, not forbidden states. The only
hard invariant is that two queens never stand on the same cell.

The board holds no search progress. It only knows its ``size`` and produces or
scores placements owned by the caller; every generator returns a fresh list
and leaves its input untouched.

Randomness is drawn from an injected generator (``random.Random`` or any
object exposing ``randrange``) so that runs can be reproduced from a seed.
"""

from __future__ import annotations

from bisect import bisect_left
from typing import Any, List, Sequence

from .queen import Queen
from .utils import conflicts


Placement = List[Queen]


class Board:
    """Square board of ``size`` cells per side.

    Parameters
    ----------
    size : int
        Board dimension N; must be positive.
    """

    def __init__(self, size: int):
        if size <= 0:
            raise ValueError(f"Board size must be positive, got {size}")
        self.size = size

    def __repr__(self) -> str:
        return f"Board(size={self.size})"

    def random_state(self, rng: Any) -> Placement:
        """Place ``size`` queens on uniformly random distinct cells.

        Collisions are resolved by probing forward in canonical order (see
        ``insert_new``), so the draw never restarts.
        """
        state: Placement = []
        for _ in range(self.size):
            self.insert_new(Queen.random(rng, self.size), state)
        return state

    def insert_new(self, queen: Queen, state: Placement) -> int:
        """Insert ``queen`` into the sorted ``state`` and return its position.

        When the cell is already taken the queen is moved to the next cell in
        canonical order, wrapping from the last cell back to ``(0, 0)``, until
        a free one is found. ``state`` is modified in place.

        Raises
        ------
        AssertionError
            If every cell of the board is already occupied.
        """
        cells = self.size * self.size
        last = cells - 1
        position = bisect_left(state, queen)
        for _ in range(cells):
            if position == len(state) or state[position] != queen:
                state.insert(position, queen)
                return position
            # Occupied: the next occupied cell, if any, sits at position + 1
            if queen.canonical_index(self.size) == last:
                queen = Queen(0, 0)
                position = 0
            else:
                queen = queen.advance(self.size)
                position += 1
        raise AssertionError(f"No free cell left on a {self.size}x{self.size} board holding {len(state)} queens")

    def random_neighbour(self, state: Sequence[Queen], rng: Any) -> Placement:
        """Return a copy of ``state`` with exactly one queen relocated.

        A queen is added on a random free cell first, then one of the original
        queens, chosen uniformly, is removed. Since the added queen never lands
        on an occupied cell, the neighbour always differs from ``state``.

        Raises
        ------
        ValueError
            If the board has no free cell left (only the 1x1 board).
        """
        if len(state) >= self.size * self.size:
            raise ValueError(f"A full {self.size}x{self.size} board has no neighbouring placement")
        neighbour = list(state)
        added = self.insert_new(Queen.random(rng, self.size), neighbour)

        removed = rng.randrange(len(state))
        if removed >= added:
            removed += 1
        del neighbour[removed]
        return neighbour

    def objective(self, state: Sequence[Queen]) -> int:
        """Return minus the number of attacking queen pairs.

        Two queens attack each other when they share a row, a column or a
        diagonal. Every unordered pair is inspected once, so the score is
        independent of the order of ``state``. ``0`` is the optimum.
        """
        return -conflicts(state)
