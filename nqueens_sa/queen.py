"""Queen value type and canonical board ordering.

A queen is an immutable ``(x, y)`` cell on a square board. Queens are ordered
by the row-major scan index ``x + y*size``, i.e. by ``y`` first and then by
``x``; the ordering does not depend on ``size`` so it can be expressed without
knowing the board.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import total_ordering
from typing import Any


@total_ordering
@dataclass(frozen=True)
class Queen:
    """A queen standing on cell ``(x, y)`` of a ``size``-by-``size`` board."""

    x: int
    y: int

    @classmethod
    def from_index(cls, index: int, size: int) -> "Queen":
        """Return the queen standing on canonical cell ``index``."""
        return cls(index % size, index // size)

    @classmethod
    def random(cls, rng: Any, size: int) -> "Queen":
        """Return a queen on a uniformly random cell of the board."""
        return cls.from_index(rng.randrange(size * size), size)

    def canonical_index(self, size: int) -> int:
        """Row-major position of the queen on the board."""
        return self.x + self.y * size

    def advance(self, size: int) -> "Queen":
        """Return the queen moved to the next cell in canonical order.

        Raises
        ------
        ValueError
            If the queen already stands on the last cell of the board.
        """
        index = self.canonical_index(size) + 1
        if index >= size * size:
            raise ValueError(f"Cannot advance past the last cell of a {size}x{size} board: {self!r}")
        return Queen.from_index(index, size)

    def occupies(self, x: int, y: int) -> bool:
        return self.x == x and self.y == y

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Queen):
            return NotImplemented
        return (self.y, self.x) < (other.y, other.x)
