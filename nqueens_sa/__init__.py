"""N-Queens placement search by simulated annealing."""

from .board import Board, Placement
from .queen import Queen
from .simulated_annealing import SAResult, acceptance_probability, sa_nqueens, simulated_annealing
from .utils import (
    conflicts,
    from_coordinates,
    is_valid_placement,
    is_valid_solution,
    render_board,
    to_coordinates,
)

__all__ = [
    "Board",
    "Placement",
    "Queen",
    "SAResult",
    "acceptance_probability",
    "sa_nqueens",
    "simulated_annealing",
    "conflicts",
    "from_coordinates",
    "is_valid_placement",
    "is_valid_solution",
    "render_board",
    "to_coordinates",
]
