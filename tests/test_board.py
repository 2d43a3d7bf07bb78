"""Unit tests for placement generation and the conflict objective."""

from itertools import permutations
from pathlib import Path
import random
import sys
import unittest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from nqueens_sa.board import Board
from nqueens_sa.queen import Queen
from nqueens_sa.utils import is_valid_placement


class ScriptedRandom:
    """Random stand-in replaying a fixed list of draws."""

    def __init__(self, draws):
        self.draws = list(draws)

    def randrange(self, n):
        value = self.draws.pop(0)
        if not 0 <= value < n:
            raise AssertionError(f"scripted draw {value} outside [0, {n})")
        return value

    def random(self):
        return self.draws.pop(0)


def q(*pairs):
    return [Queen(x, y) for x, y in pairs]


class InsertNewTests(unittest.TestCase):
    """Sorted insertion with forward probing on collisions."""

    def test_insert_into_free_cell(self):
        state = q((1, 0), (2, 1))
        position = Board(3).insert_new(Queen(0, 1), state)
        self.assertEqual(position, 1)
        self.assertEqual(state, q((1, 0), (0, 1), (2, 1)))

    def test_collision_probes_forward(self):
        state = q((1, 0), (2, 0))
        position = Board(3).insert_new(Queen(1, 0), state)
        self.assertEqual(position, 2)
        self.assertEqual(state, q((1, 0), (2, 0), (0, 1)))

    def test_collision_on_last_cell_wraps_to_origin(self):
        state = q((1, 1))
        position = Board(2).insert_new(Queen(1, 1), state)
        self.assertEqual(position, 0)
        self.assertEqual(state, q((0, 0), (1, 1)))

    def test_wrap_keeps_probing_past_occupied_origin(self):
        state = q((0, 0), (1, 1))
        position = Board(2).insert_new(Queen(1, 1), state)
        self.assertEqual(position, 1)
        self.assertEqual(state, q((0, 0), (1, 0), (1, 1)))

    def test_full_board_is_an_invariant_violation(self):
        state = q((0, 0), (1, 0), (0, 1), (1, 1))
        with self.assertRaises(AssertionError):
            Board(2).insert_new(Queen(0, 0), state)


class RandomStateTests(unittest.TestCase):
    """Initial placements respect size, bounds, order and uniqueness."""

    def test_invariants_hold_for_many_sizes_and_seeds(self):
        for size in range(1, 13):
            board = Board(size)
            for seed in range(25):
                state = board.random_state(random.Random(seed))
                self.assertEqual(len(state), size)
                self.assertTrue(is_valid_placement(state, size), state)
                self.assertEqual(len(set(state)), size)

    def test_repeated_draws_are_resolved_by_probing(self):
        state = Board(3).random_state(ScriptedRandom([4, 4, 4]))
        self.assertEqual(state, q((1, 1), (2, 1), (0, 2)))

    def test_repeated_last_cell_wraps(self):
        state = Board(2).random_state(ScriptedRandom([3, 3]))
        self.assertEqual(state, q((0, 0), (1, 1)))

    def test_same_seed_same_state(self):
        board = Board(10)
        self.assertEqual(board.random_state(random.Random(5)), board.random_state(random.Random(5)))

    def test_non_positive_size_rejected(self):
        with self.assertRaises(ValueError):
            Board(0)


class RandomNeighbourTests(unittest.TestCase):
    """Neighbours relocate exactly one queen."""

    STATE = q((1, 0), (3, 0), (0, 2), (2, 3))

    def test_scripted_move_removes_chosen_original_queen(self):
        board = Board(4)
        self.assertEqual(
            board.random_neighbour(self.STATE, ScriptedRandom([0, 0])),
            q((0, 0), (3, 0), (0, 2), (2, 3)),
        )
        self.assertEqual(
            board.random_neighbour(self.STATE, ScriptedRandom([0, 3])),
            q((0, 0), (1, 0), (3, 0), (0, 2)),
        )
        self.assertEqual(
            board.random_neighbour(self.STATE, ScriptedRandom([4, 2])),
            q((1, 0), (3, 0), (0, 1), (2, 3)),
        )

    def test_colliding_draw_never_removes_the_new_queen(self):
        # (1, 0) is taken, so the new queen lands on (2, 0)
        neighbour = Board(4).random_neighbour(self.STATE, ScriptedRandom([1, 1]))
        self.assertEqual(neighbour, q((1, 0), (2, 0), (0, 2), (2, 3)))

    def test_input_is_not_mutated(self):
        state = list(self.STATE)
        Board(4).random_neighbour(state, random.Random(1))
        self.assertEqual(state, self.STATE)

    def test_neighbour_differs_by_one_queen(self):
        for size in range(2, 11):
            board = Board(size)
            rng = random.Random(size)
            state = board.random_state(rng)
            for _ in range(50):
                neighbour = board.random_neighbour(state, rng)
                self.assertNotEqual(neighbour, state)
                self.assertTrue(is_valid_placement(neighbour, size), neighbour)
                self.assertEqual(len(set(state) - set(neighbour)), 1)
                self.assertEqual(len(set(neighbour) - set(state)), 1)
                state = neighbour

    def test_single_cell_board_has_no_neighbour(self):
        with self.assertRaises(ValueError):
            Board(1).random_neighbour(q((0, 0)), random.Random(0))


class ObjectiveTests(unittest.TestCase):
    """Negative count of attacking pairs."""

    def test_objective(self):
        state = q((0, 0), (2, 0), (1, 1), (0, 2))
        self.assertEqual(Board(4).objective(state), -6)

    def test_objective_2(self):
        self.assertEqual(Board(4).objective(RandomNeighbourTests.STATE), -1)

    def test_solution_scores_zero(self):
        self.assertEqual(Board(4).objective(q((1, 0), (3, 1), (0, 2), (2, 3))), 0)

    def test_pairs_are_not_double_counted(self):
        row = q(*[(x, 0) for x in range(5)])
        self.assertEqual(Board(5).objective(row), -10)

    def test_objective_is_order_independent(self):
        board = Board(4)
        state = q((0, 0), (2, 0), (1, 1), (0, 2))
        for perm in permutations(state):
            self.assertEqual(board.objective(list(perm)), -6)


if __name__ == "__main__":
    unittest.main()
