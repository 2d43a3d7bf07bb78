"""Simulated Annealing solver for the N-Queens problem.

This module drives the annealing loop over placements produced by ``Board``.
A placement is a sorted list of N distinct queens anywhere on the board; at
each step one queen is relocated to a random free cell. The move is accepted
if it strictly reduces the number of attacking pairs, or otherwise with the
Metropolis probability ``exp((E' - E) / T)`` where ``E = -conflicts``.

Contract (public API)
---------------------
- ``simulated_annealing(size, initial_temperature, num_iterations, rng)``
  returns the final placement (which may still have conflicts when the
  iteration budget runs out first).
- ``sa_nqueens(size, num_iterations, *, initial_temperature, rng)`` runs the
  same loop and returns ``(placement, SAResult)`` where ``SAResult`` is
    (success, iterations, elapsed_seconds, final_conflicts, best_conflicts, evaluations)

Where:
- success: True when the returned placement is conflict-free.
- iterations: number of loop iterations executed (never above the budget).
- elapsed_seconds: wall time measured via ``perf_counter()``.
- final_conflicts: conflicts of the returned placement.
- best_conflicts: fewest conflicts observed during the run.
- evaluations: number of objective evaluations performed.

Cooling
-------
The temperature used at iteration ``i`` is ``T0`` for ``i == 0`` and
``T0 / i`` afterwards: after each iteration it is recomputed as
``T0 / (i + 1)`` from the initial temperature, never decayed from the
previous value.

Determinism
-----------
SA is stochastic. Pass a seeded ``random.Random`` as ``rng`` to reproduce a
run; when omitted, a fresh unseeded generator is used.
"""

from __future__ import annotations

import math
import random
from time import perf_counter
from typing import Any, Optional, Tuple

from .board import Board, Placement


SAResult = Tuple[bool, int, float, int, int, int]


def acceptance_probability(energy: float, energy_next: float, temperature: float) -> float:
    """Return the probability of moving from ``energy`` to ``energy_next``.

    Energies are objective scores (higher is better), so for a non-improving
    move ``energy_next <= energy`` and the result lies in ``(0, 1]``; it is
    exactly 1 for a sideways move.

    Raises
    ------
    ValueError
        If ``temperature`` is zero.
    """
    if temperature == 0:
        raise ValueError("Temperature must be non-zero")
    return math.exp((energy_next - energy) / temperature)


def _check_parameters(size: int, initial_temperature: float, num_iterations: int) -> None:
    if size <= 0:
        raise ValueError(f"Board size must be positive, got {size}")
    if num_iterations < 0:
        raise ValueError(f"Number of iterations must not be negative, got {num_iterations}")
    if not initial_temperature > 0 or math.isinf(initial_temperature):
        raise ValueError(f"Initial temperature must be a positive finite number, got {initial_temperature}")


def _anneal(
    board: Board,
    initial_temperature: float,
    num_iterations: int,
    rng: Any,
) -> Tuple[Placement, int, int, int, int]:
    """Run the annealing loop and return its loop-carried state.

    Returns ``(state, energy, best_energy, iterations, evaluations)``.
    """
    state = board.random_state(rng)
    energy = board.objective(state)
    best_energy = energy
    evaluations = 1

    temperature = initial_temperature
    iteration = 0
    while iteration < num_iterations and energy < 0:
        candidate = board.random_neighbour(state, rng)
        energy_next = board.objective(candidate)
        evaluations += 1

        if energy_next > energy:
            state, energy = candidate, energy_next
        elif acceptance_probability(energy, energy_next, temperature) > rng.random():
            state, energy = candidate, energy_next

        best_energy = max(best_energy, energy)

        temperature = initial_temperature / (iteration + 1)
        iteration += 1

    return state, energy, best_energy, iteration, evaluations


def simulated_annealing(
    size: int,
    initial_temperature: float,
    num_iterations: int,
    rng: Optional[Any] = None,
) -> Placement:
    """Search a placement of ``size`` non-attacking queens.

    Parameters
    ----------
    size : int
        Board dimension N (and number of queens).
    initial_temperature : float
        Starting temperature ``T0``; must be positive.
    num_iterations : int
        Maximum number of annealing iterations.
    rng : random.Random | None
        Source of randomness; a fresh unseeded generator when omitted.

    Returns
    -------
    Placement
        Sorted list of ``size`` distinct queens. Not guaranteed conflict-free.

    Raises
    ------
    ValueError
        On a non-positive size or temperature, or a negative budget.
    """
    placement, _ = sa_nqueens(size, num_iterations, initial_temperature=initial_temperature, rng=rng)
    return placement


def sa_nqueens(
    size: int,
    num_iterations: int,
    *,
    initial_temperature: float = 1000.0,
    rng: Optional[Any] = None,
) -> Tuple[Placement, SAResult]:
    """Run one instrumented annealing search.

    Parameters
    ----------
    size : int
        Board dimension N.
    num_iterations : int
        Iteration budget.
    initial_temperature : float, default 1000.0
        Starting temperature ``T0``.
    rng : random.Random | None
        Source of randomness; a fresh unseeded generator when omitted.

    Returns
    -------
    tuple[Placement, SAResult]
        The final placement and the run summary
        ``(success, iterations, elapsed, final_conflicts, best_conflicts, evaluations)``.

    Raises
    ------
    ValueError
        On a non-positive size or temperature, or a negative budget.
    """
    _check_parameters(size, initial_temperature, num_iterations)
    if rng is None:
        rng = random.Random()

    board = Board(size)
    start = perf_counter()
    state, energy, best_energy, iterations, evaluations = _anneal(board, initial_temperature, num_iterations, rng)
    elapsed = perf_counter() - start

    return state, (energy == 0, iterations, elapsed, -energy, -best_energy, evaluations)
