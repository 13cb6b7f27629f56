"""
Seeded pseudo-random generator (mulberry32) with an explicit 32-bit state.

The generator has no hidden state: every call takes the current state and returns the drawn value together with
the next state. Replaying the same calls from the same state yields the same values on every platform.
"""

from time import time_ns
from typing import NamedTuple, Optional

# ##: 32-bit arithmetic helpers.
_MASK = 0xFFFFFFFF
_INCREMENT = 0x6D2B79F5
_TWO_POW_32 = 4294967296

# ##>: Zero is a degenerate seed, it is replaced by this constant.
ZERO_SEED_REPLACEMENT = 0xA5F1523D


class RandomDraw(NamedTuple):
    """A drawn value and the generator state that follows it."""

    value: float | int
    state: int


class CoinFlip(NamedTuple):
    """Result of a biased coin flip and the generator state that follows it."""

    hit: bool
    state: int


def _imul(first: int, second: int) -> int:
    """Multiply two integers modulo 2**32."""
    return (first * second) & _MASK


def normalize_seed(seed: Optional[int] = None) -> int:
    """
    Turn a user seed into a valid generator state.

    Parameters
    ----------
    seed : int, optional
        Seed to use. When omitted the current wall-clock time in milliseconds is used.

    Returns
    -------
    int
        A non-zero unsigned 32-bit state.
    """
    if seed is None:
        seed = time_ns() // 1_000_000
    state = int(seed) & _MASK
    return ZERO_SEED_REPLACEMENT if state == 0 else state


def next_rng(state: int) -> RandomDraw:
    """
    Advance the generator by one step.

    Parameters
    ----------
    state : int
        Current unsigned 32-bit state.

    Returns
    -------
    RandomDraw
        A float in ``[0, 1)`` and the next state.
    """
    state = (state + _INCREMENT) & _MASK
    mixed = _imul(state ^ (state >> 15), state | 1)
    mixed ^= (mixed + _imul(mixed ^ (mixed >> 7), mixed | 61)) & _MASK
    value = ((mixed ^ (mixed >> 14)) & _MASK) / _TWO_POW_32
    return RandomDraw(value, state)


def next_int(state: int, max_exclusive: int) -> RandomDraw:
    """
    Draw an integer in ``[0, max_exclusive)``.

    Notes
    -----
    ``max_exclusive`` must be a positive integer, other values give meaningless results.
    """
    value, state = next_rng(state)
    return RandomDraw(int(value * max_exclusive), state)


def chance(state: int, probability: float) -> CoinFlip:
    """
    Flip a coin that lands on ``True`` with the given probability.

    Parameters
    ----------
    state : int
        Current generator state.
    probability : float
        Probability of a hit, in ``[0, 1]``.

    Returns
    -------
    CoinFlip
        Whether the draw is below ``probability`` and the next state.
    """
    value, state = next_rng(state)
    return CoinFlip(value < probability, state)
