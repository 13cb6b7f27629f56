"""
Data model of the merge puzzle: directions, spawn rule, undo snapshot and the game state aggregate.
"""

from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Optional

from numpy import ndarray


class Direction(str, Enum):
    """
    Move direction.

    The string values are the names used by the input layer and the transport format.
    """

    UP = 'up'
    DOWN = 'down'
    LEFT = 'left'
    RIGHT = 'right'

    @classmethod
    def parse(cls, value: 'Direction | str') -> 'Direction':
        """
        Convert a direction name into a ``Direction``.

        Raises
        ------
        ValueError
            If the name is not a known direction.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f'unknown direction: {value!r}') from None


@dataclass(frozen=True)
class SpawnRule:
    """
    Rule used to pick the value of a new tile.

    Attributes
    ----------
    two_prob : float
        Probability of spawning a 2; the remaining probability spawns a 4.
    """

    two_prob: float = 0.9

    def __post_init__(self):
        if not 0.0 <= self.two_prob <= 1.0:
            raise ValueError(f'two_prob must be in [0, 1], got {self.two_prob}')


# ##: Rule applied when the caller does not provide one.
DEFAULT_SPAWN_RULE = SpawnRule()


@dataclass(frozen=True, eq=False)
class Snapshot:
    """
    What is needed to undo one move: the grid and score before the move, and the RNG state before the spawn.
    """

    grid: ndarray
    score: int
    rng_state: int


@dataclass(frozen=True, eq=False)
class GameState:
    """
    Full state of one game.

    Attributes
    ----------
    size : int
        Side of the square grid, fixed for the lifetime of the game.
    target : int
        Tile value that wins the game.
    grid : ndarray
        Read-only board, ``0`` for an empty cell.
    score : int
        Sum of all merged values.
    best : int
        Best score observed during the session.
    move_count : int
        Number of effective moves.
    won : bool
        A tile reached ``target``.
    over : bool
        No move is possible and the game is not won.
    rng_seed : int
        Seed the game started from.
    rng_state : int
        Current state of the generator.
    can_undo : bool
        Whether ``prev`` holds an undo snapshot.
    prev : Snapshot, optional
        State before the last effective move.
    """

    size: int
    target: int
    grid: ndarray
    score: int = 0
    best: int = 0
    move_count: int = 0
    won: bool = False
    over: bool = False
    rng_seed: int = 0
    rng_state: int = 0
    can_undo: bool = False
    prev: Optional[Snapshot] = None

    @property
    def max_tile(self) -> int:
        """Largest tile on the board."""
        return int(self.grid.max()) if self.grid.size else 0


class SpawnResult(NamedTuple):
    """
    Outcome of a spawn: the new state and the filled cell, ``None`` when the board was full.
    """

    state: GameState
    cell: Optional[tuple[int, int]]


class MoveResult(NamedTuple):
    """
    Outcome of ``try_move``.
    """

    state: GameState
    changed: bool
    spawn: Optional[tuple[int, int]] = None


class TileMove(NamedTuple):
    """
    Movement of one tile during a move, in board coordinates.

    ``survivor`` tiles stay on the board with ``merged_value``; ``merged_away`` tiles slide into a survivor
    and disappear. Tiles that neither merge nor move have ``source == destination``.
    """

    source: tuple[int, int]
    destination: tuple[int, int]
    value: int
    merged_value: int = 0
    survivor: bool = False
    merged_away: bool = False


class MovePlan(NamedTuple):
    """
    Side-effect-free description of a move, for animation.
    """

    direction: Direction
    changed: bool
    grid: ndarray
    gained_score: int
    moves: tuple[TileMove, ...]
