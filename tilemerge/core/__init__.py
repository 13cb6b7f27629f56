# -*- coding: utf-8 -*-
"""
This module provides the rules engine of the merge puzzle.

It includes the grid geometry, the seeded random generator, the slide and merge rules, terminal-state detection,
the move / spawn / undo transitions and the versioned state codec.
"""

from .codec import deserialize, dumps, loads, serialize
from .config import GameConfig, GameSettings
from .engine import new_game, plan_move, spawn_tile, try_move, undo
from .gameboard import merge_column, plan_line, slide_and_merge, slide_board
from .gamemove import has_moves, has_won, illegal_directions, legal_actions_mask, legal_directions
from .grid import clone_grid, empty_cells, equal_grid, make_grid, reverse_rows, transpose
from .rng import chance, next_int, next_rng, normalize_seed
from .state import Direction, GameState, MovePlan, MoveResult, Snapshot, SpawnResult, SpawnRule, TileMove

__all__ = [
    "GameConfig",
    "GameSettings",
    "Direction",
    "GameState",
    "MovePlan",
    "MoveResult",
    "Snapshot",
    "SpawnResult",
    "SpawnRule",
    "TileMove",
    "make_grid",
    "clone_grid",
    "equal_grid",
    "empty_cells",
    "transpose",
    "reverse_rows",
    "normalize_seed",
    "next_rng",
    "next_int",
    "chance",
    "merge_column",
    "slide_and_merge",
    "slide_board",
    "plan_line",
    "has_won",
    "has_moves",
    "legal_actions_mask",
    "legal_directions",
    "illegal_directions",
    "new_game",
    "spawn_tile",
    "try_move",
    "undo",
    "plan_move",
    "serialize",
    "deserialize",
    "dumps",
    "loads",
]
