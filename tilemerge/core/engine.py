"""
Game state transitions: new game, tile spawn, move, undo and move planning.

Every function returns a new ``GameState`` and leaves its input untouched. A move that does not change the
board returns the input state itself.
"""

import logging
from dataclasses import replace
from typing import Optional

from numpy import ndarray

from tilemerge.core.config import GameConfig
from tilemerge.core.gameboard import plan_line, slide_board
from tilemerge.core.gamemove import has_moves, has_won
from tilemerge.core.grid import clone_grid, empty_cells, equal_grid, freeze, make_grid, orient, restore, restore_cell
from tilemerge.core.rng import chance, next_int, normalize_seed
from tilemerge.core.state import (
    DEFAULT_SPAWN_RULE,
    Direction,
    GameState,
    MovePlan,
    MoveResult,
    Snapshot,
    SpawnResult,
    SpawnRule,
    TileMove,
)

# ##>: Module logger.
_logger = logging.getLogger(__name__)

# ##: Number of tiles on a new board.
INITIAL_TILES = 2


def _with_flags(state: GameState) -> GameState:
    """
    Recompute the terminal flags against the current grid.

    Notes
    -----
    A won game is never reported as over, even if no move is left.
    """
    won = has_won(state.grid, state.target)
    over = not won and not has_moves(state.grid)
    if won == state.won and over == state.over:
        return state
    return replace(state, won=won, over=over)


def _slide(grid: ndarray, direction: Direction) -> tuple[int, ndarray]:
    """Slide a board in board coordinates; return the gained score and the new board."""
    score, updated = slide_board(orient(grid, direction))
    return score, restore(updated, direction)


def new_game(config: Optional[GameConfig] = None, **overrides) -> GameState:
    """
    Start a new game with two random tiles.

    Parameters
    ----------
    config : GameConfig, optional
        Game parameters; defaults to a 4x4 board with target 2048.
    **overrides
        Individual ``GameConfig`` fields, applied on top of ``config``.

    Returns
    -------
    GameState
        The initial state.

    Examples
    --------
    >>> state = new_game(seed=42)
    >>> int((state.grid != 0).sum())
    2
    """
    config = replace(config, **overrides) if config is not None else GameConfig(**overrides)
    seed = normalize_seed(config.seed)

    state = GameState(
        size=config.size,
        target=config.target,
        grid=freeze(make_grid(config.size)),
        best=config.best,
        rng_seed=seed,
        rng_state=seed,
    )
    for _ in range(INITIAL_TILES):
        state = spawn_tile(state, config.spawn_rule).state

    _logger.debug('New game: size=%d, target=%d, seed=%d', config.size, config.target, seed)
    return _with_flags(state)


def spawn_tile(state: GameState, spawn_rule: Optional[SpawnRule] = None) -> SpawnResult:
    """
    Place one new tile on a random empty cell.

    Parameters
    ----------
    state : GameState
        The current state.
    spawn_rule : SpawnRule, optional
        Probability of a 2 versus a 4; defaults to 90% / 10%.

    Returns
    -------
    SpawnResult
        The new state and the filled cell. When the board is full, the same state and ``None``.

    Notes
    -----
    - The cell index is drawn first and the tile value second. This order is part of the replay format.
    - The terminal flags are not recomputed here.
    """
    rule = spawn_rule or DEFAULT_SPAWN_RULE
    empties = empty_cells(state.grid)
    if not empties:
        return SpawnResult(state, None)

    index, rng_state = next_int(state.rng_state, len(empties))
    hit, rng_state = chance(rng_state, rule.two_prob)
    cell = empties[index]

    grid = clone_grid(state.grid)
    grid[cell] = 2 if hit else 4
    _logger.debug('Spawned %d at %s', grid[cell], cell)
    return SpawnResult(replace(state, grid=freeze(grid), rng_state=rng_state), cell)


def try_move(state: GameState, direction: Direction | str, spawn_rule: Optional[SpawnRule] = None) -> MoveResult:
    """
    Apply a move, then spawn a tile if the board changed.

    Parameters
    ----------
    state : GameState
        The current state.
    direction : Direction or str
        The move to apply.
    spawn_rule : SpawnRule, optional
        Rule for the spawned tile.

    Returns
    -------
    MoveResult
        The next state, whether the board changed and the spawned cell.

    Notes
    -----
    - If the move does not change the board, the input state is returned as is: no spawn, no RNG draw,
      and the undo snapshot is kept.
    - Otherwise the state before the move becomes the only undo snapshot.
    """
    direction = Direction.parse(direction)
    gained, moved = _slide(state.grid, direction)

    if equal_grid(state.grid, moved):
        _logger.debug('Move %s left the board unchanged', direction.value)
        return MoveResult(state, False, None)

    score = state.score + gained
    committed = replace(
        state,
        grid=freeze(moved),
        score=score,
        best=max(state.best, score),
        move_count=state.move_count + 1,
        can_undo=True,
        prev=Snapshot(grid=freeze(state.grid), score=state.score, rng_state=state.rng_state),
    )
    committed, cell = spawn_tile(committed, spawn_rule)
    committed = _with_flags(committed)

    _logger.debug('Move %s: gained=%d, score=%d, spawn=%s', direction.value, gained, score, cell)
    return MoveResult(committed, True, cell)


def undo(state: GameState) -> GameState:
    """
    Revert the last effective move.

    Parameters
    ----------
    state : GameState
        The current state.

    Returns
    -------
    GameState
        The state with grid, score and RNG state restored, or the input state when there is nothing to undo.

    Notes
    -----
    Only one level of undo exists: a second call in a row is a no-op. ``best`` and ``move_count`` are kept.
    """
    if not state.can_undo or state.prev is None:
        return state

    snapshot = state.prev
    restored = replace(
        state,
        grid=freeze(snapshot.grid),
        score=snapshot.score,
        rng_state=snapshot.rng_state,
        can_undo=False,
        prev=None,
    )
    _logger.debug('Undo: score back to %d', snapshot.score)
    return _with_flags(restored)


def plan_move(state: GameState, direction: Direction | str) -> MovePlan:
    """
    Describe a move tile by tile without applying it.

    Parameters
    ----------
    state : GameState
        The current state; it is not modified and no random number is drawn.
    direction : Direction or str
        The move to describe.

    Returns
    -------
    MovePlan
        Board after the move (before any spawn), gained score, and one ``TileMove`` per tile in board
        coordinates.
    """
    direction = Direction.parse(direction)
    oriented = orient(state.grid, direction)
    size = state.size

    moves = []
    for row_index, row in enumerate(oriented):
        for line_move in plan_line(row):
            moves.append(
                TileMove(
                    source=restore_cell(row_index, line_move.source, size, direction),
                    destination=restore_cell(row_index, line_move.destination, size, direction),
                    value=line_move.value,
                    merged_value=line_move.merged_value,
                    survivor=line_move.survivor,
                    merged_away=line_move.merged_away,
                )
            )

    gained, moved = _slide(state.grid, direction)
    return MovePlan(direction, not equal_grid(state.grid, moved), moved, gained, tuple(moves))
