"""
Terminal-state detection and move legality for the merge puzzle.
"""

from numpy import ndarray

from tilemerge.core.gameboard import slide_board
from tilemerge.core.grid import equal_grid, orient
from tilemerge.core.state import Direction

# ##: Order used by the legality mask.
DIRECTIONS = (Direction.LEFT, Direction.UP, Direction.RIGHT, Direction.DOWN)


def has_won(grid: ndarray, target: int) -> bool:
    """
    Check whether a tile reached the target value.

    Parameters
    ----------
    grid : ndarray
        The game board.
    target : int
        Winning tile value.

    Returns
    -------
    bool
        True if any cell is greater than or equal to ``target``.
    """
    return bool((grid >= target).any())


def has_moves(grid: ndarray) -> bool:
    """
    Check whether any move is still possible.

    Parameters
    ----------
    grid : ndarray
        The game board.

    Returns
    -------
    bool
        True if a cell is empty or two neighbouring cells hold the same value.

    Notes
    -----
    Each cell is only compared with its neighbour below and its neighbour to the right. Over the whole
    board this tests every adjacent pair exactly once.
    """
    if (grid == 0).any():
        return True

    # ##>: Vertical pairs, then horizontal pairs.
    if (grid[:-1, :] == grid[1:, :]).any():
        return True
    return bool((grid[:, :-1] == grid[:, 1:]).any())


def _moves_tiles(grid: ndarray, direction: Direction) -> bool:
    """Check whether sliding ``grid`` toward ``direction`` changes it."""
    oriented = orient(grid, direction)
    _, slid = slide_board(oriented)
    return not equal_grid(oriented, slid)


def legal_actions_mask(grid: ndarray) -> tuple[bool, ...]:
    """
    Get a boolean mask of the directions that change the board.

    Parameters
    ----------
    grid : ndarray
        The game board.

    Returns
    -------
    tuple[bool, ...]
        Mask for (left, up, right, down) where True means the move changes the board.

    Notes
    -----
    Each direction is tested with the same orient-and-slide path as a real move, so the mask always agrees
    with ``try_move``. A board has no legal direction exactly when ``has_moves`` is False.
    """
    return tuple(_moves_tiles(grid, direction) for direction in DIRECTIONS)


def legal_directions(grid: ndarray) -> list[Direction]:
    """List the directions that would change the board."""
    mask = legal_actions_mask(grid)
    return [direction for direction, legal in zip(DIRECTIONS, mask) if legal]


def illegal_directions(grid: ndarray) -> list[Direction]:
    """List the directions that would leave the board unchanged."""
    mask = legal_actions_mask(grid)
    return [direction for direction, legal in zip(DIRECTIONS, mask) if not legal]
