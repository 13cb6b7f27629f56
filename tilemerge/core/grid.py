"""
Grid geometry for the merge puzzle: construction, copies, comparisons and the orientation transforms.

Every move is computed as a left slide. The other directions are obtained by orienting the board with
``transpose`` and ``reverse_rows`` before sliding and restoring it afterwards.
"""

from numpy import argwhere, array, array_equal, int64, ndarray, zeros

from tilemerge.core.state import Direction


def make_grid(size: int) -> ndarray:
    """
    Create an empty square grid.

    Parameters
    ----------
    size : int
        Side of the grid.

    Returns
    -------
    ndarray
        A ``size x size`` array of zeros.
    """
    return zeros((size, size), dtype=int64)


def clone_grid(grid: ndarray) -> ndarray:
    """Return a writable deep copy of the grid."""
    return array(grid, dtype=int64, copy=True)


def freeze(grid: ndarray) -> ndarray:
    """
    Return a read-only copy of the grid.

    Notes
    -----
    Grids stored in a ``GameState`` or a ``Snapshot`` are frozen so that no caller can alter a committed
    state in place.
    """
    frozen = clone_grid(grid)
    frozen.setflags(write=False)
    return frozen


def equal_grid(first: ndarray, second: ndarray) -> bool:
    """
    Compare two grids element-wise.

    Grids of different dimensions are unequal.
    """
    return bool(array_equal(first, second))


def empty_cells(grid: ndarray) -> list[tuple[int, int]]:
    """
    List the coordinates of the empty cells.

    Parameters
    ----------
    grid : ndarray
        The game board.

    Returns
    -------
    list[tuple[int, int]]
        ``(row, col)`` pairs in row-major order (top to bottom, left to right).

    Notes
    -----
    The order is consumed by index when a spawn cell is drawn, so it must never change.
    """
    return [(int(row), int(col)) for row, col in argwhere(grid == 0)]


def transpose(grid: ndarray) -> ndarray:
    """Swap rows and columns."""
    return grid.T.copy()


def reverse_rows(grid: ndarray) -> ndarray:
    """Reverse the order of the values inside each row (the row order is kept)."""
    return grid[:, ::-1].copy()


def orient(grid: ndarray, direction: Direction) -> ndarray:
    """
    Orient the grid so that a move in ``direction`` becomes a left slide.

    Parameters
    ----------
    grid : ndarray
        The game board in board coordinates.
    direction : Direction
        The requested move.

    Returns
    -------
    ndarray
        A new array in line coordinates.
    """
    if direction is Direction.RIGHT:
        return reverse_rows(grid)
    if direction is Direction.UP:
        return transpose(grid)
    if direction is Direction.DOWN:
        return reverse_rows(transpose(grid))
    return clone_grid(grid)


def restore(grid: ndarray, direction: Direction) -> ndarray:
    """Undo ``orient``: bring a grid in line coordinates back to board coordinates."""
    if direction is Direction.RIGHT:
        return reverse_rows(grid)
    if direction is Direction.UP:
        return transpose(grid)
    if direction is Direction.DOWN:
        return transpose(reverse_rows(grid))
    return clone_grid(grid)


def restore_cell(row: int, col: int, size: int, direction: Direction) -> tuple[int, int]:
    """
    Map a cell from line coordinates back to board coordinates.

    Parameters
    ----------
    row, col : int
        Position in the oriented grid.
    size : int
        Side of the grid.
    direction : Direction
        The direction used to orient the grid.

    Returns
    -------
    tuple[int, int]
        ``(row, col)`` on the board.
    """
    if direction is Direction.RIGHT:
        return row, size - 1 - col
    if direction is Direction.UP:
        return col, row
    if direction is Direction.DOWN:
        return size - 1 - col, row
    return row, col


def to_lists(grid: ndarray) -> list[list[int]]:
    """Convert a grid to nested lists of plain ints."""
    return [[int(value) for value in row] for row in grid]


def from_lists(rows) -> ndarray:
    """
    Build a grid from nested sequences of integers.

    Raises
    ------
    ValueError
        If the rows do not form a square matrix.
    """
    grid = array(rows, dtype=int64)
    if grid.ndim != 2 or grid.shape[0] != grid.shape[1]:
        raise ValueError(f'grid must be a square matrix, got shape {grid.shape}')
    return grid
