"""
Slide and merge rules of the puzzle, expressed on a single line that always slides toward index 0.
"""

from typing import Iterator, NamedTuple

from numpy import array, int64, ndarray, zeros, zeros_like


class SlideResult(NamedTuple):
    """A line after sliding and the score gained by its merges."""

    row: ndarray
    gained_score: int


class LineMove(NamedTuple):
    """
    Movement of one tile inside a line, in line coordinates.
    """

    source: int
    destination: int
    value: int
    merged_value: int = 0
    survivor: bool = False
    merged_away: bool = False


def _merge_scan(values: list[int]) -> Iterator[tuple[int, int]]:
    """
    Walk the compacted values of a line and group them into output tiles.

    Parameters
    ----------
    values : list[int]
        Non-zero values of the line, in order.

    Yields
    ------
    tuple[int, int]
        ``(start, count)`` where ``count`` is 2 for a merged pair and 1 otherwise.

    Notes
    -----
    The scan skips the consumed neighbour after a merge, so a merged tile is never merged again during the
    same move: ``[2, 2, 2]`` gives ``[4, 2]`` and ``[2, 2, 2, 2]`` gives ``[4, 4]``.
    """
    i = 0
    while i < len(values):
        if i + 1 < len(values) and values[i] == values[i + 1]:
            yield i, 2
            i += 2
        else:
            yield i, 1
            i += 1


def merge_column(column: ndarray) -> tuple[int, ndarray]:
    """
    Merge adjacent equal values in a column and compute the total score.

    Parameters
    ----------
    column : ndarray
        A 1D array representing one line of the game board.

    Returns
    -------
    score : int
        The total score obtained from merging.
    merged_column : ndarray
        The non-zero values after merging, without padding.

    Notes
    -----
    - Zeros (empty cells) are ignored and removed before merging.
    - Merging occurs from the start of the column towards the end.
    - Each value can only be merged once per function call.
    """
    non_zero = [int(value) for value in column if value != 0]

    result = []
    score = 0
    for start, count in _merge_scan(non_zero):
        value = non_zero[start] * count
        if count == 2:
            score += value
        result.append(value)

    return score, array(result, dtype=int64)


def slide_and_merge(row: ndarray) -> SlideResult:
    """
    Slide one line toward index 0 and merge it.

    Parameters
    ----------
    row : ndarray
        A line of ``n`` values.

    Returns
    -------
    SlideResult
        The new line, padded with zeros on the right to length ``n``, and the score gained by its merges.

    Examples
    --------
    >>> slide_and_merge(array([2, 0, 2, 2]))
    SlideResult(row=array([4, 2, 0, 0]), gained_score=4)
    """
    score, merged = merge_column(row)
    result = zeros(len(row), dtype=int64)
    result[: len(merged)] = merged
    return SlideResult(result, score)


def slide_board(board: ndarray) -> tuple[int, ndarray]:
    """
    Slide the game board to the left, merge adjacent cells, and compute the score.

    Parameters
    ----------
    board : ndarray
        The game board, already oriented so the move is a left slide.

    Returns
    -------
    score : int
        The total score obtained from all merges.
    updated_board : ndarray
        The updated game board after sliding and merging.
    """
    result = zeros_like(board, dtype=int64)
    score = 0

    for i, row in enumerate(board):
        line = slide_and_merge(row)
        score += line.gained_score
        result[i] = line.row

    return score, result


def plan_line(row: ndarray) -> list[LineMove]:
    """
    Describe where every tile of a line goes during a left slide.

    Parameters
    ----------
    row : ndarray
        A line of values.

    Returns
    -------
    list[LineMove]
        One entry per non-zero tile, in source order. For a merged pair the first tile is the survivor
        and carries the merged value; the second one is merged away into the same destination.
    """
    positions = [index for index, value in enumerate(row) if value != 0]
    values = [int(row[index]) for index in positions]

    moves = []
    for destination, (start, count) in enumerate(_merge_scan(values)):
        if count == 1:
            moves.append(LineMove(positions[start], destination, values[start]))
            continue

        merged = values[start] * 2
        moves.append(LineMove(positions[start], destination, values[start], merged_value=merged, survivor=True))
        moves.append(LineMove(positions[start + 1], destination, values[start + 1], merged_away=True))
    return moves
