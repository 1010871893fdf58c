"""Win detection around the most recently placed stone."""

from __future__ import annotations

from gomer.board import Board, Side

WIN_LENGTH = 5

# Four axes: horizontal, vertical, diagonal ↘, diagonal ↗
DIRECTIONS = [
    (0, 1),
    (1, 0),
    (1, 1),
    (1, -1),
]


def _extent(board: Board, row: int, col: int, dr: int, dc: int, side: Side) -> list[tuple[int, int]]:
    cells = []
    r, c = row + dr, col + dc
    while board.in_bounds(r, c) and board.get(r, c) is side:
        cells.append((r, c))
        r, c = r + dr, c + dc
    return cells


def winning_line(
    board: Board, row: int, col: int, side: Side, win_length: int = WIN_LENGTH
) -> list[tuple[int, int]] | None:
    """Return the full run through (row, col) on the first winning axis, or None."""
    for dr, dc in DIRECTIONS:
        backward = _extent(board, row, col, -dr, -dc, side)
        forward = _extent(board, row, col, dr, dc, side)
        if 1 + len(backward) + len(forward) >= win_length:
            return list(reversed(backward)) + [(row, col)] + forward
    return None


def has_win(board: Board, row: int, col: int, side: Side, win_length: int = WIN_LENGTH) -> bool:
    """Check if the stone at (row, col) completes ``win_length`` in a row.

    Overlines count as wins.
    """
    return winning_line(board, row, col, side, win_length) is not None
