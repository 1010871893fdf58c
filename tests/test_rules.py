"""Unit tests for win detection around the last placed stone."""

import pytest

from gomer.board import Board, Side
from gomer.rules import DIRECTIONS, has_win, winning_line


def place_line(board, start, direction, length, side=Side.FIRST):
    (r0, c0), (dr, dc) = start, direction
    cells = [(r0 + dr * i, c0 + dc * i) for i in range(length)]
    for r, c in cells:
        board.place(r, c, side)
    return cells


class TestWinningLines:
    @pytest.mark.parametrize("direction", DIRECTIONS)
    @pytest.mark.parametrize("last_index", range(5))
    def test_five_wins_from_any_position(self, direction, last_index):
        board = Board.create_empty()
        cells = place_line(board, (5, 5), direction, 5)
        r, c = cells[last_index]
        assert has_win(board, r, c, Side.FIRST) is True

    @pytest.mark.parametrize("direction", DIRECTIONS)
    @pytest.mark.parametrize("last_index", range(4))
    def test_four_is_not_a_win(self, direction, last_index):
        board = Board.create_empty()
        cells = place_line(board, (5, 5), direction, 4)
        r, c = cells[last_index]
        assert has_win(board, r, c, Side.FIRST) is False

    def test_overline_wins(self):
        board = Board.create_empty()
        place_line(board, (0, 0), (0, 1), 6)
        assert has_win(board, 0, 5, Side.FIRST) is True

    def test_line_along_edge(self):
        board = Board.create_empty()
        place_line(board, (14, 10), (0, 1), 5, Side.SECOND)
        assert has_win(board, 14, 14, Side.SECOND) is True

    def test_opponent_stone_breaks_run(self):
        board = Board.create_empty()
        place_line(board, (7, 0), (0, 1), 2)
        board.place(7, 2, Side.SECOND)
        place_line(board, (7, 3), (0, 1), 3)
        assert has_win(board, 7, 5, Side.FIRST) is False

    def test_gap_breaks_run(self):
        board = Board.create_empty()
        place_line(board, (3, 0), (0, 1), 2)
        place_line(board, (3, 3), (0, 1), 3)
        assert has_win(board, 3, 3, Side.FIRST) is False

    def test_custom_win_length(self):
        board = Board.create_empty(3)
        place_line(board, (0, 0), (1, 1), 3)
        assert has_win(board, 2, 2, Side.FIRST, win_length=3) is True
        assert has_win(board, 2, 2, Side.FIRST, win_length=4) is False

    @pytest.mark.parametrize("size", [5, 6, 15])
    def test_isolated_stone_never_wins(self, size):
        board = Board.create_empty(size)
        board.place(size // 2, size // 2, Side.FIRST)
        assert has_win(board, size // 2, size // 2, Side.FIRST) is False


class TestWinningLine:
    def test_returns_ordered_run(self):
        board = Board.create_empty()
        place_line(board, (4, 4), (1, 1), 5)
        assert winning_line(board, 6, 6, Side.FIRST) == [(4, 4), (5, 5), (6, 6), (7, 7), (8, 8)]

    def test_none_without_win(self):
        board = Board.create_empty()
        board.place(0, 0, Side.FIRST)
        assert winning_line(board, 0, 0, Side.FIRST) is None
