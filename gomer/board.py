"""Board model: grid of cell occupancy, bounds and occupancy checks."""

from __future__ import annotations

from enum import Enum

BOARD_SIZE = 15


class Side(str, Enum):
    FIRST = "black"
    SECOND = "white"

    @property
    def other(self) -> Side:
        return Side.SECOND if self is Side.FIRST else Side.FIRST


class BoardError(ValueError):
    pass


class InvalidSize(BoardError):
    pass


class OutOfBounds(BoardError):
    pass


class CellOccupied(BoardError):
    pass


class Board:
    def __init__(self, size: int = BOARD_SIZE):
        if size <= 0:
            raise InvalidSize(f"Board size must be positive, got {size}")
        self.size = size
        self._cells: list[list[Side | None]] = [[None] * size for _ in range(size)]

    @classmethod
    def create_empty(cls, size: int = BOARD_SIZE) -> Board:
        return cls(size)

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.size and 0 <= col < self.size

    def get(self, row: int, col: int) -> Side | None:
        if not self.in_bounds(row, col):
            raise OutOfBounds(f"({row},{col}) is outside a {self.size}x{self.size} board")
        return self._cells[row][col]

    def place(self, row: int, col: int, side: Side) -> Board:
        """Set an empty cell to ``side``. The board is untouched on failure."""
        if self.get(row, col) is not None:
            raise CellOccupied(f"({row},{col}) is already occupied")
        self._cells[row][col] = side
        return self

    def is_full(self) -> bool:
        return all(cell is not None for row in self._cells for cell in row)

    def stones(self, side: Side) -> list[tuple[int, int]]:
        """Coordinates held by ``side`` in row-major scan order."""
        return [
            (r, c)
            for r, row in enumerate(self._cells)
            for c, cell in enumerate(row)
            if cell is side
        ]

    def rows(self) -> list[list[str | None]]:
        return [[cell.value if cell else None for cell in row] for row in self._cells]

