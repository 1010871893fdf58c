"""Oracle text boundary: coordinate tag parsing and board serialization."""

from __future__ import annotations

import re
from typing import NamedTuple

from gomer.board import Board, Side

XY_RE = re.compile(r"<xy>\s*(\d+)\s*,\s*(\d+)\s*</xy>(.*)", re.S)
COORD_RE = re.compile(r"\((\d+),(\d+)\)")


class ParseFailure(ValueError):
    pass


class BotMove(NamedTuple):
    row: int
    col: int
    commentary: str


def parse_bot_move(text: str) -> BotMove:
    """Extract ``<xy>ROW,COL</xy>`` and the commentary trailing it.

    Bounds and occupancy are not checked here.
    """
    if not isinstance(text, str):
        raise ParseFailure(f"Expected text, got {type(text).__name__}")
    match = XY_RE.search(text)
    if match is None:
        raise ParseFailure("No <xy>row,col</xy> tag in response")
    try:
        row, col = int(match.group(1)), int(match.group(2))
    except ValueError as exc:
        raise ParseFailure(f"Unreadable coordinates in tag: {exc}") from exc
    return BotMove(row, col, match.group(3).strip())


def format_board(board: Board) -> str:
    lines = []
    for side in (Side.FIRST, Side.SECOND):
        coords = ",".join(f"({r},{c})" for r, c in board.stones(side))
        lines.append(f"{side.value}: {coords}")
    return "\n".join(lines)


def parse_board_text(text: str) -> dict[Side, list[tuple[int, int]]]:
    """Inverse of ``format_board``."""
    result: dict[Side, list[tuple[int, int]]] = {Side.FIRST: [], Side.SECOND: []}
    for line in text.splitlines():
        label, sep, rest = line.partition(":")
        if not sep:
            continue
        try:
            side = Side(label.strip())
        except ValueError as exc:
            raise ParseFailure(f"Unknown side label {label.strip()!r}") from exc
        result[side] = [(int(r), int(c)) for r, c in COORD_RE.findall(rest)]
    return result
