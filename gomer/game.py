"""Game state and the move arbitrator that sequences proposals from both sides."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from gomer.board import BOARD_SIZE, Board, BoardError, Side
from gomer.rules import WIN_LENGTH, winning_line

log = logging.getLogger("gomer.game")


@dataclass(frozen=True)
class Move:
    row: int
    col: int
    side: Side


@dataclass(frozen=True)
class AwaitingMove:
    side: Side


@dataclass(frozen=True)
class Terminal:
    winner: Side


class ProposalResult(str, Enum):
    ACCEPTED = "accepted"
    WIN = "win"
    STALE = "stale"
    ILLEGAL = "illegal"

    @property
    def applied(self) -> bool:
        return self in (ProposalResult.ACCEPTED, ProposalResult.WIN)


@dataclass
class GameState:
    board: Board
    win_length: int = WIN_LENGTH
    side_to_move: Side = Side.FIRST
    winner: Side | None = None
    winning_line: list[tuple[int, int]] | None = None
    history: list[Move] = field(default_factory=list)

    @property
    def is_game_over(self) -> bool:
        return self.winner is not None

    @property
    def move_count(self) -> int:
        return len(self.history)


class MoveArbitrator:
    """Owns the only mutable GameState; every stone goes through ``propose``."""

    def __init__(self, size: int = BOARD_SIZE, win_length: int = WIN_LENGTH):
        self.size = size
        self.win_length = win_length
        self.state = self._fresh_state()

    def _fresh_state(self) -> GameState:
        return GameState(board=Board.create_empty(self.size), win_length=self.win_length)

    def reset(self) -> GameState:
        self.state = self._fresh_state()
        return self.state

    @property
    def status(self) -> AwaitingMove | Terminal:
        if self.state.winner is not None:
            return Terminal(self.state.winner)
        return AwaitingMove(self.state.side_to_move)

    def propose(self, move: Move) -> ProposalResult:
        state = self.state
        if state.is_game_over or move.side is not state.side_to_move:
            log.debug("Dropping stale proposal %s", move)
            return ProposalResult.STALE

        try:
            state.board.place(move.row, move.col, move.side)
        except BoardError as exc:
            log.debug("Dropping illegal proposal %s: %s", move, exc)
            return ProposalResult.ILLEGAL

        state.history.append(move)

        line = winning_line(state.board, move.row, move.col, move.side, state.win_length)
        if line is not None:
            state.winner = move.side
            state.winning_line = line
            log.info("%s wins after %d moves", move.side.value, state.move_count)
            return ProposalResult.WIN

        state.side_to_move = move.side.other
        return ProposalResult.ACCEPTED
