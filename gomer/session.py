"""Game session: wires the human, the oracle and the arbitrator together."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from gomer.board import BOARD_SIZE, Side
from gomer.game import GameState, Move, MoveArbitrator, ProposalResult
from gomer.models import GameOverMsg, GameStartedMsg, StonePlacedMsg, ThinkingMsg
from gomer.oracle import Oracle, OracleError
from gomer.parser import ParseFailure, parse_bot_move
from gomer.prompting import PromptConfig, build_messages
from gomer.rules import WIN_LENGTH
from gomer.thinking import ThinkingLog

ORACLE_TIMEOUT = 30  # seconds
BOT_ATTEMPTS = 3  # oracle round-trips per bot turn before giving up

log = logging.getLogger("gomer.session")

EventSink = Callable[[dict], Awaitable[None]]


class GameSession:
    """One human against the oracle.

    Proposals from both sides go through ``_propose`` under a lock, so the
    side-to-move check and the board update are atomic. Every bot request
    carries the generation it was issued under; a new game bumps the
    generation and results from older requests are dropped.
    """

    def __init__(
        self,
        oracle: Oracle,
        human_side: Side = Side.FIRST,
        size: int = BOARD_SIZE,
        win_length: int = WIN_LENGTH,
        oracle_timeout: float = ORACLE_TIMEOUT,
        bot_attempts: int = BOT_ATTEMPTS,
        prompt_cfg: PromptConfig | None = None,
        on_event: EventSink | None = None,
    ):
        self.oracle = oracle
        self.human_side = human_side
        self.arbitrator = MoveArbitrator(size, win_length)
        self.thinking = ThinkingLog()
        self.oracle_timeout = oracle_timeout
        self.bot_attempts = bot_attempts
        self.prompt_cfg = prompt_cfg
        self.on_event = on_event
        self.generation = 0
        self._lock = asyncio.Lock()
        self._bot_task: asyncio.Task | None = None

    @property
    def bot_side(self) -> Side:
        return self.human_side.other

    @property
    def state(self) -> GameState:
        return self.arbitrator.state

    @property
    def bot_pending(self) -> bool:
        return self._bot_task is not None and not self._bot_task.done()

    async def start(self):
        """Kick off the bot if it moves first."""
        if self.state.side_to_move is self.bot_side and not self.state.is_game_over:
            self._schedule_bot_turn()

    async def new_game(self, human_side: Side | None = None):
        self.generation += 1
        self._cancel_bot_task()
        async with self._lock:
            if human_side is not None:
                self.human_side = human_side
            self.arbitrator.reset()
            self.thinking.clear()
            await self._emit(
                GameStartedMsg(
                    your_color=self.human_side.value,
                    board_size=self.arbitrator.size,
                    win_length=self.arbitrator.win_length,
                ).model_dump()
            )
        log.info("Game %d started, human plays %s", self.generation, self.human_side.value)
        await self.start()

    async def human_move(self, row: int, col: int) -> ProposalResult:
        return await self._propose(Move(row, col, self.human_side))

    async def retry_bot(self) -> bool:
        """Ask the oracle again if the bot is stuck on its turn."""
        state = self.state
        if state.is_game_over or state.side_to_move is not self.bot_side or self.bot_pending:
            return False
        self._schedule_bot_turn()
        return True

    async def join(self):
        """Wait for the outstanding bot turn, if any."""
        if self._bot_task is not None:
            await asyncio.gather(self._bot_task, return_exceptions=True)

    async def close(self):
        self.generation += 1
        self._cancel_bot_task()
        await self.join()

    # ------------------------------------------------------------------

    async def _propose(self, move: Move, generation: int | None = None) -> ProposalResult:
        async with self._lock:
            if generation is not None and generation != self.generation:
                log.info("Discarding %s from game %d", move, generation)
                return ProposalResult.STALE

            result = self.arbitrator.propose(move)
            if not result.applied:
                return result

            state = self.state
            next_turn = None if state.is_game_over else state.side_to_move.value
            await self._emit(
                StonePlacedMsg(row=move.row, col=move.col, color=move.side.value, next_turn=next_turn).model_dump()
            )
            if result is ProposalResult.WIN:
                await self._emit(
                    GameOverMsg(winner=move.side.value, line=state.winning_line or []).model_dump()
                )
                await self._narrate("I win!" if move.side is self.bot_side else "You win!")
            elif state.board.is_full():
                await self._narrate("The board is full.")
            elif state.side_to_move is self.bot_side:
                self._schedule_bot_turn()
            return result

    def _schedule_bot_turn(self):
        if self.bot_pending:
            return
        self._bot_task = asyncio.create_task(self._bot_turn(self.generation))

    def _cancel_bot_task(self):
        if self._bot_task is not None and not self._bot_task.done():
            self._bot_task.cancel()

    async def _bot_turn(self, generation: int):
        for attempt in range(self.bot_attempts):
            state = self.state
            if generation != self.generation or state.is_game_over or state.side_to_move is not self.bot_side:
                return
            if state.board.is_full():
                await self._narrate("The board is full.")
                return

            await self._narrate("Analyzing the board...")
            messages = build_messages(state.board, self.bot_side, state.win_length, self.prompt_cfg)
            try:
                raw = await asyncio.wait_for(self.oracle.request_move(messages), self.oracle_timeout)
            except asyncio.TimeoutError:
                if generation == self.generation:
                    await self._narrate(
                        f"The bot did not answer within {self.oracle_timeout:g}s. Retry to ask again."
                    )
                return
            except OracleError as exc:
                if generation == self.generation:
                    await self._narrate(f"Could not reach the bot: {exc}. Retry to ask again.")
                return

            if generation != self.generation:
                log.info("Discarding oracle response from game %d", generation)
                return

            try:
                bot_move = parse_bot_move(raw)
            except ParseFailure as exc:
                log.warning("Unparseable oracle response (attempt %d): %s", attempt + 1, exc)
                await self._narrate("I could not make sense of my own answer, thinking again...")
                continue

            await self._narrate(bot_move.commentary or f"I will place a stone at ({bot_move.row},{bot_move.col})")
            result = await self._propose(Move(bot_move.row, bot_move.col, self.bot_side), generation)
            if result.applied or result is ProposalResult.STALE:
                return
            await self._narrate(f"({bot_move.row},{bot_move.col}) is not a legal move, thinking again...")

        if generation == self.generation:
            await self._narrate("The bot could not come up with a legal move. Retry to ask again.")

    async def _narrate(self, message: str):
        entry = self.thinking.add(message)
        await self._emit(ThinkingMsg(message=entry.message, timestamp=entry.timestamp).model_dump())

    async def _emit(self, msg: dict):
        if self.on_event is not None:
            await self.on_event(msg)
