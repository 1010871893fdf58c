"""WebSocket endpoint and message routing."""

import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from gomer.board import Side
from gomer.game import ProposalResult
from gomer.models import (
    ErrorMsg,
    NewGameMsg,
    PlaceStoneMsg,
    RetryBotMsg,
    StateSyncMsg,
    ThinkingMsg,
    parse_client_message,
)
from gomer.oracle import Oracle, OpenAIOracle, retry_budget
from gomer.session import GameSession

log = logging.getLogger("gomer.ws")

router = APIRouter()


def get_oracle(ws: WebSocket) -> Oracle:
    state = ws.app.state
    oracle = getattr(state, "oracle", None)
    if oracle is None:
        oracle = state.oracle = OpenAIOracle.from_settings(state.settings)
    return oracle


def state_sync(session: GameSession) -> dict:
    state = session.state
    return StateSyncMsg(
        board=state.board.rows(),
        current_turn=state.side_to_move.value,
        move_count=state.move_count,
        your_color=session.human_side.value,
        winner=state.winner.value if state.winner else None,
        thinking=[ThinkingMsg(message=e.message, timestamp=e.timestamp) for e in session.thinking.entries],
    ).model_dump()


def rejection_message(session: GameSession, result: ProposalResult) -> str:
    if result is ProposalResult.STALE:
        return "Game is already over" if session.state.is_game_over else "Not your turn"
    return "Cell is already occupied or out of bounds"


@router.websocket("/ws")
async def websocket_endpoint(ws: WebSocket):
    await ws.accept()
    settings = ws.app.state.settings

    async def send(msg: dict):
        try:
            await ws.send_json(msg)
        except (WebSocketDisconnect, RuntimeError):
            log.debug("Dropping %s for closed socket", msg.get("type"))

    session: GameSession | None = None
    try:
        while True:
            data = await ws.receive_json()
            msg = parse_client_message(data)
            if msg is None:
                await send(ErrorMsg(message="Unknown or invalid message").model_dump())
                continue

            if isinstance(msg, NewGameMsg):
                human_side = Side(msg.player_color)
                if session is None:
                    session = GameSession(
                        get_oracle(ws),
                        human_side=human_side,
                        size=settings.board_size,
                        win_length=settings.win_length,
                        oracle_timeout=retry_budget(settings.oracle_timeout_s, settings.oracle_retries),
                        on_event=send,
                    )
                await session.new_game(human_side)

            elif session is None:
                await send(ErrorMsg(message="No game in progress").model_dump())

            elif isinstance(msg, PlaceStoneMsg):
                result = await session.human_move(msg.row, msg.col)
                if not result.applied:
                    await send(ErrorMsg(message=rejection_message(session, result)).model_dump())

            elif isinstance(msg, RetryBotMsg):
                if not await session.retry_bot():
                    await send(state_sync(session))
    except WebSocketDisconnect:
        log.debug("Client disconnected")
    finally:
        if session is not None:
            await session.close()
