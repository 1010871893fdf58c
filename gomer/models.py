"""Pydantic models for WebSocket message protocol."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ValidationError


# ---------------------------------------------------------------------------
# Client → Server
# ---------------------------------------------------------------------------

class NewGameMsg(BaseModel):
    type: Literal["new_game"] = "new_game"
    player_color: Literal["black", "white"] = "black"


class PlaceStoneMsg(BaseModel):
    type: Literal["place_stone"] = "place_stone"
    row: int
    col: int


class RetryBotMsg(BaseModel):
    type: Literal["retry_bot"] = "retry_bot"


ClientMessage = NewGameMsg | PlaceStoneMsg | RetryBotMsg


# ---------------------------------------------------------------------------
# Server → Client
# ---------------------------------------------------------------------------

class GameStartedMsg(BaseModel):
    type: Literal["game_started"] = "game_started"
    your_color: str
    board_size: int
    win_length: int


class StonePlacedMsg(BaseModel):
    type: Literal["stone_placed"] = "stone_placed"
    row: int
    col: int
    color: str
    next_turn: str | None


class GameOverMsg(BaseModel):
    type: Literal["game_over"] = "game_over"
    winner: str
    line: list[tuple[int, int]]


class ThinkingMsg(BaseModel):
    type: Literal["thinking"] = "thinking"
    message: str
    timestamp: int


class StateSyncMsg(BaseModel):
    type: Literal["state_sync"] = "state_sync"
    board: list[list[str | None]]
    current_turn: str
    move_count: int
    your_color: str
    winner: str | None
    thinking: list[ThinkingMsg]


class ErrorMsg(BaseModel):
    type: Literal["error"] = "error"
    message: str


def parse_client_message(data: dict) -> ClientMessage | None:
    """Parse a raw dict into a typed client message, or None if invalid."""
    if not isinstance(data, dict):
        return None
    msg_type = data.get("type")
    mapping: dict[str, type[BaseModel]] = {
        "new_game": NewGameMsg,
        "place_stone": PlaceStoneMsg,
        "retry_bot": RetryBotMsg,
    }
    model = mapping.get(msg_type)  # type: ignore[arg-type]
    if model is None:
        return None
    try:
        return model.model_validate(data)  # type: ignore[return-value]
    except ValidationError:
        return None
