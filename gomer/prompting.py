"""
Prompt builders for oracle move requests.

Callers may override the system instructions and the per-turn template;
placeholders are substituted each turn.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

from gomer.board import Board, Side
from gomer.parser import format_board

DEFAULT_SYSTEM = """You are Gomer, an expert AI assistant and an excellent Gomoku player with plenty of board game experience.

<system_constraints>
You are playing on a {SIZE}x{SIZE} board against another player. Black moves first and white moves second. Neither side may place a stone on a cell that is already occupied. Place your stones sensibly in response to your opponent's moves to get {WIN_LENGTH} in a row and win the game.
In this game you play {SIDE}.
</system_constraints>

<response_format>
Return one legal position on the board in the form <xy>row,col</xy>, where row and col are integers starting from 0. You may add a short comment after the tag.
</response_format>"""

DEFAULT_TEMPLATE = """It is your turn to move. Do not forget your goal. The current board is:
{BOARD}"""


@dataclass
class PromptConfig:
    system_instructions: str = DEFAULT_SYSTEM
    template: str = DEFAULT_TEMPLATE


def render_prompt(template: str, values: Dict[str, str]) -> str:
    """Replace known placeholders in the template. Unknown tokens are left intact."""
    rendered = template or ""
    for key, val in values.items():
        rendered = rendered.replace(f"{{{key}}}", val)
    return rendered


def build_messages(board: Board, side: Side, win_length: int, cfg: PromptConfig | None = None) -> List[Dict[str, str]]:
    cfg = cfg or PromptConfig()
    values = {
        "SIZE": str(board.size),
        "WIN_LENGTH": str(win_length),
        "SIDE": side.value,
        "BOARD": format_board(board),
    }
    return [
        {"role": "system", "content": render_prompt(cfg.system_instructions, values)},
        {"role": "user", "content": render_prompt(cfg.template, values)},
    ]
