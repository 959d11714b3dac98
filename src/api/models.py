"""Requests and Response models exchanged with the rendering layer"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Difficulty, Phase, PlayerId
from src.knucklebones.board import TOTAL_LANES

PlayerName = str


# --- REQUEST MODELS ---
class StartGameRequest(BaseModel):
    player_name: str = "Player"
    difficulty: Difficulty = Difficulty.NORMAL

    @field_validator("player_name")
    @classmethod
    def validate_player_name(cls, value: str) -> str:
        name = value.strip()
        if not name:
            raise InvalidRequestError("Player name cannot be empty.")
        return name

    @field_validator("difficulty", mode="before")
    @classmethod
    def validate_difficulty(cls, value: object) -> Difficulty:
        if isinstance(value, Difficulty):
            return value
        if isinstance(value, (str, int)):
            return Difficulty.from_label(value)
        raise InvalidRequestError(f"Cannot interpret {value!r} as a difficulty.")


class SelectLaneRequest(BaseModel):
    lane_index: int

    @field_validator("lane_index")
    @classmethod
    def validate_lane_index(cls, value: int) -> int:
        if not 0 <= value < TOTAL_LANES:
            raise InvalidRequestError(
                f"Lane index {value} out of range 0..{TOTAL_LANES - 1}."
            )
        return value


# --- RESPONSE MODELS ---
class PlayerView(BaseModel):
    player_id: PlayerId
    name: PlayerName
    board: list[list[int]]
    lane_scores: list[int]
    score: int
    current_roll: int
    wins: int
    is_active: bool


class GameResponse(BaseModel):
    """Everything the rendering layer needs to draw the table."""

    phase: Phase
    game_over: bool
    rolling_dice: bool
    winner: Optional[PlayerName]
    is_draw: bool
    difficulty: Difficulty
    players: list[PlayerView]
    stats_available: bool


class MatchRecordResponse(BaseModel):
    player_one_name: str
    player_two_name: str
    score_one: int
    score_two: int
    winner: str
    difficulty: str
    timestamp: datetime
