"""
Type definitions used across layers
"""

from enum import StrEnum
from typing import Self

from src.core.exceptions import InvalidRequestError


class PlayerId(StrEnum):
    """Stable ids of the two seats. FIRST is the human player, SECOND is the Knucklebot."""

    FIRST = "player_one"
    SECOND = "player_two"


class Phase(StrEnum):
    GAME_OVER = "game over"
    AWAITING_ROLL = "awaiting roll"
    AWAITING_SELECTION = "awaiting selection"


# Numeric policy selectors, kept compatible with stored match records / older clients
DIFFICULTY_POLICY: dict[str, int] = {
    "Easy": 1,
    "Normal": 0,
    "Hard": 2,
}


class Difficulty(StrEnum):
    """Selects the Knucklebot's move-priority policy. Values are the display labels."""

    EASY = "Easy"
    NORMAL = "Normal"
    HARD = "Hard"

    @property
    def policy(self) -> int:
        return DIFFICULTY_POLICY[self.value]

    @classmethod
    def from_label(cls, label: str | int) -> Self:
        """Accept a label (any casing) or one of the numeric policy selectors."""
        if isinstance(label, int):
            for difficulty in cls:
                if difficulty.policy == label:
                    return difficulty
            raise InvalidRequestError(f"Unknown difficulty selector: {label!r}")

        for difficulty in cls:
            if difficulty.value.lower() == label.strip().lower():
                return difficulty
        raise InvalidRequestError(
            f"Unknown difficulty: {label!r}. Pick one from {','.join(d.value for d in cls)}"
        )


DEFAULT_DIFFICULTY = Difficulty.NORMAL
DRAW_LABEL = "Draw"
