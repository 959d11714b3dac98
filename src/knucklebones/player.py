"""A player's seat: their dice, cached score, pending roll and whose turn it is."""

from dataclasses import dataclass, field, replace
from typing import Self

from src.core.shared_types import PlayerId
from src.knucklebones.board import Board
from src.knucklebones.scoring import total_score

NO_ROLL = 0


@dataclass(frozen=True)
class Player:
    name: str
    player_id: PlayerId
    board: Board = field(default_factory=Board.empty)
    current_roll: int = NO_ROLL
    wins: int = 0
    is_active: bool = False
    score: int = field(init=False)

    def __post_init__(self) -> None:
        # Never patched incrementally: always derived from the board
        object.__setattr__(self, "score", total_score(self.board))

    @classmethod
    def new(cls, name: str, player_id: PlayerId, wins: int = 0) -> Self:
        return cls(name=name, player_id=player_id, wins=wins)

    @property
    def is_first_player(self) -> bool:
        return self.player_id == PlayerId.FIRST

    @property
    def has_roll(self) -> bool:
        return self.current_roll != NO_ROLL

    def with_board(self, board: Board) -> Self:
        return replace(self, board=board)

    def with_roll(self, roll: int) -> Self:
        return replace(self, current_roll=roll)

    def activate(self) -> Self:
        return replace(self, is_active=True)

    def deactivate(self) -> Self:
        return replace(self, is_active=False, current_roll=NO_ROLL)

    def add_win(self) -> Self:
        return replace(self, wins=self.wins + 1)
