"""
The GameSession is the entrypoint into the domain layer for the service layer.

It is an immutable value: every transition (start, roll, select_lane) returns a new session,
so the service can replace its current game in one assignment.

                 start()                 roll()
    GAME_OVER ------------> AWAITING_ROLL ------> AWAITING_SELECTION
        ^                         ^                      |
        |                         |  select_lane()       |
        |                         +----------------------+
        |            select_lane() fills a board         |
        +------------------------------------------------+
"""

from dataclasses import dataclass, replace
from random import Random
from typing import Optional, Self

from src.core.exceptions import GameStateError, InvalidMoveError
from src.core.models import MatchRecord
from src.core.shared_types import (
    DEFAULT_DIFFICULTY,
    DRAW_LABEL,
    Difficulty,
    Phase,
    PlayerId,
)
from src.knucklebones.board import DIE_FACES
from src.knucklebones.moves import apply_move
from src.knucklebones.player import Player

BOT_NAME = "Knucklebot"


def roll_die(rng: Random) -> int:
    """Uniform integer in 1..6. Pass a seeded Random for reproducible games."""
    return rng.randint(min(DIE_FACES), max(DIE_FACES))


def decide_winner(player_one: Player, player_two: Player) -> Optional[PlayerId]:
    """Strictly higher total score wins. Equal scores is a draw (None)."""
    if player_one.score > player_two.score:
        return player_one.player_id
    if player_two.score > player_one.score:
        return player_two.player_id
    return None


@dataclass(frozen=True)
class GameSession:
    player_one: Player
    player_two: Player
    game_over: bool = True
    winner: Optional[PlayerId] = None
    difficulty: Difficulty = DEFAULT_DIFFICULTY
    # True between the end of a turn and the next roll being generated
    rolling_dice: bool = True
    turns_played: int = 0

    # --- construction ---
    @classmethod
    def initial(
        cls,
        player_name: str = "Player",
        bot_name: str = BOT_NAME,
        difficulty: Difficulty = DEFAULT_DIFFICULTY,
        player_one_wins: int = 0,
        player_two_wins: int = 0,
    ) -> Self:
        """State before the first game has been started: nothing to play yet."""
        return cls(
            player_one=Player.new(player_name, PlayerId.FIRST, player_one_wins),
            player_two=Player.new(bot_name, PlayerId.SECOND, player_two_wins),
            difficulty=difficulty,
        )

    @classmethod
    def start(
        cls,
        player_name: str,
        difficulty: Difficulty = DEFAULT_DIFFICULTY,
        player_one_wins: int = 0,
        player_two_wins: int = 0,
        bot_name: str = BOT_NAME,
    ) -> Self:
        """Fresh game: empty boards, zero scores, no roll pending, first player to move.

        Only the win counts are carried over from earlier games.
        """
        return cls(
            player_one=Player.new(player_name, PlayerId.FIRST, player_one_wins).activate(),
            player_two=Player.new(bot_name, PlayerId.SECOND, player_two_wins),
            game_over=False,
            winner=None,
            difficulty=difficulty,
            rolling_dice=True,
        )

    def restart(self) -> Self:
        """New game with the same players, difficulty and win counts."""
        return type(self).start(
            player_name=self.player_one.name,
            difficulty=self.difficulty,
            player_one_wins=self.player_one.wins,
            player_two_wins=self.player_two.wins,
            bot_name=self.player_two.name,
        )

    # --- queries ---
    @property
    def phase(self) -> Phase:
        if self.game_over:
            return Phase.GAME_OVER
        if self.rolling_dice or not self.active_player.has_roll:
            return Phase.AWAITING_ROLL
        return Phase.AWAITING_SELECTION

    @property
    def active_player(self) -> Player:
        return self.player_one if self.player_one.is_active else self.player_two

    @property
    def waiting_player(self) -> Player:
        return self.player_two if self.player_one.is_active else self.player_one

    @property
    def pending_roll(self) -> int:
        return self.active_player.current_roll

    @property
    def winner_player(self) -> Optional[Player]:
        if self.winner is None:
            return None
        return self.player(self.winner)

    @property
    def is_draw(self) -> bool:
        return self.game_over and self.winner is None and self.turns_played > 0

    def player(self, player_id: PlayerId) -> Player:
        return self.player_one if player_id == PlayerId.FIRST else self.player_two

    def is_bot_turn(self) -> bool:
        return not self.game_over and self.player_two.is_active

    # --- transitions ---
    def roll(self, value: int) -> Self:
        """AWAITING_ROLL -> AWAITING_SELECTION: store the die as the active player's pending roll."""
        if self.phase != Phase.AWAITING_ROLL:
            raise GameStateError(f"Cannot roll now. phase: {self.phase}")
        if value not in DIE_FACES:
            raise GameStateError(f"A die shows 1..6, got {value!r}")

        active = self.active_player.with_roll(value)
        return self._with_players(active, self.waiting_player, rolling_dice=False)

    def select_lane(self, lane_index: int) -> Self:
        """
        AWAITING_SELECTION -> AWAITING_ROLL (or GAME_OVER).
        ----
        Invalid moves raise InvalidMoveError and leave this session untouched:
        the same player keeps the same roll and has to pick again.
        """
        if self.game_over:
            raise GameStateError("Game is over. Start a new game first.")
        if self.phase != Phase.AWAITING_SELECTION:
            raise InvalidMoveError("No die rolled yet.")

        active, opponent = apply_move(
            self.active_player, self.waiting_player, lane_index, self.pending_roll
        )
        after_move = self._with_players(
            active, opponent, rolling_dice=True, turns_played=self.turns_played + 1
        )
        return after_move._check_game_over()

    # --- game end ---
    def to_match_record(self) -> MatchRecord:
        """Summary handed to the persistence collaborator once the game is over."""
        if not self.game_over:
            raise GameStateError("Cannot record a match that is still in progress.")
        winner = self.winner_player
        return MatchRecord(
            player_one_name=self.player_one.name,
            player_two_name=self.player_two.name,
            score_one=self.player_one.score,
            score_two=self.player_two.score,
            winner=winner.name if winner is not None else DRAW_LABEL,
            difficulty=self.difficulty.value,
        )

    # -- PRIVATE HELPERS ---
    def _with_players(self, first: Player, second: Player, **changes) -> Self:
        """Put both players back in their own seats, whichever one moved."""
        by_id = {first.player_id: first, second.player_id: second}
        return replace(
            self,
            player_one=by_id[PlayerId.FIRST],
            player_two=by_id[PlayerId.SECOND],
            **changes,
        )

    def _check_game_over(self) -> Self:
        """The game ends as soon as either board has all slots filled."""
        if not (self.player_one.board.is_full() or self.player_two.board.is_full()):
            return self

        winner = decide_winner(self.player_one, self.player_two)
        player_one = self.player_one.deactivate()
        player_two = self.player_two.deactivate()
        # Only the human's wins are tracked
        if winner == PlayerId.FIRST:
            player_one = player_one.add_win()
        return replace(
            self,
            player_one=player_one,
            player_two=player_two,
            game_over=True,
            winner=winner,
            rolling_dice=False,
        )
