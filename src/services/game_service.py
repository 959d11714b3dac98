"""Orchestration between the rendering layer, the game rules/Knucklebot, the scheduler and the stats store."""

import logging
import random
from dataclasses import replace
from functools import partial
from typing import Callable, Optional

from pydantic import ValidationError

from src.api.models import (
    GameResponse,
    MatchRecordResponse,
    PlayerView,
    SelectLaneRequest,
    StartGameRequest,
)
from src.core.config import Settings
from src.core.exceptions import GameError, InvalidMoveError
from src.core.models import MatchRecord
from src.core.shared_types import Difficulty, Phase, PlayerId
from src.db.repository import StatsRepository
from src.knucklebones.ai import choose_lane
from src.knucklebones.game import GameSession, roll_die
from src.knucklebones.player import Player
from src.knucklebones.scoring import lane_scores
from src.services.retry import RetryPolicy
from src.services.scheduler import ScheduledHandle, Scheduler

logger = logging.getLogger(__name__)

Listener = Callable[[GameResponse], None]


class GameService:
    """
    Owns the single active game.
    ----

    * the current GameSession is replaced wholesale on every transition
    * rolls and Knucklebot moves are scheduled with a delay (pacing only)
    * every scheduled callback is tagged with the generation of the game it belongs to;
      starting a new game cancels the pending handle AND bumps the generation, so a stale callback is a no-op
    """

    def __init__(
        self,
        repository: StatsRepository,
        scheduler: Scheduler,
        settings: Optional[Settings] = None,
        rng: Optional[random.Random] = None,
        retry_policy: Optional[RetryPolicy] = None,
    ) -> None:
        self.repo = repository
        self.scheduler = scheduler
        self.settings = settings or Settings()
        self.rng = rng or random.Random()
        self.retry = retry_policy or RetryPolicy(
            max_attempts=self.settings.retry_attempts,
            base_delay=self.settings.retry_base_delay,
        )
        self._generation = 0
        self._pending: Optional[ScheduledHandle] = None
        self._listeners: list[Listener] = []

        self.stats_available = True
        player_one_wins = self._load_wins(PlayerId.FIRST)
        self.session = GameSession.initial(
            player_name=self.settings.player_name,
            bot_name=self.settings.bot_name,
            difficulty=self.settings.difficulty,
            player_one_wins=player_one_wins,
        )

    # -- Rendering layer API --
    def subscribe(self, listener: Listener) -> None:
        """Listener gets a fresh GameResponse after every state change."""
        self._listeners.append(listener)

    def start_game(self, request: Optional[StartGameRequest] = None) -> GameResponse:
        """Start (or restart) a game. Anything still scheduled for the previous game is dropped."""
        request = request or StartGameRequest(
            player_name=self.session.player_one.name,
            difficulty=self.settings.difficulty,
        )
        self._cancel_pending()
        self._generation += 1
        self.settings = replace(self.settings, difficulty=request.difficulty)

        self._replace_session(
            GameSession.start(
                player_name=request.player_name,
                difficulty=request.difficulty,
                player_one_wins=self.session.player_one.wins,
                player_two_wins=self.session.player_two.wins,
                bot_name=self.session.player_two.name,
            )
        )
        logger.info(
            "Game %d started: %s vs %s (%s)",
            self._generation,
            request.player_name,
            self.session.player_two.name,
            request.difficulty,
        )
        self._schedule_roll()
        return self.snapshot()

    def select_lane(self, lane_index: int) -> bool:
        """
        The human player's move attempt.

        Returns False (and changes nothing) when the move is not allowed right now;
        the player keeps the pending roll and can try another lane.
        """
        if not self.session.player_one.is_active:
            logger.warning("Ignoring lane %s: it is not the player's turn.", lane_index)
            return False
        try:
            request = SelectLaneRequest(lane_index=lane_index)
            self._play(request.lane_index)
        except (GameError, ValidationError) as error:
            logger.warning("Invalid move attempted: %s", error)
            return False
        return True

    def set_difficulty(self, difficulty: Difficulty | str) -> None:
        """Takes effect from the next started game."""
        if not isinstance(difficulty, Difficulty):
            difficulty = Difficulty.from_label(difficulty)
        self.settings = replace(self.settings, difficulty=difficulty)
        if self.session.game_over:
            self._replace_session(replace(self.session, difficulty=difficulty))

    def snapshot(self) -> GameResponse:
        session = self.session
        winner = session.winner_player
        return GameResponse(
            phase=session.phase,
            game_over=session.game_over,
            rolling_dice=session.rolling_dice,
            winner=winner.name if winner else None,
            is_draw=session.is_draw,
            difficulty=session.difficulty,
            players=[
                _player_view(session.player_one),
                _player_view(session.player_two),
            ],
            stats_available=self.stats_available,
        )

    def match_history(self, limit: int = 10) -> list[MatchRecordResponse]:
        try:
            records = self.retry.call(self.repo.recent_matches, limit)
        except Exception:
            logger.exception("Could not load match history.")
            return []
        return [MatchRecordResponse(**vars(record)) for record in records]

    # -- Turn sequencing --
    def _schedule_roll(self) -> None:
        self._schedule(self.settings.roll_delay, self._roll)

    def _roll(self) -> None:
        if self.session.phase != Phase.AWAITING_ROLL:
            return
        self._replace_session(self.session.roll(roll_die(self.rng)))
        if self.session.is_bot_turn():
            self._schedule_bot_move()

    def _schedule_bot_move(self) -> None:
        self._schedule(self.settings.ai_move_delay, self._bot_move)

    def _bot_move(self) -> None:
        session = self.session
        if not session.is_bot_turn() or session.phase != Phase.AWAITING_SELECTION:
            return
        lane_index = choose_lane(
            opponent_board=session.player_one.board,
            self_board=session.player_two.board,
            roll=session.player_two.current_roll,
            difficulty=session.difficulty,
            rng=self.rng,
        )
        self._play(lane_index)

    def _play(self, lane_index: int) -> None:
        """Resolve a move for whoever is active, then either end the game or queue the next roll."""
        if self.session.phase != Phase.AWAITING_SELECTION:
            raise InvalidMoveError("No die rolled yet.")
        self._replace_session(self.session.select_lane(lane_index))
        if self.session.game_over:
            self._finish_game()
        else:
            self._schedule_roll()

    def _finish_game(self) -> None:
        """Runs exactly once per game: the GAME_OVER transition happens once per GameSession."""
        session = self.session
        winner = session.winner_player
        logger.info(
            "Game %d over: %s %d - %d %s. Winner: %s",
            self._generation,
            session.player_one.name,
            session.player_one.score,
            session.player_two.score,
            session.player_two.name,
            winner.name if winner else "draw",
        )
        self._save_result(session)

    # -- Scheduling --
    def _schedule(self, delay: float, action: Callable[[], None]) -> None:
        generation = self._generation

        def run() -> None:
            if generation != self._generation:
                logger.debug("Dropping %s scheduled for game %d", action.__name__, generation)
                return
            self._pending = None
            action()

        self._pending = self.scheduler.call_later(delay, run)

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _replace_session(self, session: GameSession) -> None:
        self.session = session
        if self._listeners:
            response = self.snapshot()
            for listener in self._listeners:
                # a broken listener must not stop the turn sequence
                try:
                    listener(response)
                except Exception:
                    logger.exception("Listener %r failed.", listener)

    # -- Stats store --
    def _load_wins(self, player_id: PlayerId) -> int:
        try:
            return self.retry.call(self.repo.load_win_count, player_id.value)
        except Exception:
            logger.exception("Stats store failed to initialize. Playing in local-only mode.")
            self.stats_available = False
            return 0

    def _save_result(self, session: GameSession) -> None:
        """Hand the write (and its retry waits) to the scheduler's background runner."""
        if not self.stats_available:
            return
        record = session.to_match_record()
        new_total = (
            session.player_one.wins if session.winner == PlayerId.FIRST else None
        )
        self.scheduler.run_in_background(partial(self._store_result, record, new_total))

    def _store_result(self, record: MatchRecord, new_total: Optional[int]) -> None:
        """A lost stats write is logged, never raised: the game result in memory stands."""
        try:
            self.retry.call(
                self.repo.record_result, record, PlayerId.FIRST.value, new_total
            )
        except Exception:
            logger.exception("Match result could not be stored.")


# -- Internal helpers --
def _player_view(player: Player) -> PlayerView:
    return PlayerView(
        player_id=player.player_id,
        name=player.name,
        board=player.board.to_lists(),
        lane_scores=lane_scores(player.board),
        score=player.score,
        current_roll=player.current_roll,
        wins=player.wins,
        is_active=player.is_active,
    )

