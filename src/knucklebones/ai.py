"""
Knucklebot: picks a lane for its pending roll.

Each difficulty is an ordered list of lane pickers. A picker returns a lane index or None,
and the first picker with an answer wins. All pickers scan lanes left to right,
so ties always go to the lowest lane index.
"""

import random
from random import Random
from typing import Callable, Optional

from src.core.exceptions import GameStateError
from src.core.shared_types import Difficulty
from src.knucklebones.board import TOTAL_LANES, Board
from src.knucklebones.game import GameSession, roll_die
from src.knucklebones.scoring import lane_score

LanePicker = Callable[[Board, Board, int, Random], Optional[int]]


# --- building blocks ---
def match_lane(self_board: Board, roll: int) -> Optional[int]:
    """First open lane of our own that already holds a die equal to the roll."""
    for lane_index in range(TOTAL_LANES):
        if self_board.contains(lane_index, roll) and not self_board.is_lane_full(
            lane_index
        ):
            return lane_index
    return None


def capture_lane(opponent_board: Board, roll: int) -> Optional[int]:
    """First opponent lane holding the roll. Does NOT look at whether our own lane is open."""
    for lane_index in range(TOTAL_LANES):
        if opponent_board.contains(lane_index, roll):
            return lane_index
    return None


def best_scoring_lane(self_board: Board, roll: int) -> Optional[int]:
    """Open lane where placing the roll adds the most to that lane's score (strictly greater replaces)."""
    best_index: Optional[int] = None
    best_gain = 0
    for lane_index in self_board.open_lanes():
        before = lane_score(self_board.lane(lane_index))
        after = lane_score(self_board.place(lane_index, roll).lane(lane_index))
        gain = after - before
        if best_index is None or gain > best_gain:
            best_index = lane_index
            best_gain = gain
    return best_index


def first_open_lane(self_board: Board) -> Optional[int]:
    open_lanes = self_board.open_lanes()
    return open_lanes[0] if open_lanes else None


def random_open_lane(self_board: Board, rng: Random) -> int:
    """Last resort: draw lane indices uniformly until one is open."""
    if self_board.is_full():
        raise GameStateError("No open lane left to place a die in.")
    lane_index = rng.randrange(TOTAL_LANES)
    while self_board.is_lane_full(lane_index):
        lane_index = rng.randrange(TOTAL_LANES)
    return lane_index


# --- pickers (uniform signature so they can be chained) ---
def _pick_match(opponent: Board, own: Board, roll: int, rng: Random) -> Optional[int]:
    return match_lane(own, roll)


def _pick_capture(
    opponent: Board, own: Board, roll: int, rng: Random
) -> Optional[int]:
    # a capture is only playable when our own mirrored lane still has room
    lane_index = capture_lane(opponent, roll)
    if lane_index is None or own.is_lane_full(lane_index):
        return None
    return lane_index


def _pick_best_score(
    opponent: Board, own: Board, roll: int, rng: Random
) -> Optional[int]:
    return best_scoring_lane(own, roll)


def _pick_first_open(
    opponent: Board, own: Board, roll: int, rng: Random
) -> Optional[int]:
    return first_open_lane(own)


def _pick_random_open(
    opponent: Board, own: Board, roll: int, rng: Random
) -> Optional[int]:
    return random_open_lane(own, rng)


POLICIES: dict[Difficulty, tuple[LanePicker, ...]] = {
    Difficulty.EASY: (_pick_match, _pick_capture, _pick_first_open, _pick_random_open),
    Difficulty.NORMAL: (
        _pick_capture,
        _pick_match,
        _pick_first_open,
        _pick_random_open,
    ),
    Difficulty.HARD: (
        _pick_capture,
        _pick_best_score,
        _pick_match,
        _pick_first_open,
        _pick_random_open,
    ),
}


def choose_lane(
    opponent_board: Board,
    self_board: Board,
    roll: int,
    difficulty: Difficulty,
    rng: Optional[Random] = None,
) -> int:
    """Lane index the Knucklebot plays its roll into. Always an open lane of `self_board`."""
    rng = rng or random.Random()
    for picker in POLICIES[difficulty]:
        lane_index = picker(opponent_board, self_board, roll, rng)
        if lane_index is not None:
            return lane_index
    # random_open_lane either returns or raises, so the loop never falls through
    raise GameStateError("Knucklebot could not find a lane.")


def simulate_match(
    difficulty_one: Difficulty,
    difficulty_two: Difficulty,
    rng: Optional[Random] = None,
) -> GameSession:
    """
    Let two Knucklebots play a full game against each other through the state machine.

    Useful to sanity check policies (and their relative strength) without any service or scheduler.
    Returns the finished GameSession.
    """
    rng = rng or random.Random()
    difficulties = {True: difficulty_one, False: difficulty_two}
    session = GameSession.start(
        player_name=f"Knucklebot ({difficulty_one})",
        bot_name=f"Knucklebot ({difficulty_two})",
    )
    while not session.game_over:
        session = session.roll(roll_die(rng))
        active = session.active_player
        lane_index = choose_lane(
            session.waiting_player.board,
            active.board,
            active.current_roll,
            difficulties[active.is_first_player],
            rng,
        )
        session = session.select_lane(lane_index)
    return session
