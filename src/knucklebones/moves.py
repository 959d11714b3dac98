"""
Resolving a single placement: the rolled die goes into the active player's lane,
and matching dice in the opponent's mirrored lane are captured (removed).
"""

from src.core.exceptions import InvalidMoveError
from src.knucklebones.board import DIE_FACES, TOTAL_LANES
from src.knucklebones.player import Player


def validate_move(active: Player, lane_index: int, roll: int) -> None:
    """Raise InvalidMoveError if the move cannot be played. Nothing gets changed either way."""
    if roll not in DIE_FACES:
        raise InvalidMoveError(f"No die rolled (roll={roll!r}).")
    if not 0 <= lane_index < TOTAL_LANES:
        raise InvalidMoveError(
            f"Lane index {lane_index!r} out of range 0..{TOTAL_LANES - 1}."
        )
    if active.board.is_lane_full(lane_index):
        raise InvalidMoveError(f"Lane {lane_index} is full.")


def apply_move(
    active: Player, opponent: Player, lane_index: int, roll: int
) -> tuple[Player, Player]:
    """
    Play `roll` into `lane_index` for the active player.
    ----

    1. place the die in the first empty slot of the active player's lane
    2. capture: remove ALL dice with the same value from the opponent's lane at the same index
    3. scores are recomputed by the Player objects
    4. hand over the turn: the active player is deactivated (roll cleared), the opponent activated

    Returns (active player after the move, opponent after the move).
    """
    validate_move(active, lane_index, roll)

    active_board = active.board.place(lane_index, roll)
    opponent_board = opponent.board.remove_value(lane_index, roll)

    new_active = active.with_board(active_board).deactivate()
    new_opponent = opponent.with_board(opponent_board).activate()
    return new_active, new_opponent
