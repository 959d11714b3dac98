"""The Board holds one player's dice. All rules that touch the layout of dice within a lane live here."""

from dataclasses import dataclass
from typing import Optional, Self, Sequence

from src.core.exceptions import BoardError

# 3 lanes of 3 slots each. A slot holds a die value 1..6, or EMPTY.
TOTAL_LANES = 3
LANE_SIZE = 3
EMPTY = 0
DIE_FACES = range(1, 7)

Lane = tuple[int, ...]


def validate_lane(lane: Sequence[int]) -> Lane:
    """Check length, die values, and that the dice form a contiguous prefix (no gaps before a die)."""
    if len(lane) != LANE_SIZE:
        raise BoardError(f"Lane must hold {LANE_SIZE} slots, got {len(lane)}: {lane!r}")

    seen_empty = False
    for value in lane:
        if value != EMPTY and value not in DIE_FACES:
            raise BoardError(f"Invalid die value {value!r} in lane {lane!r}")
        if value == EMPTY:
            seen_empty = True
        elif seen_empty:
            raise BoardError(f"Dice must fill a lane from its first slot: {lane!r}")
    return tuple(lane)


@dataclass(frozen=True)
class Board:
    lanes: tuple[Lane, ...]

    def __post_init__(self) -> None:
        if len(self.lanes) != TOTAL_LANES:
            raise BoardError(
                f"Board must have {TOTAL_LANES} lanes, got {len(self.lanes)}."
            )
        object.__setattr__(
            self, "lanes", tuple(validate_lane(lane) for lane in self.lanes)
        )

    @classmethod
    def empty(cls) -> Self:
        return cls(tuple((EMPTY,) * LANE_SIZE for _ in range(TOTAL_LANES)))

    @classmethod
    def from_lists(cls, lanes: Sequence[Sequence[int]]) -> Self:
        """Convenience constructor, ex. Board.from_lists([[1, 1, 0], [0, 0, 0], [4, 0, 0]])"""
        return cls(tuple(tuple(lane) for lane in lanes))

    def to_lists(self) -> list[list[int]]:
        return [list(lane) for lane in self.lanes]

    # --- queries ---
    def lane(self, lane_index: int) -> Lane:
        return self.lanes[lane_index]

    def is_lane_full(self, lane_index: int) -> bool:
        # Dice always fill a lane from the front, so only the last slot needs checking
        return self.lanes[lane_index][LANE_SIZE - 1] != EMPTY

    def first_empty_slot(self, lane_index: int) -> Optional[int]:
        for slot, value in enumerate(self.lanes[lane_index]):
            if value == EMPTY:
                return slot
        return None

    def open_lanes(self) -> list[int]:
        return [i for i in range(TOTAL_LANES) if not self.is_lane_full(i)]

    def is_full(self) -> bool:
        return all(self.is_lane_full(i) for i in range(TOTAL_LANES))

    def is_empty(self) -> bool:
        return all(value == EMPTY for lane in self.lanes for value in lane)

    def contains(self, lane_index: int, value: int) -> bool:
        return value in self.lanes[lane_index]

    # --- updates (return a new Board) ---
    def place(self, lane_index: int, value: int) -> Self:
        """Put a die in the first empty slot of the lane."""
        slot = self.first_empty_slot(lane_index)
        if slot is None:
            raise BoardError(f"Lane {lane_index} is full.")
        new_lane = list(self.lanes[lane_index])
        new_lane[slot] = value
        return self._with_lane(lane_index, new_lane)

    def remove_value(self, lane_index: int, value: int) -> Self:
        """Remove every die showing `value` from the lane. Remaining dice keep their order and shift to the front."""
        if value not in self.lanes[lane_index]:
            return self
        survivors = [v for v in self.lanes[lane_index] if v not in (value, EMPTY)]
        new_lane = survivors + [EMPTY] * (LANE_SIZE - len(survivors))
        return self._with_lane(lane_index, new_lane)

    def _with_lane(self, lane_index: int, lane: Sequence[int]) -> Self:
        lanes = list(self.lanes)
        lanes[lane_index] = tuple(lane)
        return type(self)(tuple(lanes))
