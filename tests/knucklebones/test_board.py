"""Unit tests for /src/knucklebones/board.py"""

import pytest

from src.core.exceptions import BoardError
from src.knucklebones.board import EMPTY, LANE_SIZE, TOTAL_LANES, Board


def test_empty_board_shape(empty_board: Board) -> None:
    assert len(empty_board.lanes) == TOTAL_LANES
    assert all(len(lane) == LANE_SIZE for lane in empty_board.lanes)
    assert empty_board.is_empty()
    assert not empty_board.is_full()
    assert empty_board.open_lanes() == [0, 1, 2]


def test_from_lists_roundtrip() -> None:
    lanes = [[1, 1, 0], [0, 0, 0], [4, 5, 6]]
    board = Board.from_lists(lanes)
    assert board.to_lists() == lanes


@pytest.mark.parametrize(
    "lanes",
    [
        [[1, 1, 0], [0, 0, 0]],  # too few lanes
        [[1, 1, 0], [0, 0, 0], [0, 0, 0], [0, 0, 0]],  # too many lanes
        [[1, 1], [0, 0, 0], [0, 0, 0]],  # lane too short
        [[7, 0, 0], [0, 0, 0], [0, 0, 0]],  # not a die face
        [[-1, 0, 0], [0, 0, 0], [0, 0, 0]],  # not a die face
        [[0, 3, 0], [0, 0, 0], [0, 0, 0]],  # gap before a die
        [[2, 0, 3], [0, 0, 0], [0, 0, 0]],  # gap between dice
    ],
)
def test_invalid_boards_rejected(lanes: list[list[int]]) -> None:
    with pytest.raises(BoardError):
        Board.from_lists(lanes)


@pytest.mark.parametrize(
    "lane, full, first_empty",
    [
        ([0, 0, 0], False, 0),
        ([6, 0, 0], False, 1),
        ([6, 2, 0], False, 2),
        ([6, 2, 1], True, None),
    ],
)
def test_lane_queries(lane: list[int], full: bool, first_empty: int | None) -> None:
    board = Board.from_lists([[0, 0, 0], lane, [0, 0, 0]])
    assert board.is_lane_full(1) is full
    assert board.first_empty_slot(1) == first_empty


def test_full_board() -> None:
    board = Board.from_lists([[1, 2, 3], [4, 5, 6], [6, 6, 6]])
    assert board.is_full()
    assert board.open_lanes() == []


def test_place_fills_first_empty_slot(empty_board: Board) -> None:
    board = empty_board.place(1, 4)
    assert board.to_lists() == [[0, 0, 0], [4, 0, 0], [0, 0, 0]]

    board = board.place(1, 2).place(1, 6)
    assert board.lane(1) == (4, 2, 6)
    assert board.is_lane_full(1)


def test_place_does_not_change_original(empty_board: Board) -> None:
    """Boards are values: placing returns a new board."""
    _ = empty_board.place(0, 3)
    assert empty_board.is_empty()


def test_place_in_full_lane() -> None:
    board = Board.from_lists([[1, 2, 3], [0, 0, 0], [0, 0, 0]])
    with pytest.raises(BoardError):
        board.place(0, 5)


@pytest.mark.parametrize(
    "lane, value, expected",
    [
        ([2, 5, 2], 2, [5, 0, 0]),  # all matches removed, survivors compacted to the front
        ([2, 2, 2], 2, [0, 0, 0]),
        ([5, 2, 0], 2, [5, 0, 0]),
        ([1, 3, 5], 3, [1, 5, 0]),  # order of survivors kept
        ([1, 3, 5], 6, [1, 3, 5]),  # nothing to remove
        ([0, 0, 0], 4, [0, 0, 0]),  # empty lane
    ],
)
def test_remove_value(lane: list[int], value: int, expected: list[int]) -> None:
    board = Board.from_lists([lane, [6, 0, 0], [0, 0, 0]])
    after = board.remove_value(0, value)
    assert list(after.lane(0)) == expected
    # other lanes untouched
    assert after.lane(1) == (6, EMPTY, EMPTY)
    assert after.lane(2) == (EMPTY, EMPTY, EMPTY)


def test_remove_value_not_present_returns_same_board() -> None:
    board = Board.from_lists([[1, 3, 5], [0, 0, 0], [0, 0, 0]])
    assert board.remove_value(0, 6) is board


def test_boards_compare_by_value() -> None:
    assert Board.from_lists([[1, 0, 0], [0, 0, 0], [0, 0, 0]]) == Board.empty().place(0, 1)
