"""Scoring rules. Pure functions of the dice values."""

from typing import Sequence

from src.knucklebones.board import DIE_FACES, EMPTY, Board


def lane_score(lane: Sequence[int]) -> int:
    """
    Every distinct face scores face * count**2.

    ex) [3, 3, 3] -> 3 * 3**2 = 27, while [1, 2, 3] -> 1 + 2 + 3 = 6.
    """
    # index 0 is unused (EMPTY), indices 1..6 hold the count of each face
    counts = [0] * (max(DIE_FACES) + 1)
    for value in lane:
        if value != EMPTY:
            counts[value] += 1
    return sum(face * counts[face] ** 2 for face in DIE_FACES)


def lane_scores(board: Board) -> list[int]:
    return [lane_score(lane) for lane in board.lanes]


def total_score(board: Board) -> int:
    return sum(lane_scores(board))
