"""
Boundary layer data model(s).

These objects are used to communicate with the Service.
Both the persistence layer (lower) and the service layer (higher) send/receive these, so neither depends on the other's internals
(the DB rows and the domain's GameSession stay private to their own layer).
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class MatchRecord:
    """Transport-safe summary of one finished match."""

    player_one_name: str
    player_two_name: str
    score_one: int
    score_two: int
    winner: str  # winner's name or "Draw"
    difficulty: str
    timestamp: datetime = field(default_factory=utc_now)
