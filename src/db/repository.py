"""Protocol for the stats store (implemented with SQLAlchemy, or as a no-op for local-only play)."""

from typing import Optional, Protocol

from src.core.models import MatchRecord


class StatsRepository(Protocol):
    """Persistence of win counts and match history"""

    def load_win_count(self, player_id: str) -> int:
        """Wins recorded for the player. No record means 0."""
        ...

    def record_match(self, record: MatchRecord) -> None:
        """Append a finished match to the history."""
        ...

    def increment_win_count(self, player_id: str, new_total: int) -> None:
        """Store the player's new win total."""
        ...

    def record_result(
        self, record: MatchRecord, player_id: str, new_total: Optional[int]
    ) -> None:
        """Match record + win count as one unit of work. new_total=None only records the match."""
        ...

    def recent_matches(self, limit: int = 10) -> list[MatchRecord]:
        """Most recent matches first."""
        ...
