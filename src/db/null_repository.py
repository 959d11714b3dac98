"""Local-only mode: a StatsRepository that stores nothing. Used when the real store cannot be reached at startup."""

from typing import Optional

from src.core.models import MatchRecord


class NullStatsRepository:
    def load_win_count(self, player_id: str) -> int:
        return 0

    def record_match(self, record: MatchRecord) -> None:
        pass

    def increment_win_count(self, player_id: str, new_total: int) -> None:
        pass

    def record_result(
        self, record: MatchRecord, player_id: str, new_total: Optional[int]
    ) -> None:
        pass

    def recent_matches(self, limit: int = 10) -> list[MatchRecord]:
        return []
