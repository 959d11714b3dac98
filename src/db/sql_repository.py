"""Implementation of (Stats)Repository using SQLAlchemy"""

from contextlib import contextmanager
from datetime import timezone
from typing import Iterator, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.core.models import MatchRecord
from src.db.schema import DBMatch, DBPlayerStats


class SQLStatsRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def load_win_count(self, player_id: str) -> int:
        stats = self._fetch_stats(player_id)
        return stats.wins if stats else 0

    def record_match(self, record: MatchRecord) -> None:
        with self._transaction():
            self._add_match(record)

    def increment_win_count(self, player_id: str, new_total: int) -> None:
        with self._transaction():
            self._set_wins(player_id, new_total)

    def record_result(
        self, record: MatchRecord, player_id: str, new_total: Optional[int]
    ) -> None:
        """Both writes go into a single transaction: either both are stored, or neither."""
        with self._transaction():
            self._add_match(record)
            if new_total is not None:
                self._set_wins(player_id, new_total)

    def recent_matches(self, limit: int = 10) -> list[MatchRecord]:
        query = select(DBMatch).order_by(DBMatch.id.desc()).limit(limit)
        return [self._to_model(match_db) for match_db in self.db.scalars(query)]

    def _fetch_stats(self, player_id: str) -> DBPlayerStats | None:
        query = select(DBPlayerStats).where(DBPlayerStats.player_id == player_id)
        return self.db.scalar(query)

    def _set_wins(self, player_id: str, new_total: int) -> None:
        stats = self._fetch_stats(player_id)
        if stats is None:
            self.db.add(DBPlayerStats(player_id=player_id, wins=new_total))
        else:
            stats.wins = new_total

    def _add_match(self, record: MatchRecord) -> None:
        self.db.add(
            DBMatch(
                player_one_name=record.player_one_name,
                player_two_name=record.player_two_name,
                score_one=record.score_one,
                score_two=record.score_two,
                winner=record.winner,
                difficulty=record.difficulty,
                timestamp=record.timestamp,
            )
        )

    @contextmanager
    def _transaction(self) -> Iterator[None]:
        """Commit everything added inside the block. Any failure on the way (query or commit) rolls it all back,
        so a retried write starts from a clean session."""
        try:
            yield
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def _to_model(self, match_db: DBMatch) -> MatchRecord:
        """Convert SQLAlchemy model to data transfer model."""
        # SQLite drops the tz info on the way back
        timestamp = match_db.timestamp
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        return MatchRecord(
            player_one_name=match_db.player_one_name,
            player_two_name=match_db.player_two_name,
            score_one=match_db.score_one,
            score_two=match_db.score_two,
            winner=match_db.winner,
            difficulty=match_db.difficulty,
            timestamp=timestamp,
        )
