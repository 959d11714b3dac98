"""Database tables / schema"""

from datetime import datetime

from sqlalchemy import String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from src.core.models import utc_now


class Base(DeclarativeBase):
    pass


class DBPlayerStats(Base):
    __tablename__ = "player_stats"
    player_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    wins: Mapped[int] = mapped_column(default=0)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)


class DBMatch(Base):
    __tablename__ = "matches"
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    player_one_name: Mapped[str]
    player_two_name: Mapped[str]
    score_one: Mapped[int]
    score_two: Mapped[int]
    winner: Mapped[str]
    difficulty: Mapped[str] = mapped_column(String(16))
    timestamp: Mapped[datetime] = mapped_column(default=utc_now)
