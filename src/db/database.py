"""Engine setup and access to the stats store"""

import logging

from sqlalchemy import Engine, create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from src.core.config import Settings, get_settings
from src.db.null_repository import NullStatsRepository
from src.db.repository import StatsRepository
from src.db.schema import Base
from src.db.sql_repository import SQLStatsRepository

logger = logging.getLogger(__name__)


def build_engine(settings: Settings) -> Engine:
    engine = create_engine(settings.database_url, echo=settings.db_echo)
    # Ensure all tables are created
    Base.metadata.create_all(bind=engine)
    return engine


def open_stats_repository(settings: Settings | None = None) -> StatsRepository:
    """
    Connect to the stats store.

    If that fails the game is still playable: fall back to local-only mode (no stats loaded or saved).
    """
    settings = settings or get_settings()
    try:
        engine = build_engine(settings)
        session = sessionmaker(bind=engine)()
    except SQLAlchemyError:
        logger.exception(
            "Could not open stats store at %s. Playing in local-only mode.",
            settings.database_url,
        )
        return NullStatsRepository()
    return SQLStatsRepository(session)
