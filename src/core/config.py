"""Single place for runtime configuration. Values are read from environment variables, with defaults for local play."""

import os
from dataclasses import dataclass

from src.core.shared_types import DEFAULT_DIFFICULTY, Difficulty

ENV_PREFIX = "KNUCKLEBONES_"


def _env(name: str, default: str) -> str:
    return os.environ.get(f"{ENV_PREFIX}{name}", default)


@dataclass(frozen=True)
class Settings:
    database_url: str = "sqlite:///knucklebones.db"
    db_echo: bool = False
    # pacing delays (seconds): only there so a human can follow the Knucklebot's turn
    roll_delay: float = 0.5
    ai_move_delay: float = 1.5
    retry_attempts: int = 5
    retry_base_delay: float = 0.5
    difficulty: Difficulty = DEFAULT_DIFFICULTY
    player_name: str = "Player"
    bot_name: str = "Knucklebot"


def get_settings() -> Settings:
    """Build the settings from the current environment."""
    return Settings(
        database_url=_env("DATABASE_URL", Settings.database_url),
        db_echo=_env("DB_ECHO", "false").lower() in ("1", "true", "yes"),
        roll_delay=float(_env("ROLL_DELAY", str(Settings.roll_delay))),
        ai_move_delay=float(_env("AI_MOVE_DELAY", str(Settings.ai_move_delay))),
        retry_attempts=int(_env("RETRY_ATTEMPTS", str(Settings.retry_attempts))),
        retry_base_delay=float(
            _env("RETRY_BASE_DELAY", str(Settings.retry_base_delay))
        ),
        difficulty=Difficulty.from_label(_env("DIFFICULTY", Settings.difficulty.value)),
        player_name=_env("PLAYER_NAME", Settings.player_name),
        bot_name=_env("BOT_NAME", Settings.bot_name),
    )
