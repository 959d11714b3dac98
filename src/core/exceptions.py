"""Custom exceptions. Every layer raises a subclass of GameError so callers can catch them in one go."""


class GameError(Exception):
    """Top-level exception for this application."""


# --- Domain layer ---
class BoardError(GameError):
    """A board was built with values or a layout the rules do not allow."""


class InvalidMoveError(GameError):
    """Move rejected: no roll pending, lane index out of range, or lane already full."""


class GameStateError(GameError):
    """Operation not allowed in the current phase of the game."""


# --- API layer ---
class InvalidRequestError(GameError):
    """Request data could not be validated."""


# --- Persistence layer ---
class PersistenceError(GameError):
    """A call to the persistence collaborator failed.

    `code` mirrors the status code reported by remote stores ("unavailable", "resource-exhausted", ...).
    """

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.code = code


class RetryableError(PersistenceError):
    """Transient failure, worth another attempt."""


class PersistenceUnavailableError(RetryableError):
    def __init__(self, message: str = "stats store unavailable") -> None:
        super().__init__(message, code="unavailable")


class RetryExhaustedError(PersistenceError):
    """Gave up after the maximum number of attempts. The last failure is chained as __cause__."""

    def __init__(self, message: str, attempts: int) -> None:
        super().__init__(message)
        self.attempts = attempts
