# gameforge/errors.py
from __future__ import annotations


class GameForgeError(Exception):
    """Base class for errors raised by the backend itself."""


class ConfigurationError(GameForgeError):
    """A deployment setting is missing or malformed. Raised at startup."""


class StorageError(GameForgeError):
    pass


class StorageUnavailableError(StorageError):
    """A storage call kept failing after the whole retry budget was spent."""

    def __init__(self, context: str, attempts: int, last_error: BaseException | None):
        self.context = context
        self.attempts = attempts
        self.last_error = last_error
        detail = str(last_error) if last_error is not None else "Unknown error"
        super().__init__(f"Database operation failed after {attempts} attempts: {detail}")
