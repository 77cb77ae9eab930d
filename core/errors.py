"""Exceptions raised by the Pandemic rules engine."""

from __future__ import annotations

from .constants import GameOverReason


class GameOver(Exception):
    """Raised from deep inside a rule when the session must end.

    The engine catches this at the top of ``step`` and marks the
    state terminal; it is never an error the caller retries.

    Attributes:
        reason: The condition that ended the game.
    """

    def __init__(self, reason: GameOverReason, message: str = ""):
        self.reason = reason
        super().__init__(message or f"Game over: {reason.value}")

    @property
    def victory(self) -> bool:
        """Whether the game ended in a win for the players."""
        return self.reason == GameOverReason.ALL_CURED


class IllegalActionError(Exception):
    """Raised when an action outside the offered set is applied."""
    pass
