"""Shared exception types for the scoring engine.

Only illegal-state failures are raised.  User-correctable input problems are
reported through :class:`scoring.validation.ValidationResult` instead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:  # pragma: no cover
    from scoring.validation import ValidationResult


class ScoringError(RuntimeError):
    """Base class for errors raised by the scoring engine."""


class IllegalAdvancement(ScoringError):
    """Raised when baserunner movement breaks the rules of the game."""

    def __init__(self, message: str, *, runner_id: str | None = None):
        self.runner_id = runner_id
        super().__init__(message)


class InvalidBattingResult(ScoringError, ValueError):
    """Raised when an outcome code is not part of the supported set."""

    def __init__(self, code: object):
        self.code = code
        super().__init__(f"Invalid batting result: {code!r}")


class GameAlreadyComplete(ScoringError):
    """Raised when play is requested after the game reached a final state."""

    def __init__(self, reason: str | None):
        self.reason = reason
        super().__init__(f"Game is already complete ({reason or 'unknown'})")


class AtBatValidationError(ScoringError, ValueError):
    """Raised when at-bat input fails validation inside the orchestrator.

    The full :class:`ValidationResult` is attached so callers can render the
    same ``errors`` list :func:`validate_at_bat_data` would have returned.
    """

    def __init__(self, validation: "ValidationResult"):
        self.validation = validation
        self.errors: list[str] = list(validation.errors)
        message = "Invalid at-bat data"
        if self.errors:
            message += ": " + "; ".join(self.errors)
        super().__init__(message)


def format_errors(errors: Iterable[str]) -> str:
    """Return ``errors`` joined for single-line log output."""

    return "; ".join(errors) or "no errors"


__all__ = [
    "ScoringError",
    "IllegalAdvancement",
    "InvalidBattingResult",
    "GameAlreadyComplete",
    "AtBatValidationError",
    "format_errors",
]
