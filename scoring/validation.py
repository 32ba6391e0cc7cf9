"""Result record returned by every ``validate_*`` helper."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a validation pass.

    Validators never raise for user-correctable problems; they collect every
    message in ``errors`` so a caller can show all of them at once.
    """

    is_valid: bool
    errors: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_errors(cls, errors: Iterable[str]) -> "ValidationResult":
        errs = tuple(errors)
        return cls(is_valid=not errs, errors=errs)

    def __bool__(self) -> bool:
        return self.is_valid


__all__ = ["ValidationResult"]
