"""Running game score with inning-by-inning detail."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

from .config import RulesConfig
from .validation import ValidationResult


@dataclass(frozen=True)
class InningScore:
    inning: int
    home_runs: int = 0
    away_runs: int = 0


@dataclass(frozen=True)
class Scoreboard:
    """Immutable score state.

    When ``innings`` are present the totals must equal their sums.
    """

    home_score: int = 0
    away_score: int = 0
    innings: tuple[InningScore, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        for value in (self.home_score, self.away_score):
            if not isinstance(value, int) or isinstance(value, bool):
                raise ValueError("Scores must be whole numbers")
            if value < 0:
                raise ValueError("Scores cannot be negative")
        if self.innings:
            home = sum(i.home_runs for i in self.innings)
            away = sum(i.away_runs for i in self.innings)
            if home != self.home_score:
                raise ValueError(
                    f"Home score ({self.home_score}) does not match sum of inning scores ({home})"
                )
            if away != self.away_score:
                raise ValueError(
                    f"Away score ({self.away_score}) does not match sum of inning scores ({away})"
                )

    @classmethod
    def empty(cls) -> "Scoreboard":
        return cls()

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    def add_runs(self, runs: int, inning: int, is_top: bool) -> "Scoreboard":
        """Credit ``runs`` to the team batting in the given half-inning."""

        if is_top:
            return self.add_away_runs(runs, inning)
        return self.add_home_runs(runs, inning)

    def add_home_runs(self, runs: int, inning: int) -> "Scoreboard":
        return self._add(runs, inning, home=True)

    def add_away_runs(self, runs: int, inning: int) -> "Scoreboard":
        return self._add(runs, inning, home=False)

    def _add(self, runs: int, inning: int, *, home: bool) -> "Scoreboard":
        if runs < 0:
            raise ValueError("Cannot add negative runs")
        if inning < 1:
            raise ValueError("Inning must be positive")

        by_inning: Dict[int, InningScore] = {i.inning: i for i in self.innings}
        current = by_inning.get(inning, InningScore(inning))
        if home:
            current = InningScore(inning, current.home_runs + runs, current.away_runs)
        else:
            current = InningScore(inning, current.home_runs, current.away_runs + runs)
        by_inning[inning] = current
        return Scoreboard(
            self.home_score + (runs if home else 0),
            self.away_score + (0 if home else runs),
            tuple(by_inning[n] for n in sorted(by_inning)),
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def run_differential(self) -> int:
        return abs(self.home_score - self.away_score)

    @property
    def winner(self) -> str:
        if self.home_score > self.away_score:
            return "home"
        if self.away_score > self.home_score:
            return "away"
        return "tied"

    @property
    def innings_played(self) -> int:
        return len(self.innings)

    def is_mercy(self, threshold: int = 10) -> bool:
        return self.run_differential >= threshold

    def inning_score(self, inning: int) -> Optional[InningScore]:
        for score in self.innings:
            if score.inning == inning:
                return score
        return None

    def display(self) -> str:
        return f"{self.home_score}-{self.away_score}"

    def summary(self, mercy_threshold: int = 10) -> Dict[str, object]:
        return {
            "home_score": self.home_score,
            "away_score": self.away_score,
            "winner": self.winner,
            "run_differential": self.run_differential,
            "innings_played": self.innings_played,
            "is_mercy_rule": self.is_mercy(mercy_threshold),
        }


def validate_score_update(
    scoreboard: Scoreboard, runs: int, config: RulesConfig | None = None
) -> ValidationResult:
    """Check that adding ``runs`` keeps the score plausible."""

    config = config or RulesConfig()
    errors: list[str] = []
    if runs < 0:
        errors.append("Runs scored cannot be negative")
    elif runs > config.max_runs_per_inning:
        errors.append(
            f"Runs scored ({runs}) exceeds maximum per inning ({config.max_runs_per_inning})"
        )
    if max(scoreboard.home_score, scoreboard.away_score) + max(runs, 0) > config.max_total_runs:
        errors.append(
            f"Total game score would exceed reasonable maximum ({config.max_total_runs})"
        )
    return ValidationResult.from_errors(errors)


__all__ = ["InningScore", "Scoreboard", "validate_score_update"]
