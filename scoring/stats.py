"""Run-batted-in attribution and batting statistic aggregation."""
from __future__ import annotations

from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, Iterable, Sequence

from models.player import (
    PlayerStatistics,
    TeamStatistics,
    batting_average as calculate_batting_average,
    on_base_percentage as calculate_on_base_percentage,
    on_base_plus_slugging as calculate_ops,
    slugging_percentage as calculate_slugging_percentage,
)
from .results import BattingResult
from .state import BaserunnerState
from .validation import ValidationResult

if TYPE_CHECKING:
    from .at_bat import AtBat


MAX_RBIS_PER_AT_BAT = 4

_HIT_COUNTERS = {
    BattingResult.SINGLE: "singles",
    BattingResult.DOUBLE: "doubles",
    BattingResult.TRIPLE: "triples",
    BattingResult.HOME_RUN: "home_runs",
}


@dataclass(frozen=True)
class RBICalculation:
    rbis: int
    explanation: str


def _plural(count: int) -> str:
    return f"{count} RBI{'s' if count != 1 else ''}"


def calculate_rbis(
    result: BattingResult,
    baserunners_before: BaserunnerState,
    runs_scored: Sequence[str],
    batter_id: str | None = None,
    *,
    max_rbis: int = MAX_RBIS_PER_AT_BAT,
) -> RBICalculation:
    """Return the RBIs credited to the batter for ``runs_scored``.

    Walks only drive in runs with the bases loaded, errors never do, and no
    plate appearance is credited with more than ``max_rbis``.  ``batter_id``
    is accepted for symmetry with the advancement helpers; the batter's own
    run on a home run is already part of ``runs_scored``.
    """

    runs = len(runs_scored)

    if result.is_walk:
        if baserunners_before.is_loaded:
            return RBICalculation(
                min(runs, max_rbis), "Walk with bases loaded forces runners home"
            )
        return RBICalculation(0, "Walk with bases not loaded produces no RBIs")

    if result is BattingResult.ERROR:
        return RBICalculation(0, "No RBIs awarded for runs scored on errors")

    rbis = min(runs, max_rbis)
    if result is BattingResult.HOME_RUN:
        explanation = f"Home run: {_plural(rbis)} (including batter)"
    elif result is BattingResult.SACRIFICE_FLY:
        explanation = f"Sacrifice fly: {_plural(rbis)} even though batter is out"
    elif result.is_hit:
        explanation = f"{result.label}: {_plural(rbis)} for runners scored"
    else:
        explanation = f"{_plural(rbis)} for runners scored"
    return RBICalculation(rbis, explanation)


def credit_run(stats: PlayerStatistics) -> PlayerStatistics:
    """Return ``stats`` with one more run scored."""

    return stats.incremented(runs=1)


def update_player_statistics(
    player_id: str, stats: PlayerStatistics, at_bat: "AtBat"
) -> PlayerStatistics:
    """Apply ``at_bat`` to ``player_id``'s statistics.

    The batter receives the full plate appearance line.  Any other player only
    gains a run when they crossed the plate on the play.
    """

    scored = player_id in at_bat.runs_scored
    if player_id != at_bat.batter_id:
        return credit_run(stats) if scored else stats

    result = at_bat.result
    deltas = {"plate_appearances": 1, "rbis": at_bat.rbis}
    if result.counts_as_at_bat:
        deltas["at_bats"] = 1
    if result.is_hit:
        deltas["hits"] = 1
        deltas[_HIT_COUNTERS[result]] = 1
    if result.is_walk:
        deltas["walks"] = 1
    if result is BattingResult.STRIKEOUT:
        deltas["strikeouts"] = 1
    if result is BattingResult.SACRIFICE_FLY:
        deltas["sacrifice_flies"] = 1
    if scored:
        deltas["runs"] = 1
    return stats.incremented(**deltas)


def calculate_team_statistics(players: Iterable[PlayerStatistics]) -> TeamStatistics:
    """Sum every counter across ``players``.

    Team rates come from the summed counters through the same properties a
    single player uses, never from an average of individual rates.
    """

    counter_names = [f.name for f in fields(PlayerStatistics)]
    totals = dict.fromkeys(counter_names, 0)
    count = 0
    for stats in players:
        count += 1
        for name in counter_names:
            totals[name] += getattr(stats, name)
    return TeamStatistics(players=count, **totals)


def calculate_team_batting_average(players: Iterable[PlayerStatistics]) -> float:
    return calculate_team_statistics(players).batting_average


def validate_statistics(stats: PlayerStatistics) -> ValidationResult:
    """Check that counters and rates are internally consistent."""

    errors: list[str] = []
    if stats.hits > stats.at_bats:
        errors.append("Hits cannot exceed at-bats")
    if stats.batting_average > 1.0:
        errors.append("Batting average cannot exceed 1.000")
    if stats.on_base_percentage > 1.0:
        errors.append("On-base percentage cannot exceed 1.000")
    if stats.slugging_percentage > 4.0:
        errors.append("Slugging percentage cannot exceed 4.000")
    if stats.singles + stats.doubles + stats.triples + stats.home_runs != stats.hits:
        errors.append("Sum of hit types must equal total hits")
    negative = [name for name, value in stats.counters().items() if value < 0]
    if negative:
        errors.append("Counters cannot be negative: " + ", ".join(negative))
    return ValidationResult.from_errors(errors)


__all__ = [
    "RBICalculation",
    "MAX_RBIS_PER_AT_BAT",
    "calculate_rbis",
    "credit_run",
    "update_player_statistics",
    "calculate_team_statistics",
    "calculate_team_batting_average",
    "validate_statistics",
    "calculate_batting_average",
    "calculate_on_base_percentage",
    "calculate_slugging_percentage",
    "calculate_ops",
]
