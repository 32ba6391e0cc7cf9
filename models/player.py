from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Dict, NamedTuple


class LineupEntry(NamedTuple):
    """One batting order slot as supplied by the lineup collaborator."""

    player_id: str
    player_name: str


def _rate(numerator: float, denominator: float) -> float:
    return round(numerator / denominator, 3) if denominator else 0.0


def batting_average(hits: int, at_bats: int) -> float:
    return _rate(hits, at_bats)


def on_base_percentage(
    hits: int, walks: int, hit_by_pitch: int, at_bats: int, sacrifice_flies: int
) -> float:
    return _rate(
        hits + walks + hit_by_pitch,
        at_bats + walks + hit_by_pitch + sacrifice_flies,
    )


def slugging_percentage(
    singles: int, doubles: int, triples: int, home_runs: int, at_bats: int
) -> float:
    return _rate(singles + 2 * doubles + 3 * triples + 4 * home_runs, at_bats)


def on_base_plus_slugging(obp: float, slg: float) -> float:
    return round(obp + slg, 3)


@dataclass(frozen=True)
class PlayerStatistics:
    """Counting batting stats for one player.

    Rates are properties so they are always derived from the counters and can
    never drift out of sync with them.
    """

    plate_appearances: int = 0
    at_bats: int = 0
    hits: int = 0
    singles: int = 0
    doubles: int = 0
    triples: int = 0
    home_runs: int = 0
    walks: int = 0
    strikeouts: int = 0
    runs: int = 0
    rbis: int = 0
    sacrifice_flies: int = 0
    hit_by_pitch: int = 0

    @property
    def total_bases(self) -> int:
        return self.singles + 2 * self.doubles + 3 * self.triples + 4 * self.home_runs

    @property
    def batting_average(self) -> float:
        return batting_average(self.hits, self.at_bats)

    @property
    def on_base_percentage(self) -> float:
        return on_base_percentage(
            self.hits, self.walks, self.hit_by_pitch, self.at_bats, self.sacrifice_flies
        )

    @property
    def slugging_percentage(self) -> float:
        return slugging_percentage(
            self.singles, self.doubles, self.triples, self.home_runs, self.at_bats
        )

    @property
    def ops(self) -> float:
        return on_base_plus_slugging(self.on_base_percentage, self.slugging_percentage)

    def incremented(self, **deltas: int) -> "PlayerStatistics":
        """Return a copy with each named counter increased by its delta."""

        return replace(self, **{k: getattr(self, k) + v for k, v in deltas.items()})

    def counters(self) -> Dict[str, int]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def rates(self) -> Dict[str, float]:
        return {
            "avg": self.batting_average,
            "obp": self.on_base_percentage,
            "slg": self.slugging_percentage,
            "ops": self.ops,
        }


@dataclass(frozen=True)
class TeamStatistics(PlayerStatistics):
    """Roster-wide totals; rates are recomputed from the summed counters."""

    players: int = 0


__all__ = [
    "LineupEntry",
    "PlayerStatistics",
    "TeamStatistics",
    "batting_average",
    "on_base_percentage",
    "slugging_percentage",
    "on_base_plus_slugging",
]
