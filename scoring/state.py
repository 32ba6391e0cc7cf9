"""Immutable state containers used across the scoring engine.

Every transition produces a new instance; nothing in this module is edited in
place, which lets callers keep the previous value around for undo or for
optimistic display updates.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, Mapping, Optional

from models.player import LineupEntry
from .results import BASES


@dataclass(frozen=True)
class BaserunnerState:
    """Occupancy of the three bases by player id."""

    first: Optional[str] = None
    second: Optional[str] = None
    third: Optional[str] = None

    def __post_init__(self) -> None:
        runners = self.runners()
        if len(set(runners)) != len(runners):
            raise ValueError(f"A runner cannot occupy two bases at once: {self}")

    @classmethod
    def empty(cls) -> "BaserunnerState":
        return cls()

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any] | None) -> "BaserunnerState":
        """Build a state from ``{"first": ..., "second": ..., "third": ...}``.

        Values may be player ids, ``None``, mappings carrying ``player_id`` (or
        ``playerId``) or objects exposing a ``player_id`` attribute.
        """

        if not mapping:
            return cls()
        return cls(**{base: _runner_id(mapping.get(base)) for base in BASES})

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def is_empty(self) -> bool:
        return not (self.first or self.second or self.third)

    @property
    def is_loaded(self) -> bool:
        return bool(self.first and self.second and self.third)

    @property
    def runner_count(self) -> int:
        return len(self.runners())

    def runners(self) -> list[str]:
        """Return runners ordered from first base to third base."""

        return [pid for pid in (self.first, self.second, self.third) if pid]

    def occupant(self, base: str) -> Optional[str]:
        if base not in BASES:
            raise KeyError(f"Unknown base: {base!r}")
        return getattr(self, base)

    def has_runner(self, player_id: str) -> bool:
        return self.base_of(player_id) is not None

    def base_of(self, player_id: str) -> Optional[str]:
        for base in BASES:
            if getattr(self, base) == player_id:
                return base
        return None

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    def forced_advance(self, batter_id: str) -> tuple["BaserunnerState", list[str]]:
        """Place ``batter_id`` on first and push only the forced runners.

        A runner moves only when every base behind them is occupied, so the
        chain is walked from first base outward.
        """

        runs: list[str] = []
        first, second, third = self.first, self.second, self.third
        if first:
            if second:
                if third:
                    runs.append(third)
                third = second
            second = first
        return BaserunnerState(batter_id, second, third), runs

    # ------------------------------------------------------------------
    # Presentation helpers
    # ------------------------------------------------------------------
    def as_dict(self) -> Dict[str, Optional[str]]:
        return {base: getattr(self, base) for base in BASES}

    def with_names(
        self, lineup: Iterable[LineupEntry]
    ) -> Dict[str, Optional[LineupEntry]]:
        """Return occupied bases resolved to lineup entries for display."""

        by_id = {entry.player_id: entry for entry in lineup}
        resolved: Dict[str, Optional[LineupEntry]] = {}
        for base in BASES:
            pid = getattr(self, base)
            if pid is None:
                resolved[base] = None
            else:
                resolved[base] = by_id.get(pid) or LineupEntry(pid, f"Player {pid}")
        return resolved

    def __str__(self) -> str:
        parts = [
            f"{label}: {pid}"
            for label, pid in (("1B", self.first), ("2B", self.second), ("3B", self.third))
            if pid
        ]
        return ", ".join(parts) if parts else "Bases empty"


def _runner_id(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping):
        return value.get("player_id") or value.get("playerId") or None
    return getattr(value, "player_id", None) or None


@dataclass(frozen=True)
class Count:
    """Balls and strikes for the current plate appearance."""

    balls: int = 0
    strikes: int = 0

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.balls}-{self.strikes}"


@dataclass(frozen=True)
class GameSessionState:
    """Snapshot of a live game at the current plate appearance."""

    inning: int = 1
    is_top: bool = True
    outs: int = 0
    count: Count = field(default_factory=Count)
    baserunners: BaserunnerState = field(default_factory=BaserunnerState)
    current_batter_id: Optional[str] = None
    home_score: int = 0
    away_score: int = 0
    completion_reason: Optional[str] = None
    game_id: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return self.completion_reason is not None

    @property
    def batting_side(self) -> str:
        """``"away"`` bats in the top half, ``"home"`` in the bottom."""

        return "away" if self.is_top else "home"

    @property
    def half_label(self) -> str:
        return f"{'Top' if self.is_top else 'Bottom'} {ordinal(self.inning)}"

    def with_changes(self, **changes: Any) -> "GameSessionState":
        return replace(self, **changes)


def ordinal(number: int) -> str:
    """Return ``number`` with its English ordinal suffix (1st, 2nd, 11th)."""

    if 10 <= number % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")
    return f"{number}{suffix}"


__all__ = ["BaserunnerState", "Count", "GameSessionState", "ordinal"]
