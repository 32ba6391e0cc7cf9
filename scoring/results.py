"""Outcome codes and the fixed vocabulary used by the scoring engine."""
from __future__ import annotations

from enum import Enum

from utils.exceptions import InvalidBattingResult


# Base names in order from home plate.
BASES: tuple[str, ...] = ("first", "second", "third")

# Destinations a scorer may assign to a runner on a manual override.
STAY = "stay"
HOME = "home"
OUT = "out"
ADVANCEMENT_TARGETS: tuple[str, ...] = (STAY, "second", "third", HOME, OUT)

# Pitch kinds accepted by the count tracker.
BALL = "ball"
STRIKE = "strike"
FOUL = "foul"
PITCH_KINDS: tuple[str, ...] = (BALL, STRIKE, FOUL)


class BattingResult(Enum):
    """Closed set of plate appearance outcomes.

    Triple plays are not modelled; a play retiring three batters-and-runners
    has to be recorded as ``DP`` plus a manual ``out`` override.
    """

    SINGLE = "1B"
    DOUBLE = "2B"
    TRIPLE = "3B"
    HOME_RUN = "HR"
    WALK = "BB"
    INTENTIONAL_WALK = "IBB"
    STRIKEOUT = "SO"
    GROUND_OUT = "GO"
    AIR_OUT = "AO"
    SACRIFICE_FLY = "SF"
    FIELDERS_CHOICE = "FC"
    ERROR = "E"
    DOUBLE_PLAY = "DP"

    @classmethod
    def parse(cls, code: "BattingResult | str") -> "BattingResult":
        """Return the member for ``code`` or raise :class:`InvalidBattingResult`."""

        if isinstance(code, cls):
            return code
        if not isinstance(code, str):
            raise InvalidBattingResult(code)
        try:
            return cls(code.strip().upper())
        except ValueError:
            raise InvalidBattingResult(code) from None

    @property
    def is_hit(self) -> bool:
        return self in _HITS

    @property
    def is_walk(self) -> bool:
        return self in (BattingResult.WALK, BattingResult.INTENTIONAL_WALK)

    @property
    def outs_produced(self) -> int:
        """Outs credited to the play before any runner is retired on the bases."""

        return _BASE_OUTS.get(self, 0)

    @property
    def is_out(self) -> bool:
        return self.outs_produced > 0

    @property
    def reaches_base(self) -> bool:
        return self in _REACHES_BASE

    @property
    def counts_as_at_bat(self) -> bool:
        return self not in (
            BattingResult.WALK,
            BattingResult.INTENTIONAL_WALK,
            BattingResult.SACRIFICE_FLY,
        )

    @property
    def bases_advanced(self) -> int:
        """Bases the batter gains on the play (4 means the batter scored)."""

        return _BATTER_BASES.get(self, 0)

    @property
    def label(self) -> str:
        return _LABELS[self]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.value


_HITS = frozenset(
    {
        BattingResult.SINGLE,
        BattingResult.DOUBLE,
        BattingResult.TRIPLE,
        BattingResult.HOME_RUN,
    }
)

_REACHES_BASE = _HITS | {
    BattingResult.WALK,
    BattingResult.INTENTIONAL_WALK,
    BattingResult.ERROR,
    BattingResult.FIELDERS_CHOICE,
}

_BASE_OUTS = {
    BattingResult.DOUBLE_PLAY: 2,
    BattingResult.STRIKEOUT: 1,
    BattingResult.GROUND_OUT: 1,
    BattingResult.AIR_OUT: 1,
    BattingResult.SACRIFICE_FLY: 1,
}

_BATTER_BASES = {
    BattingResult.SINGLE: 1,
    BattingResult.DOUBLE: 2,
    BattingResult.TRIPLE: 3,
    BattingResult.HOME_RUN: 4,
    BattingResult.WALK: 1,
    BattingResult.INTENTIONAL_WALK: 1,
    BattingResult.ERROR: 1,
    BattingResult.FIELDERS_CHOICE: 1,
}

_LABELS = {
    BattingResult.SINGLE: "Single",
    BattingResult.DOUBLE: "Double",
    BattingResult.TRIPLE: "Triple",
    BattingResult.HOME_RUN: "Home run",
    BattingResult.WALK: "Walk",
    BattingResult.INTENTIONAL_WALK: "Intentional walk",
    BattingResult.STRIKEOUT: "Strikeout",
    BattingResult.GROUND_OUT: "Ground out",
    BattingResult.AIR_OUT: "Air out",
    BattingResult.SACRIFICE_FLY: "Sacrifice fly",
    BattingResult.FIELDERS_CHOICE: "Fielder's choice",
    BattingResult.ERROR: "Error",
    BattingResult.DOUBLE_PLAY: "Double play",
}


__all__ = [
    "BattingResult",
    "BASES",
    "ADVANCEMENT_TARGETS",
    "PITCH_KINDS",
    "STAY",
    "HOME",
    "OUT",
    "BALL",
    "STRIKE",
    "FOUL",
]
