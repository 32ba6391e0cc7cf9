"""Immutable record of one completed plate appearance."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Iterable, Mapping, Optional
import uuid

from .advancement import (
    AdvancementResult,
    apply_manual_overrides,
    calculate_standard_advancement,
)
from .results import BattingResult
from .state import BaserunnerState, Count
from .stats import MAX_RBIS_PER_AT_BAT


def _now() -> datetime:
    return datetime.now()


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count != 1 else ''}"


@dataclass(frozen=True)
class AtBat:
    """A recorded plate appearance.

    Derived fields (``baserunners_after``, ``runs_scored``, ``rbis`` and
    ``outs_produced``) are always produced together by :meth:`record` or
    :meth:`corrected`; a correction never patches one of them on its own.
    ``running_errors`` lists runners who made a baserunning mistake and is
    independent of fielding errors.
    """

    batter_id: str
    result: BattingResult
    baserunners_before: BaserunnerState
    baserunners_after: BaserunnerState
    runs_scored: tuple[str, ...] = ()
    rbis: int = 0
    outs_produced: int = 0
    final_count: Count = field(default_factory=Count)
    pitch_sequence: tuple[str, ...] = ()
    running_errors: tuple[str, ...] = ()
    overrides: Mapping[str, str] = field(default_factory=dict)
    inning: Optional[int] = None
    is_top: Optional[bool] = None
    batting_position: Optional[int] = None
    at_bat_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    def __post_init__(self) -> None:
        if not 0 <= self.rbis <= MAX_RBIS_PER_AT_BAT:
            raise ValueError(f"RBIs must be between 0 and {MAX_RBIS_PER_AT_BAT}")
        if self.rbis > len(self.runs_scored):
            raise ValueError("RBIs cannot exceed runs scored")
        if self.batting_position is not None and not 1 <= self.batting_position <= 15:
            raise ValueError("Batting position must be between 1 and 15")
        if self.outs_produced < 0:
            raise ValueError("Outs produced cannot be negative")

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def record(
        cls,
        batter_id: str,
        result: BattingResult | str,
        baserunners_before: BaserunnerState,
        *,
        overrides: Mapping[str, str] | None = None,
        final_count: Count | None = None,
        pitch_sequence: Iterable[str] = (),
        running_errors: Iterable[str] = (),
        max_rbis: int = MAX_RBIS_PER_AT_BAT,
        **extra,
    ) -> "AtBat":
        """Derive the full record for ``result`` from ``baserunners_before``.

        ``overrides`` (keyed by runner id) switch the derivation to the manual
        advancement path.
        """

        result = BattingResult.parse(result)
        overrides = dict(overrides or {})
        advancement = derive_advancement(
            baserunners_before, result, batter_id, overrides, max_rbis=max_rbis
        )
        return cls(
            batter_id=batter_id,
            result=result,
            baserunners_before=baserunners_before,
            baserunners_after=advancement.after,
            runs_scored=advancement.runs_scored,
            rbis=advancement.rbis,
            outs_produced=advancement.outs_produced,
            final_count=final_count or Count(),
            pitch_sequence=tuple(pitch_sequence),
            running_errors=tuple(running_errors),
            overrides=overrides,
            **extra,
        )

    def corrected(
        self,
        result: BattingResult | str | None = None,
        *,
        overrides: Mapping[str, str] | None = None,
        running_errors: Iterable[str] | None = None,
        final_count: Count | None = None,
        max_rbis: int = MAX_RBIS_PER_AT_BAT,
        now: datetime | None = None,
    ) -> "AtBat":
        """Return a new record with every derived field recomputed.

        The original before-state, batter and identity are kept; omitted
        arguments fall back to the current values.
        """

        new_result = BattingResult.parse(result) if result is not None else self.result
        new_overrides = dict(self.overrides if overrides is None else overrides)
        advancement = derive_advancement(
            self.baserunners_before,
            new_result,
            self.batter_id,
            new_overrides,
            max_rbis=max_rbis,
        )
        return replace(
            self,
            result=new_result,
            baserunners_after=advancement.after,
            runs_scored=advancement.runs_scored,
            rbis=advancement.rbis,
            outs_produced=advancement.outs_produced,
            overrides=new_overrides,
            running_errors=(
                self.running_errors if running_errors is None else tuple(running_errors)
            ),
            final_count=final_count or self.final_count,
            updated_at=now or _now(),
        )

    def touch(self, now: datetime | None = None) -> "AtBat":
        """Return a copy carrying a fresh ``updated_at`` timestamp."""

        return replace(self, updated_at=now or _now())

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def is_hit(self) -> bool:
        return self.result.is_hit

    @property
    def is_out(self) -> bool:
        return self.result.is_out

    @property
    def batter_reached_base(self) -> bool:
        return self.result.reaches_base

    @property
    def is_sacrifice(self) -> bool:
        return self.result is BattingResult.SACRIFICE_FLY

    @property
    def total_bases(self) -> int:
        return self.result.bases_advanced if self.result.is_hit else 0

    @property
    def has_running_errors(self) -> bool:
        return bool(self.running_errors)

    def advanced_runners(self) -> bool:
        return self.baserunners_before != self.baserunners_after or bool(self.runs_scored)

    def summary(self) -> str:
        """Short scorebook line such as ``"2B 2 RBIs (2 runs scored)"``."""

        text = self.result.value
        if self.rbis:
            text += " " + (f"{self.rbis} RBI" if self.rbis == 1 else f"{self.rbis} RBIs")
        if self.runs_scored:
            text += f" ({_plural(len(self.runs_scored), 'run')} scored)"
        if self.running_errors:
            text += f" [{_plural(len(self.running_errors), 'running error')}]"
        return text


def derive_advancement(
    before: BaserunnerState,
    result: BattingResult,
    batter_id: str,
    overrides: Mapping[str, str] | None = None,
    *,
    max_rbis: int = MAX_RBIS_PER_AT_BAT,
) -> AdvancementResult:
    """Use the manual path when any override carries a non-blank target."""

    if has_manual_advancement(overrides):
        return apply_manual_overrides(
            before, result, batter_id, overrides or {}, max_rbis=max_rbis
        )
    return calculate_standard_advancement(before, result, batter_id, max_rbis=max_rbis)


def has_manual_advancement(overrides: Mapping[str, str] | None) -> bool:
    return bool(
        overrides
        and any(isinstance(v, str) and v.strip() for v in overrides.values())
    )


__all__ = ["AtBat", "derive_advancement", "has_manual_advancement"]
