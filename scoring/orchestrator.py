"""Entry point used by callers that record plate appearances.

:class:`AtBatOrchestrator` validates raw at-bat input, runs the advancement
and statistics engines in order and returns a single
:class:`ProcessedAtBatResult`.  Overrides arrive from the scorer keyed by base
name; they are translated to player ids here so the engines only ever see
runner ids.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Sequence
import logging

from utils.exceptions import AtBatValidationError, format_errors
from .at_bat import AtBat
from .config import RulesConfig
from .results import ADVANCEMENT_TARGETS, BASES, BattingResult
from .scoreboard import Scoreboard, validate_score_update
from .session import lineup_ids, next_batter
from .state import BaserunnerState, Count
from .validation import ValidationResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AtBatData:
    """Raw plate appearance as submitted by the scorer."""

    batter_id: str
    result: BattingResult | str | None
    final_count: Count = field(default_factory=Count)
    pitch_sequence: tuple[str, ...] = ()
    baserunner_advancement: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AtBatData":
        """Build from a mapping using either snake_case or camelCase keys."""

        count = data.get("final_count", data.get("finalCount"))
        if count is None:
            count = Count()
        elif isinstance(count, Mapping):
            count = Count(count.get("balls", 0), count.get("strikes", 0))
        return cls(
            batter_id=data.get("batter_id", data.get("batterId")) or "",
            result=data.get("result"),
            final_count=count,
            pitch_sequence=tuple(
                data.get("pitch_sequence", data.get("pitchSequence")) or ()
            ),
            baserunner_advancement=dict(
                data.get("baserunner_advancement", data.get("baserunnerAdvancement"))
                or {}
            ),
        )


@dataclass(frozen=True)
class ScoreUpdate:
    home_score: int
    away_score: int


@dataclass(frozen=True)
class ProcessedAtBatResult:
    """Everything a caller needs to render the consequences of one at-bat."""

    final_baserunner_state: BaserunnerState
    runs_scored: tuple[str, ...]
    outs_produced: int
    next_batter_id: Optional[str]
    should_advance_inning: bool
    rbis: int = 0
    at_bat: Optional[AtBat] = None
    score_update: Optional[ScoreUpdate] = None
    scoreboard: Optional[Scoreboard] = None


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_at_bat_data(
    at_bat_data: AtBatData, config: RulesConfig | None = None
) -> ValidationResult:
    """Collect every problem with ``at_bat_data`` without raising."""

    config = config or RulesConfig()
    errors: list[str] = []

    if not at_bat_data.batter_id or not str(at_bat_data.batter_id).strip():
        errors.append("Batter ID is required")
    if not at_bat_data.result:
        errors.append("Batting result is required")

    count = at_bat_data.final_count
    if count is None:
        errors.append("Final count is required")
    elif not isinstance(count, Count):
        errors.append("Final count must include balls and strikes")
    else:
        if not _is_int(count.balls):
            errors.append("Ball count must be an integer")
        elif not 0 <= count.balls <= config.balls_for_walk:
            errors.append(f"Ball count must be between 0 and {config.balls_for_walk}")
        if not _is_int(count.strikes):
            errors.append("Strike count must be an integer")
        elif not 0 <= count.strikes <= config.strikes_for_strikeout:
            errors.append(
                f"Strike count must be between 0 and {config.strikes_for_strikeout}"
            )

    for base, target in (at_bat_data.baserunner_advancement or {}).items():
        if base not in BASES:
            errors.append(f"Invalid baserunner position: {base}")
        if target is None or target == "":
            continue
        if not isinstance(target, str):
            errors.append(f"Invalid advancement option: {target!r}")
        elif target.strip() and target.strip().lower() not in ADVANCEMENT_TARGETS:
            errors.append(f"Invalid advancement option: {target}")

    return ValidationResult.from_errors(errors)


class AtBatOrchestrator:
    """Run one plate appearance through the scoring engines."""

    def __init__(self, config: RulesConfig | None = None) -> None:
        self.config = config or RulesConfig()

    def validate_at_bat_data(self, at_bat_data: AtBatData) -> ValidationResult:
        return validate_at_bat_data(at_bat_data, self.config)

    def process_at_bat(
        self,
        at_bat_data: AtBatData | Mapping[str, Any],
        baserunners: BaserunnerState | Mapping[str, Any] | None,
        current_outs: int,
        lineup: Sequence[Any],
        *,
        scoreboard: Scoreboard | None = None,
        inning: int | None = None,
        is_top: bool | None = None,
    ) -> ProcessedAtBatResult:
        """Validate ``at_bat_data`` and return its consequences.

        A non-empty override map with at least one non-blank target replaces
        the automatic advancement.  When ``scoreboard``, ``inning`` and
        ``is_top`` are all given, the runs are added to the batting team and
        the new totals are returned as ``score_update``.

        Raises :class:`AtBatValidationError` for invalid input and
        :class:`InvalidBattingResult` for an unknown outcome code.
        """

        if not isinstance(at_bat_data, AtBatData):
            at_bat_data = AtBatData.from_dict(at_bat_data)
        if not isinstance(baserunners, BaserunnerState):
            baserunners = BaserunnerState.from_mapping(baserunners)

        validation = self.validate_at_bat_data(at_bat_data)
        outs_limit = self.config.outs_per_half_inning
        if not 0 <= current_outs < outs_limit:
            validation = ValidationResult.from_errors(
                validation.errors + (f"Current outs must be between 0 and {outs_limit - 1}",)
            )
        if not validation.is_valid:
            logger.warning("Rejected at-bat for %s: %s", at_bat_data.batter_id, format_errors(validation.errors))
            raise AtBatValidationError(validation)

        result = BattingResult.parse(at_bat_data.result)
        batter_id = at_bat_data.batter_id
        overrides = self._overrides_by_runner(at_bat_data.baserunner_advancement, baserunners)

        at_bat = AtBat.record(
            batter_id,
            result,
            baserunners,
            overrides=overrides,
            final_count=at_bat_data.final_count,
            pitch_sequence=at_bat_data.pitch_sequence,
            max_rbis=self.config.max_rbis_per_at_bat,
            inning=inning,
            is_top=is_top,
            batting_position=self._batting_position(batter_id, lineup),
        )

        should_advance = current_outs + at_bat.outs_produced >= outs_limit
        final_state = BaserunnerState.empty() if should_advance else at_bat.baserunners_after

        score_update = None
        new_scoreboard = None
        if scoreboard is not None and inning is not None and is_top is not None:
            runs = len(at_bat.runs_scored)
            check = validate_score_update(scoreboard, runs, self.config)
            if not check.is_valid:
                raise AtBatValidationError(check)
            new_scoreboard = scoreboard.add_runs(runs, inning, is_top)
            score_update = ScoreUpdate(new_scoreboard.home_score, new_scoreboard.away_score)

        logger.debug(
            "Processed %s for %s: %s, outs %d+%d",
            result.value,
            batter_id,
            at_bat.summary(),
            current_outs,
            at_bat.outs_produced,
        )
        return ProcessedAtBatResult(
            final_baserunner_state=final_state,
            runs_scored=at_bat.runs_scored,
            outs_produced=at_bat.outs_produced,
            next_batter_id=next_batter(batter_id, lineup),
            should_advance_inning=should_advance,
            rbis=at_bat.rbis,
            at_bat=at_bat,
            score_update=score_update,
            scoreboard=new_scoreboard,
        )

    def process_auto_completed_at_bat(
        self,
        result: BattingResult | str,
        batter_id: str,
        baserunners: BaserunnerState | Mapping[str, Any] | None,
        current_outs: int,
        lineup: Sequence[Any],
        *,
        final_count: Count | None = None,
        scoreboard: Scoreboard | None = None,
        inning: int | None = None,
        is_top: bool | None = None,
    ) -> ProcessedAtBatResult:
        """Process a walk or strikeout completed by the count tracker.

        Manual overrides do not apply; the final count defaults to ball four
        or strike three.  Any other result raises
        :class:`AtBatValidationError`.
        """

        result = BattingResult.parse(result)
        if not (result.is_walk or result is BattingResult.STRIKEOUT):
            validation = ValidationResult.from_errors(
                [f"Auto-completed at-bat must be a walk or strikeout, got {result.value}"]
            )
            logger.warning("Rejected auto-completed at-bat for %s: %s", batter_id, format_errors(validation.errors))
            raise AtBatValidationError(validation)
        if final_count is None:
            if result.is_walk:
                final_count = Count(self.config.balls_for_walk, 0)
            else:
                final_count = Count(0, self.config.strikes_for_strikeout)
        data = AtBatData(batter_id=batter_id, result=result, final_count=final_count)
        return self.process_at_bat(
            data,
            baserunners,
            current_outs,
            lineup,
            scoreboard=scoreboard,
            inning=inning,
            is_top=is_top,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _overrides_by_runner(
        advancement: Mapping[str, str] | None, baserunners: BaserunnerState
    ) -> Dict[str, str]:
        """Translate base-keyed overrides to runner ids.

        Blank targets are dropped and overrides for an empty base are ignored.
        """

        overrides: Dict[str, str] = {}
        for base, target in (advancement or {}).items():
            if not target or not target.strip():
                continue
            runner = baserunners.occupant(base)
            if runner is None:
                logger.warning("Ignoring override %r for empty base %s", target, base)
                continue
            overrides[runner] = target
        return overrides

    @staticmethod
    def _batting_position(batter_id: str, lineup: Sequence[Any]) -> Optional[int]:
        ids = lineup_ids(lineup)
        if batter_id not in ids:
            return None
        position = ids.index(batter_id) + 1
        return position if position <= 15 else None


__all__ = [
    "AtBatData",
    "AtBatOrchestrator",
    "ProcessedAtBatResult",
    "ScoreUpdate",
    "validate_at_bat_data",
]
