"""Live game session rules: count, outs, half-innings and completion.

The engine never edits a :class:`GameSessionState`; each call returns the next
state so the caller can keep or discard it.  A game reaches its terminal state
only through :meth:`GameSessionEngine.advance_inning`, either by regulation or
by the mercy rule.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Sequence
import logging

from utils.exceptions import GameAlreadyComplete
from .advancement import AdvancementResult, calculate_standard_advancement
from .config import RulesConfig
from .results import BALL, FOUL, PITCH_KINDS, STRIKE, BattingResult
from .scoreboard import Scoreboard
from .state import BaserunnerState, Count, GameSessionState
from .validation import ValidationResult

logger = logging.getLogger(__name__)

REGULATION = "regulation"
MERCY_RULE = "mercy-rule"
COMPLETION_REASONS = (REGULATION, MERCY_RULE)


@dataclass(frozen=True)
class CountUpdate:
    count: Count
    at_bat_complete: bool = False
    result: Optional[BattingResult] = None


@dataclass(frozen=True)
class AtBatSessionResult:
    state: GameSessionState
    advancement: AdvancementResult
    runs_scored: tuple[str, ...]
    outs_produced: int
    advance_inning: bool


@dataclass(frozen=True)
class InningAdvancement:
    state: GameSessionState
    game_completed: bool = False
    completion_reason: Optional[str] = None
    reason: Optional[str] = None


def lineup_ids(lineup: Sequence[Any] | None) -> list[str]:
    """Return player ids from lineup entries, mappings or plain ids."""

    ids: list[str] = []
    for entry in lineup or ():
        if isinstance(entry, str):
            ids.append(entry)
        elif isinstance(entry, dict):
            ids.append(entry.get("player_id") or entry.get("playerId"))
        else:
            ids.append(entry.player_id)
    return ids


def next_batter(current_batter_id: str | None, lineup: Sequence[Any] | None) -> Optional[str]:
    """Return the batter after ``current_batter_id``, wrapping past the end.

    An unknown or missing current batter leads off from the top of the order.
    """

    ids = lineup_ids(lineup)
    if not ids:
        return None
    if current_batter_id not in ids:
        return ids[0]
    return ids[(ids.index(current_batter_id) + 1) % len(ids)]


class GameSessionEngine:
    """Apply plate appearances and half-inning transitions to session state."""

    def __init__(self, config: RulesConfig | None = None) -> None:
        self.config = config or RulesConfig()

    # ------------------------------------------------------------------
    # Game lifecycle
    # ------------------------------------------------------------------
    def start_game(
        self, lineup: Sequence[Any] | None = None, game_id: str | None = None
    ) -> GameSessionState:
        """Return the opening state: top of the first, leadoff batter up."""

        ids = lineup_ids(lineup)
        return GameSessionState(game_id=game_id, current_batter_id=ids[0] if ids else None)

    def next_batter(self, current_batter_id: str | None, lineup: Sequence[Any] | None) -> Optional[str]:
        return next_batter(current_batter_id, lineup)

    # ------------------------------------------------------------------
    # Pitch-by-pitch
    # ------------------------------------------------------------------
    def update_count(self, count: Count, pitch: str) -> CountUpdate:
        """Apply ``pitch`` to ``count``.

        Four balls complete the plate appearance as a walk and three strikes as
        a strikeout.  A foul adds a strike only with fewer than two strikes, so
        it can never produce the third strike.
        """

        if pitch not in PITCH_KINDS:
            raise ValueError(f"Unknown pitch type: {pitch!r}")

        balls, strikes = count.balls, count.strikes
        result: Optional[BattingResult] = None
        if pitch == BALL:
            balls += 1
            if balls >= self.config.balls_for_walk:
                result = BattingResult.WALK
        elif pitch == STRIKE:
            strikes += 1
            if strikes >= self.config.strikes_for_strikeout:
                result = BattingResult.STRIKEOUT
        elif pitch == FOUL and strikes < self.config.strikes_for_strikeout - 1:
            strikes += 1

        new_count = Count(balls, strikes)
        logger.debug("Pitch %s: %s -> %s", pitch, count, new_count)
        return CountUpdate(new_count, result is not None, result)

    # ------------------------------------------------------------------
    # Plate appearances
    # ------------------------------------------------------------------
    def process_at_bat(
        self,
        state: GameSessionState,
        batter_id: str,
        result: BattingResult | str,
        lineup: Sequence[Any] | None = None,
    ) -> AtBatSessionResult:
        """Apply ``result`` using automatic advancement.

        Runs are credited to the team at bat.  When the play brings the outs
        to three the half-inning is over: outs reset, bases clear and
        ``advance_inning`` is set so the caller can call :meth:`advance_inning`.
        """

        if state.is_complete:
            raise GameAlreadyComplete(state.completion_reason)

        result = BattingResult.parse(result)
        advancement = calculate_standard_advancement(
            state.baserunners,
            result,
            batter_id,
            max_rbis=self.config.max_rbis_per_at_bat,
        )
        outs = state.outs + advancement.outs_produced
        inning_over = outs >= self.config.outs_per_half_inning
        runs = len(advancement.runs_scored)

        new_state = state.with_changes(
            outs=0 if inning_over else outs,
            baserunners=BaserunnerState.empty() if inning_over else advancement.after,
            count=Count(),
            current_batter_id=(
                next_batter(batter_id, lineup) if lineup else state.current_batter_id
            ),
            away_score=state.away_score + (runs if state.is_top else 0),
            home_score=state.home_score + (0 if state.is_top else runs),
        )
        logger.debug(
            "%s: %s %s, outs %d -> %d%s",
            state.half_label,
            batter_id,
            result.value,
            state.outs,
            outs,
            " (half-inning over)" if inning_over else "",
        )
        return AtBatSessionResult(
            state=new_state,
            advancement=advancement,
            runs_scored=advancement.runs_scored,
            outs_produced=advancement.outs_produced,
            advance_inning=inning_over,
        )

    # ------------------------------------------------------------------
    # Half-inning rotation
    # ------------------------------------------------------------------
    def advance_inning(
        self,
        state: GameSessionState,
        scoreboard: Scoreboard | None = None,
        lineup: Sequence[Any] | None = None,
    ) -> InningAdvancement:
        """Move to the next half-inning and decide whether the game is over.

        The scores come from ``scoreboard`` when supplied, otherwise from the
        session state.  ``lineup`` is the order of the team due up; its first
        slot becomes the current batter.
        """

        if state.is_complete:
            raise GameAlreadyComplete(state.completion_reason)

        cfg = self.config
        home = scoreboard.home_score if scoreboard is not None else state.home_score
        away = scoreboard.away_score if scoreboard is not None else state.away_score
        new_inning = state.inning if state.is_top else state.inning + 1
        new_is_top = not state.is_top

        reason: Optional[str] = None
        message: Optional[str] = None
        if not state.is_top and state.inning >= cfg.regulation_innings and home != away:
            reason = REGULATION
            leader = "Home" if home > away else "Away"
            message = f"{leader} team leads after regulation"
        elif new_inning >= cfg.mercy_min_inning and abs(home - away) >= cfg.mercy_run_differential:
            reason = MERCY_RULE
            message = "Game completed by mercy rule"

        ids = lineup_ids(lineup)
        new_state = state.with_changes(
            inning=new_inning,
            is_top=new_is_top,
            outs=0,
            count=Count(),
            baserunners=BaserunnerState.empty(),
            current_batter_id=ids[0] if ids else None,
            home_score=home,
            away_score=away,
            completion_reason=reason,
        )
        if reason:
            logger.info("Game over after %s: %s (%d-%d)", state.half_label, message, home, away)
        else:
            logger.info("End of %s, %s up (%d-%d)", state.half_label, new_state.half_label, home, away)
        return InningAdvancement(
            state=new_state,
            game_completed=reason is not None,
            completion_reason=reason,
            reason=message,
        )

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------
    def validate_game_state(self, state: GameSessionState) -> ValidationResult:
        cfg = self.config
        errors: list[str] = []
        if not 0 <= state.outs <= cfg.outs_per_half_inning:
            errors.append(f"Outs must be between 0 and {cfg.outs_per_half_inning}")
        if state.inning < 1:
            errors.append("Current inning must be at least 1")
        if state.home_score < 0 or state.away_score < 0:
            errors.append("Scores cannot be negative")
        if not 0 <= state.count.balls <= cfg.balls_for_walk:
            errors.append(f"Ball count must be between 0 and {cfg.balls_for_walk}")
        if not 0 <= state.count.strikes <= cfg.strikes_for_strikeout:
            errors.append(f"Strike count must be between 0 and {cfg.strikes_for_strikeout}")
        if state.completion_reason is not None and state.completion_reason not in COMPLETION_REASONS:
            errors.append(f"Unknown completion reason: {state.completion_reason}")
        return ValidationResult.from_errors(errors)


__all__ = [
    "GameSessionEngine",
    "CountUpdate",
    "AtBatSessionResult",
    "InningAdvancement",
    "REGULATION",
    "MERCY_RULE",
    "COMPLETION_REASONS",
    "next_batter",
    "lineup_ids",
]
