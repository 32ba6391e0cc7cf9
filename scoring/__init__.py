"""Softball scorekeeping rules engine.

Given a batting outcome and the current bases, outs and count, the modules in
this package compute the new base state, runs, RBIs and outs, rotate
half-innings, decide when a game is over and derive batting statistics.
Every operation is a pure function over immutable values.

The pandas box score helpers live in :mod:`scoring.boxscore` and are imported
on demand.
"""

from .config import RulesConfig, load_config  # noqa: F401
from .results import BattingResult, BASES, ADVANCEMENT_TARGETS, PITCH_KINDS  # noqa: F401
from .validation import ValidationResult  # noqa: F401
from .state import BaserunnerState, Count, GameSessionState  # noqa: F401
from .advancement import (  # noqa: F401
    AdvancementResult,
    calculate_standard_advancement,
    apply_manual_overrides,
    validate_manual_overrides,
)
from .stats import (  # noqa: F401
    calculate_rbis,
    update_player_statistics,
    calculate_team_statistics,
    validate_statistics,
)
from .at_bat import AtBat  # noqa: F401
from .scoreboard import Scoreboard, InningScore, validate_score_update  # noqa: F401
from .session import GameSessionEngine, next_batter  # noqa: F401
from .orchestrator import (  # noqa: F401
    AtBatData,
    AtBatOrchestrator,
    ProcessedAtBatResult,
    validate_at_bat_data,
)
from .game_log import GameReplay, replay_game  # noqa: F401

__all__ = [
    "RulesConfig",
    "load_config",
    "BattingResult",
    "BASES",
    "ADVANCEMENT_TARGETS",
    "PITCH_KINDS",
    "ValidationResult",
    "BaserunnerState",
    "Count",
    "GameSessionState",
    "AdvancementResult",
    "calculate_standard_advancement",
    "apply_manual_overrides",
    "validate_manual_overrides",
    "calculate_rbis",
    "update_player_statistics",
    "calculate_team_statistics",
    "validate_statistics",
    "AtBat",
    "Scoreboard",
    "InningScore",
    "validate_score_update",
    "GameSessionEngine",
    "next_batter",
    "AtBatData",
    "AtBatOrchestrator",
    "ProcessedAtBatResult",
    "validate_at_bat_data",
    "GameReplay",
    "replay_game",
]
