"""Configuration loader for the scoring rules.

League rules that vary between softball associations (regulation length,
mercy thresholds, count limits) live in :class:`RulesConfig`.  Defaults match
the standard seven inning game.  An optional JSON file may override any of the
values without touching code; unknown keys are rejected so a typo cannot
silently fall back to a default.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping
import json
import os
import sys


ENV_RULES_PATH = "SCORING_RULES_PATH"


def get_base_dir() -> Path:
    """Return project root or PyInstaller's temporary directory."""
    return Path(getattr(sys, "_MEIPASS", Path(__file__).resolve().parent.parent))


@dataclass(frozen=True)
class RulesConfig:
    """Rule values consumed by the session engine and orchestrator."""

    regulation_innings: int = 7
    mercy_min_inning: int = 5
    mercy_run_differential: int = 10
    outs_per_half_inning: int = 3
    balls_for_walk: int = 4
    strikes_for_strikeout: int = 3
    max_rbis_per_at_bat: int = 4
    max_runs_per_inning: int = 20
    max_total_runs: int = 100

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                raise ValueError(f"{f.name} must be a positive integer, got {value!r}")

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------
    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RulesConfig":
        """Create an instance from ``data`` rejecting unknown keys."""

        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            unknown_list = ", ".join(sorted(unknown))
            raise KeyError(f"Unknown rule keys: {unknown_list}")
        return cls(**dict(data))

    def with_overrides(self, overrides: Mapping[str, Any]) -> "RulesConfig":
        merged: Dict[str, Any] = asdict(self)
        merged.update(overrides)
        return type(self).from_dict(merged)

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)


def _resolve(path: str | Path) -> Path:
    path = Path(path)
    if not path.is_absolute():
        path = get_base_dir() / path
    return path


def load_config(path: str | Path | None = None) -> RulesConfig:
    """Load rules from ``path`` merged over the defaults.

    When ``path`` is ``None`` the ``SCORING_RULES_PATH`` environment variable
    is consulted, then ``data/scoring_rules.json`` under the project root.  A
    missing file or one that is not valid JSON leaves the defaults untouched.
    """

    if path is None:
        path = os.getenv(ENV_RULES_PATH) or Path("data") / "scoring_rules.json"
    rules_path = _resolve(path)

    config = RulesConfig()
    if not rules_path.exists():
        return config

    try:
        with rules_path.open("r", encoding="utf-8") as fh:
            overrides = json.load(fh)
    except json.JSONDecodeError:
        overrides = {}

    if isinstance(overrides, dict) and overrides:
        config = config.with_overrides(overrides)
    return config


__all__ = ["RulesConfig", "load_config", "get_base_dir", "ENV_RULES_PATH"]
