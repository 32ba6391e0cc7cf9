"""Replay a recorded game through the orchestrator and session engine."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence
import logging

from models.player import LineupEntry, PlayerStatistics, TeamStatistics
from .at_bat import AtBat
from .config import RulesConfig
from .orchestrator import AtBatData, AtBatOrchestrator
from .scoreboard import Scoreboard
from .session import GameSessionEngine, lineup_ids
from .state import Count, GameSessionState
from .stats import calculate_team_statistics, update_player_statistics

logger = logging.getLogger(__name__)


@dataclass
class GameReplay:
    """Final state of a replayed game."""

    state: GameSessionState
    scoreboard: Scoreboard
    at_bats: List[AtBat]
    statistics: Dict[str, PlayerStatistics]
    away_lineup: List[LineupEntry] = field(default_factory=list)
    home_lineup: List[LineupEntry] = field(default_factory=list)
    unprocessed_plays: int = 0

    @property
    def completion_reason(self) -> Optional[str]:
        return self.state.completion_reason

    @property
    def is_complete(self) -> bool:
        return self.state.is_complete

    def lineup(self, side: str) -> List[LineupEntry]:
        if side not in ("away", "home"):
            raise KeyError(f"Unknown side: {side!r}")
        return self.away_lineup if side == "away" else self.home_lineup

    def team_statistics(self, side: str) -> TeamStatistics:
        return calculate_team_statistics(
            self.statistics[entry.player_id] for entry in self.lineup(side)
        )


def _entries(lineup: Sequence[Any]) -> List[LineupEntry]:
    entries: List[LineupEntry] = []
    for entry in lineup:
        if isinstance(entry, LineupEntry):
            entries.append(entry)
        elif isinstance(entry, str):
            entries.append(LineupEntry(entry, f"Player {entry}"))
        elif isinstance(entry, Mapping):
            pid = entry.get("player_id") or entry.get("playerId")
            name = entry.get("player_name") or entry.get("playerName")
            entries.append(LineupEntry(pid, name or f"Player {pid}"))
        else:
            entries.append(LineupEntry(entry.player_id, entry.player_name))
    return entries


def _field(play: Any, name: str, default: Any = None) -> Any:
    if isinstance(play, Mapping):
        return play.get(name, default)
    return getattr(play, name, default)


def _due_up(lineup: List[LineupEntry], batter_id: Optional[str]) -> List[LineupEntry]:
    """Return ``lineup`` rotated so ``batter_id`` leads off."""

    ids = lineup_ids(lineup)
    if batter_id not in ids:
        return list(lineup)
    index = ids.index(batter_id)
    return lineup[index:] + lineup[:index]


def replay_game(
    plays: Iterable[Any],
    away_lineup: Sequence[Any],
    home_lineup: Sequence[Any],
    config: RulesConfig | None = None,
) -> GameReplay:
    """Apply ``plays`` in order and return the resulting game.

    Each play supplies ``result`` and optionally ``balls``, ``strikes`` and a
    base-keyed ``advancement`` override map.  The batter is always whoever is
    due up; each team keeps its place in the order across half-innings.
    Plays after the game reaches a final state are not applied.
    """

    config = config or RulesConfig()
    engine = GameSessionEngine(config)
    orchestrator = AtBatOrchestrator(config)

    lineups = {"away": _entries(away_lineup), "home": _entries(home_lineup)}
    for side, entries in lineups.items():
        if not entries:
            raise ValueError(f"The {side} lineup is empty")
    due_up = {side: entries[0].player_id for side, entries in lineups.items()}

    statistics: Dict[str, PlayerStatistics] = {
        entry.player_id: PlayerStatistics()
        for entries in lineups.values()
        for entry in entries
    }
    state = engine.start_game(lineups["away"])
    scoreboard = Scoreboard.empty()
    at_bats: List[AtBat] = []

    remaining = list(plays)
    for index, play in enumerate(remaining):
        if state.is_complete:
            skipped = len(remaining) - index
            logger.warning("Game already complete; %d play(s) not applied", skipped)
            return GameReplay(
                state, scoreboard, at_bats, statistics,
                lineups["away"], lineups["home"], unprocessed_plays=skipped,
            )

        side = state.batting_side
        batter_id = state.current_batter_id
        data = AtBatData(
            batter_id=batter_id,
            result=_field(play, "result"),
            final_count=Count(
                int(_field(play, "balls", 0) or 0), int(_field(play, "strikes", 0) or 0)
            ),
            baserunner_advancement=dict(_field(play, "advancement") or {}),
        )
        processed = orchestrator.process_at_bat(
            data,
            state.baserunners,
            state.outs,
            lineups[side],
            scoreboard=scoreboard,
            inning=state.inning,
            is_top=state.is_top,
        )
        at_bat = processed.at_bat
        at_bats.append(at_bat)
        scoreboard = processed.scoreboard

        for player_id in {batter_id, *processed.runs_scored}:
            current = statistics.setdefault(player_id, PlayerStatistics())
            statistics[player_id] = update_player_statistics(player_id, current, at_bat)

        due_up[side] = processed.next_batter_id
        state = state.with_changes(
            outs=0 if processed.should_advance_inning else state.outs + processed.outs_produced,
            baserunners=processed.final_baserunner_state,
            count=Count(),
            current_batter_id=processed.next_batter_id,
            home_score=scoreboard.home_score,
            away_score=scoreboard.away_score,
        )

        if processed.should_advance_inning:
            next_side = "home" if state.is_top else "away"
            advancement = engine.advance_inning(
                state, scoreboard, _due_up(lineups[next_side], due_up[next_side])
            )
            state = advancement.state

    return GameReplay(
        state, scoreboard, at_bats, statistics, lineups["away"], lineups["home"]
    )


__all__ = ["GameReplay", "replay_game"]
