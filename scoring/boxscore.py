"""Tabular box score views of a replayed game."""
from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List

import pandas as pd

from models.player import PlayerStatistics

if TYPE_CHECKING:
    from .game_log import GameReplay


# Display column -> PlayerStatistics attribute.
BATTING_COLUMNS: Dict[str, str] = {
    "PA": "plate_appearances",
    "AB": "at_bats",
    "R": "runs",
    "H": "hits",
    "2B": "doubles",
    "3B": "triples",
    "HR": "home_runs",
    "RBI": "rbis",
    "BB": "walks",
    "SO": "strikeouts",
    "SF": "sacrifice_flies",
    "AVG": "batting_average",
    "OBP": "on_base_percentage",
    "SLG": "slugging_percentage",
    "OPS": "ops",
}

SIDES = ("away", "home")


def _stat_row(stats: PlayerStatistics) -> Dict[str, float]:
    return {column: getattr(stats, attr) for column, attr in BATTING_COLUMNS.items()}


def batting_frame(replay: "GameReplay", side: str) -> pd.DataFrame:
    """Return one row per batter of ``side`` in batting order."""

    rows: List[Dict[str, object]] = []
    for entry in replay.lineup(side):
        stats = replay.statistics.get(entry.player_id, PlayerStatistics())
        rows.append({"player_id": entry.player_id, "player": entry.player_name, **_stat_row(stats)})
    return pd.DataFrame(rows, columns=["player_id", "player", *BATTING_COLUMNS])


def team_totals_frame(replay: "GameReplay") -> pd.DataFrame:
    """Return summed batting lines for both teams indexed by side.

    Rates are taken from the summed counters, not averaged across players.
    """

    rows = [_stat_row(replay.team_statistics(side)) for side in SIDES]
    return pd.DataFrame(rows, index=pd.Index(SIDES, name="team"), columns=list(BATTING_COLUMNS))


def line_score_frame(replay: "GameReplay") -> pd.DataFrame:
    """Return runs by inning plus total runs and hits for each team.

    A half-inning the home team never batted in is shown as ``"X"``.
    """

    scoreboard = replay.scoreboard
    last_inning = max(
        [score.inning for score in scoreboard.innings]
        + [ab.inning for ab in replay.at_bats if ab.inning is not None]
        + [1]
    )
    innings = range(1, last_inning + 1)
    frame = pd.DataFrame(
        {
            str(n): [
                (scoreboard.inning_score(n).away_runs if scoreboard.inning_score(n) else 0),
                (scoreboard.inning_score(n).home_runs if scoreboard.inning_score(n) else 0),
            ]
            for n in innings
        },
        index=pd.Index(SIDES, name="team"),
    )

    state = replay.state
    if replay.is_complete and not state.is_top and state.inning <= last_inning:
        frame[str(state.inning)] = frame[str(state.inning)].astype(object)
        frame.loc["home", str(state.inning)] = "X"

    frame["R"] = [scoreboard.away_score, scoreboard.home_score]
    frame["H"] = [replay.team_statistics(side).hits for side in SIDES]
    return frame


__all__ = ["BATTING_COLUMNS", "batting_frame", "team_totals_frame", "line_score_frame"]
