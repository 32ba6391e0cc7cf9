"""Replay a recorded softball game and print its box score."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys
from typing import Iterable

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from scoring.boxscore import batting_frame, line_score_frame  # noqa: E402
from scoring.config import load_config  # noqa: E402
from scoring.game_log import replay_game  # noqa: E402
from utils.lineup_loader import read_lineup_file, read_play_log  # noqa: E402


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Replay a play log and print the box score")
    parser.add_argument("away_lineup", type=Path, help="CSV batting order for the away team")
    parser.add_argument("home_lineup", type=Path, help="CSV batting order for the home team")
    parser.add_argument("plays", type=Path, help="CSV play log (result,balls,strikes,advancement)")
    parser.add_argument(
        "--rules",
        type=Path,
        help="JSON file overriding the default rules (default: SCORING_RULES_PATH or data/scoring_rules.json)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING)",
    )
    return parser.parse_args(argv)


def main(argv: Iterable[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    config = load_config(args.rules)
    away = read_lineup_file(args.away_lineup)
    home = read_lineup_file(args.home_lineup)
    plays = read_play_log(args.plays)

    replay = replay_game(plays, away, home, config)

    print(line_score_frame(replay).to_string())
    for side in ("away", "home"):
        print()
        print(f"{side.title()} batting")
        print(batting_frame(replay, side).drop(columns=["player_id"]).to_string(index=False))

    board = replay.scoreboard
    status = f"Final ({replay.completion_reason})" if replay.is_complete else "In progress"
    print()
    print(f"{status}: Away {board.away_score}, Home {board.home_score}")
    if replay.unprocessed_plays:
        print(f"{replay.unprocessed_plays} play(s) after the final out were not applied")
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
