import csv
from pathlib import Path
from typing import Dict, List, NamedTuple

from models.player import LineupEntry
from scoring.config import get_base_dir


class PlayRecord(NamedTuple):
    """One row of a play log: the outcome and how the runners moved."""

    result: str
    balls: int
    strikes: int
    advancement: Dict[str, str]


def _resolve(path: str | Path) -> Path:
    path = Path(path)
    if not path.is_absolute():
        path = get_base_dir() / path
    return path


def read_lineup_file(path: str | Path) -> List[LineupEntry]:
    """Return lineup entries parsed from ``path`` in batting order.

    The file must contain columns ``order,player_id,player_name``.  Rows are
    sorted by ``order``; a lineup needs at least one player and every
    ``player_id`` must be unique.
    """

    file_path = _resolve(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Lineup file not found: {file_path}")

    rows: List[tuple[int, LineupEntry]] = []
    seen: set[str] = set()
    with file_path.open(newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        for row in reader:
            player_id = (row.get("player_id") or "").strip()
            name = (row.get("player_name") or "").strip()
            order = (row.get("order") or "").strip()
            if not player_id:
                raise ValueError(f"Missing player_id in lineup file {file_path}")
            if player_id in seen:
                raise ValueError(
                    f"Player {player_id} appears multiple times in the lineup"
                )
            try:
                slot = int(order)
            except ValueError:
                raise ValueError(
                    f"Invalid batting order {order!r} for {player_id} in {file_path}"
                ) from None
            seen.add(player_id)
            rows.append((slot, LineupEntry(player_id, name or f"Player {player_id}")))

    if not rows:
        raise ValueError(f"Lineup file {file_path} does not list any players")
    rows.sort(key=lambda item: item[0])
    return [entry for _, entry in rows]


def parse_advancement(text: str) -> Dict[str, str]:
    """Parse ``"first=home;second=third"`` into a base-to-target mapping."""

    advancement: Dict[str, str] = {}
    for part in (text or "").split(";"):
        part = part.strip()
        if not part:
            continue
        base, sep, target = part.partition("=")
        if not sep:
            raise ValueError(f"Malformed advancement entry: {part!r}")
        advancement[base.strip().lower()] = target.strip().lower()
    return advancement


def _int_field(row: Dict[str, str], name: str, line: int) -> int:
    value = (row.get(name) or "").strip()
    if not value:
        return 0
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"Invalid {name} value {value!r} on line {line}") from None


def read_play_log(path: str | Path) -> List[PlayRecord]:
    """Return plays from ``path`` in the order they happened.

    Columns are ``result,balls,strikes,advancement``; only ``result`` is
    required on each row.  Outcome codes are checked later by the engine.
    """

    file_path = _resolve(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Play log not found: {file_path}")

    plays: List[PlayRecord] = []
    with file_path.open(newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        for line, row in enumerate(reader, start=2):
            result = (row.get("result") or "").strip()
            if not result:
                raise ValueError(f"Missing result on line {line} of {file_path}")
            plays.append(
                PlayRecord(
                    result=result,
                    balls=_int_field(row, "balls", line),
                    strikes=_int_field(row, "strikes", line),
                    advancement=parse_advancement(row.get("advancement") or ""),
                )
            )
    return plays


__all__ = ["PlayRecord", "read_lineup_file", "read_play_log", "parse_advancement"]
