import pytest

from models.player import LineupEntry
from utils.lineup_loader import PlayRecord, parse_advancement, read_lineup_file, read_play_log


def test_read_lineup_file_sorts_by_order(tmp_path, write_csv):
    path = write_csv(
        tmp_path / "away.csv",
        ["order", "player_id", "player_name"],
        [(2, "a2", "Bea"), (1, "a1", "Ann"), (3, "a3", "")],
    )
    lineup = read_lineup_file(path)
    assert lineup == [
        LineupEntry("a1", "Ann"),
        LineupEntry("a2", "Bea"),
        LineupEntry("a3", "Player a3"),
    ]


def test_duplicate_player_rejected(tmp_path, write_csv):
    path = write_csv(
        tmp_path / "dup.csv",
        ["order", "player_id", "player_name"],
        [(1, "a1", "Ann"), (2, "a1", "Ann")],
    )
    with pytest.raises(ValueError, match="multiple times"):
        read_lineup_file(path)


def test_missing_player_id_rejected(tmp_path, write_csv):
    path = write_csv(tmp_path / "bad.csv", ["order", "player_id", "player_name"], [(1, "", "Ann")])
    with pytest.raises(ValueError, match="Missing player_id"):
        read_lineup_file(path)


def test_bad_order_rejected(tmp_path, write_csv):
    path = write_csv(tmp_path / "bad.csv", ["order", "player_id", "player_name"], [("x", "a1", "Ann")])
    with pytest.raises(ValueError, match="Invalid batting order"):
        read_lineup_file(path)


def test_empty_lineup_rejected(tmp_path, write_csv):
    path = write_csv(tmp_path / "empty.csv", ["order", "player_id", "player_name"], [])
    with pytest.raises(ValueError):
        read_lineup_file(path)


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_lineup_file(tmp_path / "nope.csv")


def test_read_play_log(tmp_path, write_csv):
    path = write_csv(
        tmp_path / "plays.csv",
        ["result", "balls", "strikes", "advancement"],
        [("1B", 1, 2, ""), ("2B", "", "", "first=home;second=Third"), ("so", 0, 3, "")],
    )
    plays = read_play_log(path)
    assert plays[0] == PlayRecord("1B", 1, 2, {})
    assert plays[1] == PlayRecord("2B", 0, 0, {"first": "home", "second": "third"})
    assert plays[2].result == "so"


def test_play_log_requires_result(tmp_path, write_csv):
    path = write_csv(tmp_path / "plays.csv", ["result", "balls", "strikes", "advancement"], [("", 0, 0, "")])
    with pytest.raises(ValueError, match="line 2"):
        read_play_log(path)


def test_parse_advancement():
    assert parse_advancement("") == {}
    assert parse_advancement(" first = second ; ") == {"first": "second"}
    with pytest.raises(ValueError):
        parse_advancement("first-home")
