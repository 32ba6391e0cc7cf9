from itertools import cycle, islice

import pytest

from models.player import PlayerStatistics
from scoring.at_bat import AtBat
from scoring.results import BattingResult
from scoring.state import BaserunnerState
from scoring.stats import (
    calculate_batting_average,
    calculate_on_base_percentage,
    calculate_ops,
    calculate_rbis,
    calculate_slugging_percentage,
    calculate_team_batting_average,
    calculate_team_statistics,
    credit_run,
    update_player_statistics,
    validate_statistics,
)


def test_walk_rbis_only_with_bases_loaded(loaded_bases):
    assert calculate_rbis(BattingResult.WALK, loaded_bases, ["r3"]).rbis == 1
    partial = BaserunnerState("r1", "r2", None)
    calc = calculate_rbis(BattingResult.INTENTIONAL_WALK, partial, ["r2"])
    assert calc.rbis == 0
    assert "not loaded" in calc.explanation


def test_error_never_earns_rbis(loaded_bases):
    calc = calculate_rbis(BattingResult.ERROR, loaded_bases, ["r1", "r2", "r3"])
    assert calc.rbis == 0


def test_rbis_are_capped_at_four(loaded_bases):
    calc = calculate_rbis(BattingResult.DOUBLE, loaded_bases, ["a", "b", "c", "d", "e"])
    assert calc.rbis == 4


def test_custom_rbi_cap(loaded_bases):
    calc = calculate_rbis(BattingResult.HOME_RUN, loaded_bases, ["r1", "r2", "r3", "b"], max_rbis=2)
    assert calc.rbis == 2


def test_home_run_explanation_mentions_batter():
    calc = calculate_rbis(BattingResult.HOME_RUN, BaserunnerState(), ["b"], "b")
    assert calc.rbis == 1
    assert "including batter" in calc.explanation


def test_rate_helpers_handle_zero():
    assert calculate_batting_average(0, 0) == 0.0
    assert calculate_on_base_percentage(0, 0, 0, 0, 0) == 0.0
    assert calculate_slugging_percentage(0, 0, 0, 0, 0) == 0.0
    assert calculate_batting_average(1, 3) == pytest.approx(0.333)
    assert calculate_ops(0.4, 0.5) == pytest.approx(0.9)


def test_update_for_batter_counts_hit_and_rbis():
    at_bat = AtBat.record("b", "2B", BaserunnerState("r1", None, "r3"))
    stats = update_player_statistics("b", PlayerStatistics(), at_bat)
    assert stats.plate_appearances == 1
    assert stats.at_bats == 1
    assert stats.hits == 1
    assert stats.doubles == 1
    assert stats.rbis == 2
    assert stats.runs == 0
    assert stats.total_bases == 2
    assert stats.slugging_percentage == pytest.approx(2.0)


def test_walk_and_sacrifice_fly_are_not_at_bats():
    walk = AtBat.record("b", "BB", BaserunnerState())
    stats = update_player_statistics("b", PlayerStatistics(), walk)
    assert stats.at_bats == 0
    assert stats.walks == 1
    assert stats.on_base_percentage == pytest.approx(1.0)

    fly = AtBat.record("b", "SF", BaserunnerState(None, None, "r3"))
    stats = update_player_statistics("b", stats, fly)
    assert stats.at_bats == 0
    assert stats.sacrifice_flies == 1
    assert stats.rbis == 1
    assert stats.on_base_percentage == pytest.approx(0.5)


def test_home_run_credits_batter_run():
    at_bat = AtBat.record("b", "HR", BaserunnerState())
    stats = update_player_statistics("b", PlayerStatistics(), at_bat)
    assert stats.runs == 1
    assert stats.home_runs == 1
    assert stats.rbis == 1


def test_runner_only_gets_the_run():
    at_bat = AtBat.record("b", "1B", BaserunnerState(None, None, "r3"))
    stats = update_player_statistics("r3", PlayerStatistics(), at_bat)
    assert stats == PlayerStatistics(runs=1)
    untouched = update_player_statistics("other", PlayerStatistics(), at_bat)
    assert untouched == PlayerStatistics()
    assert credit_run(PlayerStatistics(runs=2)).runs == 3


def test_strikeout_counted():
    at_bat = AtBat.record("b", "SO", BaserunnerState())
    stats = update_player_statistics("b", PlayerStatistics(), at_bat)
    assert stats.strikeouts == 1
    assert stats.at_bats == 1
    assert stats.batting_average == 0.0


def test_statistics_stay_consistent_over_many_at_bats():
    stats = PlayerStatistics()
    bases = [BaserunnerState(), BaserunnerState("r1", "r2", "r3"), BaserunnerState(None, "r2", None)]
    codes = [r for r in BattingResult]
    for code, before in zip(codes * 3, islice(cycle(bases), len(codes) * 3)):
        at_bat = AtBat.record("b", code, before)
        stats = update_player_statistics("b", stats, at_bat)
        assert validate_statistics(stats).is_valid


def test_validate_statistics_flags_inconsistencies():
    bad = PlayerStatistics(at_bats=1, hits=2, singles=1)
    result = validate_statistics(bad)
    assert not result.is_valid
    assert "Hits cannot exceed at-bats" in result.errors
    assert "Sum of hit types must equal total hits" in result.errors


def test_team_rates_come_from_summed_counters():
    a = PlayerStatistics(at_bats=1, hits=1, singles=1)
    b = PlayerStatistics(at_bats=3, hits=0)
    team = calculate_team_statistics([a, b])
    assert team.players == 2
    assert team.at_bats == 4
    assert team.hits == 1
    # (1.000 + .000) / 2 would give .500
    assert team.batting_average == pytest.approx(0.25)
    assert calculate_team_batting_average([a, b]) == pytest.approx(0.25)
    assert validate_statistics(team).is_valid


def test_empty_team():
    team = calculate_team_statistics([])
    assert team.players == 0
    assert team.batting_average == 0.0
