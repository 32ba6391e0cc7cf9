import logging

import pytest

from scoring.config import RulesConfig
from scoring.results import BattingResult
from scoring.scoreboard import Scoreboard
from scoring.session import MERCY_RULE, REGULATION, GameSessionEngine, next_batter
from scoring.state import BaserunnerState, Count, GameSessionState
from utils.exceptions import GameAlreadyComplete, InvalidBattingResult


@pytest.fixture
def engine():
    return GameSessionEngine()


# ----------------------------------------------------------------------
# Count
# ----------------------------------------------------------------------


def test_fourth_ball_completes_walk(engine):
    update = engine.update_count(Count(3, 2), "ball")
    assert update.count == Count(4, 2)
    assert update.at_bat_complete
    assert update.result is BattingResult.WALK


def test_third_strike_completes_strikeout(engine):
    update = engine.update_count(Count(1, 2), "strike")
    assert update.at_bat_complete
    assert update.result is BattingResult.STRIKEOUT


def test_foul_never_makes_third_strike(engine):
    assert engine.update_count(Count(0, 0), "foul").count == Count(0, 1)
    assert engine.update_count(Count(0, 1), "foul").count == Count(0, 2)
    update = engine.update_count(Count(0, 2), "foul")
    assert update.count == Count(0, 2)
    assert not update.at_bat_complete


def test_unknown_pitch(engine):
    with pytest.raises(ValueError):
        engine.update_count(Count(), "balk")


# ----------------------------------------------------------------------
# At-bats
# ----------------------------------------------------------------------


def test_at_bat_scores_for_batting_team(engine, lineup):
    state = GameSessionState(baserunners=BaserunnerState(None, None, "r3"), current_batter_id="p1")
    outcome = engine.process_at_bat(state, "p1", "1B", lineup)
    assert outcome.runs_scored == ("r3",)
    assert outcome.state.away_score == 1
    assert outcome.state.home_score == 0
    assert outcome.state.baserunners == BaserunnerState("p1", None, None)
    assert outcome.state.current_batter_id == "p2"
    assert outcome.state.count == Count()
    assert not outcome.advance_inning


def test_home_team_scores_in_bottom_half(engine):
    state = GameSessionState(is_top=False)
    outcome = engine.process_at_bat(state, "h1", BattingResult.HOME_RUN)
    assert outcome.state.home_score == 1
    assert outcome.state.away_score == 0


@pytest.mark.parametrize("code", ["SO", "GO", "AO", "SF"])
def test_third_out_ends_half_inning(engine, code):
    state = GameSessionState(outs=2, baserunners=BaserunnerState("r1", "r2", None))
    outcome = engine.process_at_bat(state, "b", code)
    assert outcome.advance_inning
    assert outcome.state.outs == 0
    assert outcome.state.baserunners.is_empty


def test_double_play_with_one_out_ends_half_inning(engine):
    state = GameSessionState(outs=1, baserunners=BaserunnerState("r1"))
    outcome = engine.process_at_bat(state, "b", "DP")
    assert outcome.outs_produced == 2
    assert outcome.advance_inning


def test_outs_accumulate(engine):
    outcome = engine.process_at_bat(GameSessionState(outs=1), "b", "GO")
    assert outcome.state.outs == 2
    assert not outcome.advance_inning


def test_invalid_result_leaves_state_untouched(engine):
    state = GameSessionState(outs=1)
    with pytest.raises(InvalidBattingResult):
        engine.process_at_bat(state, "b", "TP")
    assert state.outs == 1


def test_completed_game_rejects_play(engine):
    state = GameSessionState(completion_reason=REGULATION)
    with pytest.raises(GameAlreadyComplete):
        engine.process_at_bat(state, "b", "1B")
    with pytest.raises(GameAlreadyComplete):
        engine.advance_inning(state)


# ----------------------------------------------------------------------
# Innings
# ----------------------------------------------------------------------


def test_half_inning_rotation(engine, home_lineup):
    state = GameSessionState(inning=2, is_top=True, outs=2, count=Count(1, 1))
    result = engine.advance_inning(state, lineup=home_lineup)
    assert result.state.inning == 2
    assert not result.state.is_top
    assert result.state.outs == 0
    assert result.state.count == Count()
    assert result.state.current_batter_id == "h1"
    assert not result.game_completed

    result = engine.advance_inning(result.state)
    assert result.state.inning == 3
    assert result.state.is_top
    assert result.state.current_batter_id is None


def test_regulation_win_for_home(engine):
    state = GameSessionState(inning=7, is_top=False, home_score=5, away_score=3)
    result = engine.advance_inning(state)
    assert result.game_completed
    assert result.completion_reason == REGULATION
    assert result.state.is_complete
    assert result.reason == "Home team leads after regulation"


def test_regulation_win_for_away(engine):
    state = GameSessionState(inning=8, is_top=False, home_score=2, away_score=3)
    result = engine.advance_inning(state)
    assert result.completion_reason == REGULATION


def test_tie_after_regulation_goes_to_extras(engine):
    state = GameSessionState(inning=7, is_top=False, home_score=3, away_score=3)
    result = engine.advance_inning(state)
    assert not result.game_completed
    assert result.state.inning == 8
    assert result.state.is_top


def test_regulation_not_checked_mid_inning(engine):
    state = GameSessionState(inning=7, is_top=True, home_score=5, away_score=3)
    assert not engine.advance_inning(state).game_completed


def test_mercy_rule(engine):
    state = GameSessionState(inning=5, is_top=True)
    result = engine.advance_inning(state, Scoreboard(home_score=0, away_score=10))
    assert result.game_completed
    assert result.completion_reason == MERCY_RULE
    assert result.state.away_score == 10


def test_no_mercy_before_fifth(engine):
    state = GameSessionState(inning=3, is_top=False, away_score=15)
    assert not engine.advance_inning(state).game_completed


def test_mercy_when_entering_fifth(engine):
    state = GameSessionState(inning=4, is_top=False, home_score=11, away_score=1)
    result = engine.advance_inning(state)
    assert result.completion_reason == MERCY_RULE


def test_custom_regulation_length():
    engine = GameSessionEngine(RulesConfig(regulation_innings=5))
    state = GameSessionState(inning=5, is_top=False, home_score=1, away_score=0)
    assert engine.advance_inning(state).completion_reason == REGULATION


def test_inning_transition_logged(engine, caplog):
    with caplog.at_level(logging.INFO, logger="scoring.session"):
        engine.advance_inning(GameSessionState())
    assert "End of Top 1st" in caplog.text


# ----------------------------------------------------------------------
# Lineup rotation and validation
# ----------------------------------------------------------------------


def test_next_batter_wraps(lineup):
    assert next_batter("p1", lineup) == "p2"
    assert next_batter("p9", lineup) == "p1"
    assert next_batter("unknown", lineup) == "p1"
    assert next_batter(None, lineup) == "p1"
    assert next_batter("p1", []) is None
    assert next_batter("a", [{"playerId": "a"}, {"playerId": "b"}]) == "b"


def test_start_game(engine, lineup):
    state = engine.start_game(lineup, game_id="g1")
    assert state.current_batter_id == "p1"
    assert state.inning == 1 and state.is_top
    assert state.game_id == "g1"


def test_validate_game_state(engine):
    assert engine.validate_game_state(GameSessionState()).is_valid
    bad = GameSessionState(inning=0, outs=4, home_score=-1, count=Count(5, 0), completion_reason="rain")
    result = engine.validate_game_state(bad)
    assert not result.is_valid
    assert "Outs must be between 0 and 3" in result.errors
    assert "Current inning must be at least 1" in result.errors
    assert "Scores cannot be negative" in result.errors
    assert len(result.errors) == 5
