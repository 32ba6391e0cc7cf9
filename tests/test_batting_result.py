import pytest

from scoring.results import BattingResult
from utils.exceptions import InvalidBattingResult


def test_parse_accepts_codes_case_insensitively():
    assert BattingResult.parse("hr") is BattingResult.HOME_RUN
    assert BattingResult.parse(" 1b ") is BattingResult.SINGLE
    assert BattingResult.parse(BattingResult.WALK) is BattingResult.WALK


@pytest.mark.parametrize("code", ["TP", "", "XX", None, 4])
def test_parse_rejects_unknown_codes(code):
    with pytest.raises(InvalidBattingResult) as excinfo:
        BattingResult.parse(code)
    assert excinfo.value.code == code


def test_invalid_result_is_a_value_error():
    with pytest.raises(ValueError):
        BattingResult.parse("TP")


def test_outs_produced_classification():
    assert BattingResult.DOUBLE_PLAY.outs_produced == 2
    for code in ("SO", "GO", "AO", "SF"):
        assert BattingResult.parse(code).outs_produced == 1
        assert BattingResult.parse(code).is_out
    for code in ("1B", "2B", "3B", "HR", "BB", "IBB", "FC", "E"):
        assert BattingResult.parse(code).outs_produced == 0
        assert not BattingResult.parse(code).is_out


def test_hits_and_reaching_base():
    hits = {r for r in BattingResult if r.is_hit}
    assert hits == {
        BattingResult.SINGLE,
        BattingResult.DOUBLE,
        BattingResult.TRIPLE,
        BattingResult.HOME_RUN,
    }
    assert BattingResult.ERROR.reaches_base
    assert BattingResult.FIELDERS_CHOICE.reaches_base
    assert BattingResult.INTENTIONAL_WALK.reaches_base
    assert not BattingResult.SACRIFICE_FLY.reaches_base


def test_at_bat_credit_and_bases():
    assert not BattingResult.WALK.counts_as_at_bat
    assert not BattingResult.INTENTIONAL_WALK.counts_as_at_bat
    assert not BattingResult.SACRIFICE_FLY.counts_as_at_bat
    assert BattingResult.ERROR.counts_as_at_bat
    assert BattingResult.HOME_RUN.bases_advanced == 4
    assert BattingResult.TRIPLE.bases_advanced == 3
    assert BattingResult.STRIKEOUT.bases_advanced == 0
    assert BattingResult.FIELDERS_CHOICE.label == "Fielder's choice"
