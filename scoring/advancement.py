"""Baserunner advancement for a completed plate appearance.

Two entry points are provided.  :func:`calculate_standard_advancement` applies
the canonical rule table for an outcome code.  :func:`apply_manual_overrides`
starts from the same table and lets the scorer redirect individual runners,
keyed by player id, after checking that the requested movement is legal.

Rule table used by both paths::

    1B       runners on second and third score, first -> second, batter -> first
    2B, 3B   every runner scores, batter -> second / third
    HR       every runner and the batter score
    BB, IBB  forced advancement only, batter -> first
    E        as a walk, but runs never earn RBIs
    SF       batter out, runner on third scores, others hold
    FC       batter -> first, lead forced runner retired (lead runner when
             first base was empty), trailing forced runners move up
    SO, GO, AO, DP   no base change
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping, Optional
import logging

from utils.exceptions import IllegalAdvancement
from .results import ADVANCEMENT_TARGETS, BASES, HOME, OUT, STAY, BattingResult
from .state import BaserunnerState
from .stats import MAX_RBIS_PER_AT_BAT, calculate_rbis

logger = logging.getLogger(__name__)

# Position rank used to compare runners; the batter starts at 0.
_RANK = {"batter": 0, "first": 1, "second": 2, "third": 3, HOME: 4}


@dataclass(frozen=True)
class AdvancementResult:
    """Consequences of one plate appearance on the bases."""

    after: BaserunnerState
    runs_scored: tuple[str, ...]
    rbis: int
    rbi_explanation: str
    batting_advancement: int
    runners_out: tuple[str, ...] = ()
    outs_produced: int = 0
    automatic: bool = True


def outs_on_play(result: BattingResult, runners_out: int = 0) -> int:
    """Return total outs for ``result`` with ``runners_out`` retired on the bases.

    A double play's two outs already include one runner, so extra runners only
    count once the batter plus retired runners exceed two.
    """

    if result is BattingResult.DOUBLE_PLAY:
        return max(2, 1 + runners_out)
    return result.outs_produced + runners_out


def _forced_chain(before: BaserunnerState) -> list[str]:
    """Return bases whose runners are forced, walking outward from first."""

    chain: list[str] = []
    for base in BASES:
        if before.occupant(base) is None:
            break
        chain.append(base)
    return chain


def _next_base(base: str) -> str:
    index = BASES.index(base)
    return BASES[index + 1] if index + 1 < len(BASES) else HOME


def _standard_destinations(
    before: BaserunnerState, result: BattingResult, batter_id: str
) -> tuple[Dict[str, str], Optional[str]]:
    """Return ``(runner destinations, batter destination)`` for ``result``.

    Runner destinations map the starting base to ``first``/``second``/``third``,
    ``home`` or ``out``.  The batter destination is ``None`` when the batter is
    retired.
    """

    occupied = [base for base in BASES if before.occupant(base)]
    dests = {base: base for base in occupied}

    if result is BattingResult.SINGLE:
        for base in occupied:
            dests[base] = "second" if base == "first" else HOME
        return dests, "first"

    if result in (BattingResult.DOUBLE, BattingResult.TRIPLE, BattingResult.HOME_RUN):
        for base in occupied:
            dests[base] = HOME
        batter_dest = {
            BattingResult.DOUBLE: "second",
            BattingResult.TRIPLE: "third",
            BattingResult.HOME_RUN: HOME,
        }[result]
        return dests, batter_dest

    if result.is_walk or result is BattingResult.ERROR:
        for base in _forced_chain(before):
            dests[base] = _next_base(base)
        return dests, "first"

    if result is BattingResult.SACRIFICE_FLY:
        if "third" in dests:
            dests["third"] = HOME
        return dests, None

    if result is BattingResult.FIELDERS_CHOICE:
        chain = _forced_chain(before)
        if chain:
            for base in chain[:-1]:
                dests[base] = _next_base(base)
            dests[chain[-1]] = OUT
        elif occupied:
            dests[occupied[-1]] = OUT
        return dests, "first"

    # SO, GO, AO, DP: nobody moves and the batter is retired.
    return dests, None


def _resolve(
    before: BaserunnerState,
    result: BattingResult,
    batter_id: str,
    runner_dests: Mapping[str, str],
    batter_dest: Optional[str],
    *,
    automatic: bool,
    max_rbis: int,
) -> AdvancementResult:
    """Validate final positions and package them into an :class:`AdvancementResult`."""

    # (start rank, player id, destination) ordered from first base outward.
    runners = [
        (_RANK[base], before.occupant(base), runner_dests[base])
        for base in BASES
        if before.occupant(base)
    ]
    batter = [(0, batter_id, batter_dest)] if batter_dest is not None else []
    _check_order(batter + runners)

    placed: Dict[str, Optional[str]] = dict.fromkeys(BASES)
    runs: list[str] = []
    retired: list[str] = []
    for _, pid, dest in runners:
        if dest == HOME:
            runs.append(pid)
        elif dest == OUT:
            retired.append(pid)
        else:
            placed[dest] = pid
    if batter_dest == HOME:
        runs.append(batter_id)
    elif batter_dest is not None:
        placed[batter_dest] = batter_id

    after = BaserunnerState(**placed)
    rbi = calculate_rbis(result, before, runs, batter_id, max_rbis=max_rbis)
    advancement = AdvancementResult(
        after=after,
        runs_scored=tuple(runs),
        rbis=rbi.rbis,
        rbi_explanation=rbi.explanation,
        batting_advancement=result.bases_advanced,
        runners_out=tuple(retired),
        outs_produced=outs_on_play(result, len(retired)),
        automatic=automatic,
    )
    logger.debug(
        "%s by %s: [%s] -> [%s], runs=%s, outs=%d%s",
        result.value,
        batter_id,
        before,
        after,
        list(runs),
        advancement.outs_produced,
        "" if automatic else " (manual)",
    )
    return advancement


def _check_order(movers: list[tuple[int, str, Optional[str]]]) -> None:
    """Raise when runners finish out of order or share a base."""

    active = [(start, pid, dest) for start, pid, dest in movers if dest != OUT]
    for i, (_, trail_id, trail_dest) in enumerate(active):
        for _, lead_id, lead_dest in active[i + 1 :]:
            if trail_dest == HOME:
                if lead_dest != HOME:
                    raise IllegalAdvancement(
                        f"Runner {trail_id} cannot pass runner {lead_id}",
                        runner_id=trail_id,
                    )
            elif _RANK[trail_dest] == _RANK[lead_dest]:
                raise IllegalAdvancement(
                    f"Runners {trail_id} and {lead_id} cannot both finish on {trail_dest}",
                    runner_id=trail_id,
                )
            elif _RANK[trail_dest] > _RANK[lead_dest]:
                raise IllegalAdvancement(
                    f"Runner {trail_id} cannot pass runner {lead_id}",
                    runner_id=trail_id,
                )


def calculate_standard_advancement(
    before: BaserunnerState,
    result: BattingResult,
    batter_id: str,
    *,
    max_rbis: int = MAX_RBIS_PER_AT_BAT,
) -> AdvancementResult:
    """Return the automatic base-state transition for ``result``."""

    result = BattingResult.parse(result)
    dests, batter_dest = _standard_destinations(before, result, batter_id)
    return _resolve(
        before, result, batter_id, dests, batter_dest, automatic=True, max_rbis=max_rbis
    )


def _clean_overrides(overrides: Mapping[str, str]) -> Dict[str, str]:
    return {
        str(pid): target.strip().lower()
        for pid, target in overrides.items()
        if isinstance(target, str) and target.strip()
    }


def validate_manual_overrides(
    before: BaserunnerState, overrides: Mapping[str, str]
) -> None:
    """Raise :class:`IllegalAdvancement` for overrides that cannot be applied.

    Overrides are keyed by player id.  Every key must be a runner currently on
    base, every target must be a known destination, and no runner may be sent
    home while a runner ahead of them is told to stay.
    """

    cleaned = _clean_overrides(overrides)
    for pid, target in cleaned.items():
        if not before.has_runner(pid):
            raise IllegalAdvancement(f"Runner {pid} is not on base", runner_id=pid)
        if target not in ADVANCEMENT_TARGETS:
            raise IllegalAdvancement(
                f"Invalid advancement option for {pid}: {target}", runner_id=pid
            )

    for index, base in enumerate(BASES):
        pid = before.occupant(base)
        if pid is None or cleaned.get(pid) != HOME:
            continue
        for ahead in BASES[index + 1 :]:
            ahead_id = before.occupant(ahead)
            if ahead_id is not None and cleaned.get(ahead_id) == STAY:
                raise IllegalAdvancement(
                    "Runner cannot pass another runner", runner_id=pid
                )


def apply_manual_overrides(
    before: BaserunnerState,
    result: BattingResult,
    batter_id: str,
    overrides: Mapping[str, str],
    *,
    max_rbis: int = MAX_RBIS_PER_AT_BAT,
) -> AdvancementResult:
    """Return the transition for ``result`` with scorer-directed runners.

    Runners without an override take their standard destination.  RBIs are
    recomputed from the runs that actually score, so a run on an error still
    earns none.
    """

    result = BattingResult.parse(result)
    validate_manual_overrides(before, overrides)
    cleaned = _clean_overrides(overrides)

    dests, batter_dest = _standard_destinations(before, result, batter_id)
    for base in BASES:
        pid = before.occupant(base)
        if pid is None or pid not in cleaned:
            continue
        target = cleaned[pid]
        if target == STAY:
            target = base
        elif target != OUT and _RANK[target] < _RANK[base]:
            raise IllegalAdvancement(
                f"Runner {pid} cannot move back from {base} to {target}",
                runner_id=pid,
            )
        dests[base] = target

    return _resolve(
        before, result, batter_id, dests, batter_dest, automatic=False, max_rbis=max_rbis
    )


__all__ = [
    "AdvancementResult",
    "calculate_standard_advancement",
    "apply_manual_overrides",
    "validate_manual_overrides",
    "outs_on_play",
]
