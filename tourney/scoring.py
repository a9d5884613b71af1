"""Gross, Stableford, 36 System and Callaway scoring plus leaderboard ranking.

Everything here is pure: inputs are read, never mutated, and every call
returns fresh objects.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Literal, Mapping, Sequence, Union

from tourney.models import DEFAULT_PAR, HOLE_COUNT, Player, RawScore, ScoringSystem

STABLEFORD_POINTS: Mapping[int, int] = MappingProxyType(
    {
        -3: 5,  # albatross
        -2: 4,  # eagle
        -1: 3,  # birdie
        0: 2,  # par
        1: 1,  # bogey
        2: 0,  # double bogey or worse
    }
)
STABLEFORD_BEST_DIFF = -3
STABLEFORD_WORST_DIFF = 2


@dataclass(frozen=True)
class CallawayBracket:
    min_gross: int
    max_gross: int | None
    holes: float
    adjustment: int

    def contains(self, gross: int) -> bool:
        if gross < self.min_gross:
            return False
        return self.max_gross is None or gross <= self.max_gross


CALLAWAY_TABLE: tuple[CallawayBracket, ...] = (
    CallawayBracket(0, 75, 0, 0),
    CallawayBracket(76, 80, 1, 0),
    CallawayBracket(81, 85, 2, 0),
    CallawayBracket(86, 90, 3, 1),
    CallawayBracket(91, 95, 4, 1),
    CallawayBracket(96, 100, 5, 2),
    CallawayBracket(101, 105, 6, 2),
    CallawayBracket(106, None, 7, 3),
)
# holes 17 and 18 can never be deducted
CALLAWAY_LAST_ELIGIBLE_HOLE = 16

SCORING_SYSTEM_NAMES: Mapping[str, Mapping[str, str]] = MappingProxyType(
    {
        "stroke": {"th": "Stroke Play (สโตรกเพลย์)", "en": "Stroke Play"},
        "stableford": {"th": "Stableford (สเตเบิลฟอร์ด)", "en": "Stableford"},
        "36system": {"th": "36 System (ระบบ 36)", "en": "36 System"},
        "callaway": {"th": "Callaway (คาลลาเวย์)", "en": "Callaway"},
    }
)


@dataclass(frozen=True)
class StrokeResult:
    handicap: int
    net: int
    kind: Literal["stroke"] = "stroke"


@dataclass(frozen=True)
class StablefordResult:
    points: int
    kind: Literal["stableford"] = "stableford"


@dataclass(frozen=True)
class System36Result:
    handicap: int
    net: int
    kind: Literal["36system"] = "36system"


@dataclass(frozen=True)
class CallawayResult:
    handicap: int
    net: int
    gross_score: int
    kind: Literal["callaway"] = "callaway"


RoundResult = Union[StrokeResult, StablefordResult, System36Result, CallawayResult]


@dataclass
class LeaderboardEntry:
    player: Player
    gross_score: int
    net_score: int
    handicap: int
    points: int
    thru: int
    result: RoundResult
    rank: int = 0

    @property
    def score(self) -> int:
        if isinstance(self.result, StablefordResult):
            return self.points
        return self.net_score

    def as_dict(self) -> dict:
        return {
            "rank": self.rank,
            "player": {
                "id": self.player.id,
                "name": self.player.name,
                "team": self.player.team,
                "handicap": self.player.handicap,
            },
            "gross_score": self.gross_score,
            "net_score": self.net_score,
            "handicap": self.handicap,
            "points": self.points,
            "thru": self.thru,
            "score": self.score,
            "system": self.result.kind,
        }


def _in_range(hole: int) -> bool:
    return 1 <= hole <= HOLE_COUNT


def _par_for_hole(pars: Sequence[int], hole: int) -> int:
    index = hole - 1
    if 0 <= index < len(pars) and pars[index]:
        return pars[index]
    return DEFAULT_PAR


def _first_score_for_hole(scores: Sequence[RawScore], hole: int) -> RawScore | None:
    return next((score for score in scores if score.hole == hole), None)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def gross_total(scores: Iterable[RawScore]) -> int:
    return sum(
        score.strokes for score in scores if _in_range(score.hole) and score.strokes > 0
    )


def holes_played(scores: Iterable[RawScore]) -> int:
    return sum(1 for score in scores if _in_range(score.hole))


def stableford_hole_points(strokes: int, par: int) -> int:
    diff = min(max(strokes - par, STABLEFORD_BEST_DIFF), STABLEFORD_WORST_DIFF)
    return STABLEFORD_POINTS.get(diff, 0)


def stableford_points(scores: Sequence[RawScore], pars: Sequence[int]) -> int:
    total = 0
    for hole in range(1, HOLE_COUNT + 1):
        score = _first_score_for_hole(scores, hole)
        if score and score.strokes > 0:
            total += stableford_hole_points(score.strokes, _par_for_hole(pars, hole))
    return total


def system36(gross_score: int) -> System36Result:
    handicap = max(round_half_up((gross_score - 36) * 0.8), 0)
    return System36Result(handicap=handicap, net=gross_score - handicap)


def callaway_bracket(gross_score: int) -> CallawayBracket:
    for bracket in CALLAWAY_TABLE:
        if bracket.contains(gross_score):
            return bracket
    return CALLAWAY_TABLE[-1]


def callaway_deduction(scores: Sequence[RawScore], pars: Sequence[int], holes: float) -> int:
    """Sum the worst eligible holes, each capped at double par.

    A half hole in ``holes`` adds half (rounded down) of the next worst hole.
    When fewer holes are eligible than requested, only the available ones count.
    """
    capped: list[int] = []
    for hole in range(1, CALLAWAY_LAST_ELIGIBLE_HOLE + 1):
        score = _first_score_for_hole(scores, hole)
        if score and score.strokes > 0:
            capped.append(min(score.strokes, _par_for_hole(pars, hole) * 2))
    capped.sort(reverse=True)

    whole = math.floor(holes)
    deduction = sum(capped[:whole])
    if holes % 1 and whole < len(capped):
        deduction += capped[whole] // 2
    return deduction


def callaway(scores: Sequence[RawScore], pars: Sequence[int]) -> CallawayResult:
    gross = gross_total(scores)
    bracket = callaway_bracket(gross)
    deduction = callaway_deduction(scores, pars, bracket.holes)
    handicap = max(0, deduction - bracket.adjustment)
    return CallawayResult(handicap=handicap, net=gross - handicap, gross_score=gross)


def _score_player(
    player: Player,
    scores: Sequence[RawScore],
    pars: Sequence[int],
    scoring_system: ScoringSystem,
    player_handicaps: Mapping[str, int] | None,
) -> LeaderboardEntry:
    gross = gross_total(scores)
    handicap = player.handicap or 0
    net = gross
    points = 0
    result: RoundResult

    if scoring_system == "stableford":
        points = stableford_points(scores, pars)
        net = points
        result = StablefordResult(points=points)
    elif scoring_system == "36system":
        result = system36(gross)
        handicap, net = result.handicap, result.net
    elif scoring_system == "callaway":
        result = callaway(scores, pars)
        handicap, net = result.handicap, result.net
    else:
        if player_handicaps and player.id in player_handicaps:
            handicap = player_handicaps[player.id] or 0
        net = gross - handicap
        result = StrokeResult(handicap=handicap, net=net)

    return LeaderboardEntry(
        player=player,
        gross_score=gross,
        net_score=net,
        handicap=handicap,
        points=points,
        thru=holes_played(scores),
        result=result,
    )


def generate_leaderboard(
    players: Iterable[Player],
    all_scores: Sequence[RawScore],
    pars: Sequence[int],
    scoring_system: ScoringSystem,
    player_handicaps: Mapping[str, int] | None = None,
) -> list[LeaderboardEntry]:
    """Score every player with at least one record and rank the field.

    Stableford boards are ordered by points (highest first), every other
    system by net score (lowest first). The sort is stable and ties are not
    shared: ranks always run 1..N.
    """
    entries: list[LeaderboardEntry] = []
    for player in players:
        player_scores = [score for score in all_scores if score.player_id == player.id]
        if not player_scores:
            continue
        entries.append(
            _score_player(player, player_scores, pars, scoring_system, player_handicaps)
        )

    if scoring_system == "stableford":
        entries.sort(key=lambda entry: entry.points, reverse=True)
    else:
        entries.sort(key=lambda entry: entry.net_score)

    for index, entry in enumerate(entries, 1):
        entry.rank = index
    return entries


def scoring_system_name(system: str, locale: str = "th") -> str:
    names = SCORING_SYSTEM_NAMES.get(system)
    if not names:
        return system
    return names.get(locale) or names.get("en") or system
