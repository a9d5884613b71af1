from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ScoringSystem = Literal["stroke", "stableford", "36system", "callaway"]
SCORING_SYSTEMS: tuple[str, ...] = ("stroke", "stableford", "36system", "callaway")
TOURNAMENT_STATUSES: tuple[str, ...] = ("upcoming", "active", "completed")

HOLE_COUNT = 18
DEFAULT_PAR = 4


@dataclass(frozen=True)
class RawScore:
    tournament_id: str
    player_id: str
    hole: int
    strokes: int
    par: int = 0


@dataclass(frozen=True)
class Player:
    id: str
    name: str
    handicap: int = 0
    team: str = ""
    email: str = ""
    phone: str = ""


@dataclass(frozen=True)
class Course:
    id: str
    name: str
    pars: tuple[int, ...]
    distances: tuple[int, ...] = ()


@dataclass(frozen=True)
class Tournament:
    id: str
    name: str
    date: str
    course_id: str
    status: str = "upcoming"
    scoring_system: ScoringSystem = "stroke"


def parse_scoring_system(value: str | None) -> ScoringSystem:
    """Return a known scoring system, treating blank or unknown values as stroke play."""
    normalized = (value or "").strip().lower()
    if normalized in SCORING_SYSTEMS:
        return normalized  # type: ignore[return-value]
    return "stroke"


def parse_status(value: str | None) -> str:
    normalized = (value or "").strip().lower()
    return normalized if normalized in TOURNAMENT_STATUSES else "upcoming"


def _safe_int(value: str | int | None) -> int:
    if value in (None, ""):
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def parse_pars(raw: str | None) -> tuple[int, ...]:
    if not raw:
        return ()
    return tuple(_safe_int(cell.strip()) for cell in raw.lstrip("'").split(","))


def format_pars(pars: tuple[int, ...] | list[int]) -> str:
    return ",".join(str(par) for par in pars)
