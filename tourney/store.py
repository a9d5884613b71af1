"""Data-access interface for the leaderboard plus an in-memory implementation.

The in-memory store lets the service and its tests run without Postgres; it is
seeded with a small demo field on request.
"""

from __future__ import annotations

import logging
from typing import Mapping, Protocol

from tourney.models import (
    DEFAULT_PAR,
    HOLE_COUNT,
    Course,
    Player,
    RawScore,
    Tournament,
)

logger = logging.getLogger(__name__)

DEMO_TOURNAMENT_ID = "demo-open"
DEMO_COURSE_ID = "demo-links"
DEMO_PARS: tuple[int, ...] = (4, 5, 4, 4, 3, 5, 3, 4, 4, 4, 4, 3, 4, 5, 4, 4, 3, 5)


class StoreError(Exception):
    pass


class ScoreEntryError(StoreError):
    pass


class ScoreStore(Protocol):
    def fetch_players(self) -> list[Player]: ...

    def fetch_courses(self) -> list[Course]: ...

    def fetch_course_pars(self, course_id: str) -> list[int]: ...

    def fetch_tournaments(self) -> list[Tournament]: ...

    def fetch_tournament(self, tournament_id: str) -> Tournament | None: ...

    def fetch_scores(self, tournament_id: str) -> list[RawScore]: ...

    def upsert_scores(
        self, tournament_id: str, player_id: str, strokes_by_hole: Mapping[int, int]
    ) -> None: ...

    def register_player(self, tournament_id: str, player_id: str) -> None: ...


def empty_card() -> list[int | None]:
    return [None] * HOLE_COUNT


def merge_strokes(
    card: list[int | None], strokes_by_hole: Mapping[int, int]
) -> list[int | None]:
    merged = list(card) + [None] * (HOLE_COUNT - len(card))
    for hole, strokes in strokes_by_hole.items():
        try:
            hole_number = int(hole)
            stroke_count = int(strokes)
        except (TypeError, ValueError) as exc:
            raise ScoreEntryError(f"Invalid score for hole {hole!r}: {strokes!r}") from exc
        if not 1 <= hole_number <= HOLE_COUNT:
            raise ScoreEntryError(f"Hole {hole} is outside 1-{HOLE_COUNT}.")
        if stroke_count < 0:
            raise ScoreEntryError(f"Strokes for hole {hole} cannot be negative.")
        merged[hole_number - 1] = stroke_count
    return merged[:HOLE_COUNT]


def card_to_scores(
    tournament_id: str, player_id: str, card: list[int | None]
) -> list[RawScore]:
    """Expand one stored score card into per-hole records.

    Only holes with positive strokes produce records, so a registered player
    who has not started has none and stays off the leaderboard.
    """
    return [
        RawScore(tournament_id, player_id, hole, strokes)
        for hole, strokes in enumerate(card[:HOLE_COUNT], 1)
        if strokes and strokes > 0
    ]


def normalize_pars(pars: tuple[int, ...] | list[int] | None) -> list[int]:
    values = list(pars or [])[:HOLE_COUNT]
    return values + [DEFAULT_PAR] * (HOLE_COUNT - len(values))


class MemoryStore:
    def __init__(
        self,
        players: list[Player] | None = None,
        courses: list[Course] | None = None,
        tournaments: list[Tournament] | None = None,
    ) -> None:
        self.players: list[Player] = list(players or [])
        self.courses: dict[str, Course] = {course.id: course for course in courses or []}
        self.tournaments: dict[str, Tournament] = {
            tournament.id: tournament for tournament in tournaments or []
        }
        self.cards: dict[tuple[str, str], list[int | None]] = {}

    def fetch_players(self) -> list[Player]:
        return list(self.players)

    def fetch_courses(self) -> list[Course]:
        return list(self.courses.values())

    def fetch_course_pars(self, course_id: str) -> list[int]:
        course = self.courses.get(course_id)
        return normalize_pars(course.pars if course else None)

    def fetch_tournaments(self) -> list[Tournament]:
        return list(self.tournaments.values())

    def fetch_tournament(self, tournament_id: str) -> Tournament | None:
        return self.tournaments.get(tournament_id)

    def fetch_scores(self, tournament_id: str) -> list[RawScore]:
        scores: list[RawScore] = []
        for (card_tournament, player_id), card in self.cards.items():
            if card_tournament == tournament_id:
                scores.extend(card_to_scores(tournament_id, player_id, card))
        return scores

    def upsert_scores(
        self, tournament_id: str, player_id: str, strokes_by_hole: Mapping[int, int]
    ) -> None:
        key = (tournament_id, player_id)
        self.cards[key] = merge_strokes(self.cards.get(key, empty_card()), strokes_by_hole)

    def register_player(self, tournament_id: str, player_id: str) -> None:
        self.cards.setdefault((tournament_id, player_id), empty_card())


def demo_store() -> MemoryStore:
    players = [
        Player("p1", "Somchai", handicap=12, team="Eagles"),
        Player("p2", "Niran", handicap=8, team="Eagles"),
        Player("p3", "Kittipong", handicap=18, team="Birdies"),
        Player("p4", "Anan", handicap=4, team="Birdies"),
        Player("p5", "Prasert", handicap=22, team="Birdies"),
    ]
    store = MemoryStore(
        players=players,
        courses=[Course(DEMO_COURSE_ID, "Demo Links", DEMO_PARS)],
        tournaments=[
            Tournament(
                DEMO_TOURNAMENT_ID,
                "Demo Open",
                "2026-01-10",
                DEMO_COURSE_ID,
                status="active",
                scoring_system="stableford",
            )
        ],
    )
    offsets = {"p1": (1, 0, 2), "p2": (0, 1, 0), "p3": (2, 1, 1), "p4": (0, 0, -1)}
    for player_id, pattern in offsets.items():
        card = {
            hole: par + pattern[hole % len(pattern)]
            for hole, par in enumerate(DEMO_PARS, 1)
        }
        store.upsert_scores(DEMO_TOURNAMENT_ID, player_id, card)
    store.register_player(DEMO_TOURNAMENT_ID, "p5")
    logger.info("Seeded demo tournament %s with %d players", DEMO_TOURNAMENT_ID, len(players))
    return store
