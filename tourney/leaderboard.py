from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Mapping

from tourney.models import Tournament
from tourney.scoring import LeaderboardEntry, generate_leaderboard, scoring_system_name
from tourney.store import ScoreStore

logger = logging.getLogger(__name__)


class TournamentNotFound(Exception):
    pass


@dataclass
class TournamentLeaderboard:
    tournament: Tournament
    entries: list[LeaderboardEntry]
    system_name: str

    @property
    def scoring_system(self) -> str:
        return self.tournament.scoring_system

    def as_dict(self) -> dict:
        return {
            "tournament": {
                "id": self.tournament.id,
                "name": self.tournament.name,
                "date": self.tournament.date,
                "status": self.tournament.status,
                "course_id": self.tournament.course_id,
            },
            "scoring_system": self.scoring_system,
            "scoring_system_name": self.system_name,
            "entries": [entry.as_dict() for entry in self.entries],
        }


def build_leaderboard(
    store: ScoreStore,
    tournament_id: str,
    player_handicaps: Mapping[str, int] | None = None,
    locale: str = "th",
) -> TournamentLeaderboard:
    tournament = store.fetch_tournament(tournament_id)
    if tournament is None:
        raise TournamentNotFound(f"Tournament {tournament_id} not found")
    players = store.fetch_players()
    scores = store.fetch_scores(tournament.id)
    pars = store.fetch_course_pars(tournament.course_id)
    entries = generate_leaderboard(
        players, scores, pars, tournament.scoring_system, player_handicaps
    )
    logger.debug(
        "Built %s leaderboard for %s: %d entries from %d score records",
        tournament.scoring_system,
        tournament.id,
        len(entries),
        len(scores),
    )
    return TournamentLeaderboard(
        tournament=tournament,
        entries=entries,
        system_name=scoring_system_name(tournament.scoring_system, locale),
    )


def pick_featured_tournament(tournaments: Iterable[Tournament]) -> Tournament | None:
    """Active tournament first, otherwise the earliest upcoming one."""
    candidates = list(tournaments)
    active = next((t for t in candidates if t.status == "active"), None)
    if active:
        return active
    upcoming = sorted(
        (t for t in candidates if t.status == "upcoming"),
        key=lambda t: t.date,
    )
    return upcoming[0] if upcoming else None


def home_preview(store: ScoreStore, limit: int = 5, locale: str = "th") -> dict:
    tournament = pick_featured_tournament(store.fetch_tournaments())
    if tournament is None:
        return {"tournament_name": None, "status": "idle", "players": []}
    board = build_leaderboard(store, tournament.id, locale=locale)
    return {
        "tournament_id": tournament.id,
        "tournament_name": tournament.name,
        "status": tournament.status,
        "scoring_system": tournament.scoring_system,
        "scoring_system_name": board.system_name,
        "players": [
            {
                "id": entry.player.id,
                "name": entry.player.name,
                "rank": entry.rank,
                "score": entry.score,
                "thru": entry.thru,
            }
            for entry in board.entries[:limit]
        ],
    }
