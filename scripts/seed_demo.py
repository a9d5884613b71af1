"""Copy the demo tournament into the configured Postgres database."""

import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from tourney.db import (
    ensure_schema,
    fetch_tournament,
    register_player,
    upsert_course,
    upsert_player,
    upsert_scores,
    upsert_tournament,
)
from tourney.settings import load_settings
from tourney.store import DEMO_TOURNAMENT_ID, demo_store


def seed_demo(database_url: str) -> None:
    ensure_schema(database_url)
    if fetch_tournament(database_url, DEMO_TOURNAMENT_ID):
        print(f"Tournament '{DEMO_TOURNAMENT_ID}' already exists.")
        return

    demo = demo_store()
    for player in demo.fetch_players():
        upsert_player(database_url, player)
    for course in demo.fetch_courses():
        upsert_course(database_url, course)
    for tournament in demo.fetch_tournaments():
        upsert_tournament(database_url, tournament)
    for (tournament_id, player_id), card in demo.cards.items():
        register_player(database_url, tournament_id, player_id)
        recorded = {hole: strokes for hole, strokes in enumerate(card, 1) if strokes}
        if recorded:
            upsert_scores(database_url, tournament_id, player_id, recorded)
    print(f"Created tournament '{DEMO_TOURNAMENT_ID}'.")


if __name__ == "__main__":
    settings = load_settings()
    if settings.uses_memory_store:
        raise SystemExit("DATABASE_URL is not set.")
    seed_demo(settings.database_url)
