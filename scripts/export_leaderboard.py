import argparse
import json
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from tourney.db import PostgresStore
from tourney.export import export_filename, leaderboard_workbook
from tourney.leaderboard import TournamentNotFound, build_leaderboard, pick_featured_tournament
from tourney.settings import configure_logging, load_settings
from tourney.store import ScoreStore, demo_store


def open_store() -> ScoreStore:
    settings = load_settings()
    configure_logging(settings.log_level)
    if settings.uses_memory_store:
        return demo_store()
    return PostgresStore(settings.database_url)


def main() -> None:
    parser = argparse.ArgumentParser(description="Export a tournament leaderboard.")
    parser.add_argument(
        "--tournament-id",
        "-t",
        help="Tournament ID to export (defaults to the active or next upcoming tournament).",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        help="Path to write the export (defaults to stdout for JSON).",
    )
    parser.add_argument(
        "--xlsx",
        action="store_true",
        help="Write an Excel workbook instead of JSON.",
    )
    parser.add_argument("--locale", default="en", help="Scoring system label locale.")
    args = parser.parse_args()

    store = open_store()
    tournament_id = args.tournament_id
    if not tournament_id:
        featured = pick_featured_tournament(store.fetch_tournaments())
        if not featured:
            raise SystemExit("No active or upcoming tournament; pass --tournament-id.")
        tournament_id = featured.id

    try:
        board = build_leaderboard(store, tournament_id, locale=args.locale)
    except TournamentNotFound as exc:
        raise SystemExit(str(exc))

    if args.xlsx:
        output = args.output or Path(export_filename(tournament_id))
        output.write_bytes(leaderboard_workbook(board))
        print(f"Leaderboard saved to {output}")
        return

    payload = json.dumps(board.as_dict(), ensure_ascii=False, indent=2)
    if args.output:
        args.output.write_text(payload, encoding="utf-8")
        print(f"Leaderboard saved to {args.output}")
    else:
        print(payload)


if __name__ == "__main__":
    main()
