import logging
from functools import wraps
from typing import Callable, Mapping, TypeVar

import psycopg

from tourney.models import (
    Course,
    Player,
    RawScore,
    Tournament,
    format_pars,
    parse_pars,
    parse_scoring_system,
    parse_status,
)
from tourney.store import (
    StoreError,
    card_to_scores,
    empty_card,
    merge_strokes,
    normalize_pars,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

SCHEMA_STATEMENTS: list[str] = [
    """
    create table if not exists players (
        id text primary key,
        name text not null,
        handicap integer not null default 0,
        team text not null default '',
        email text not null default '',
        phone text not null default ''
    );
    """,
    """
    create table if not exists courses (
        id text primary key,
        name text not null,
        pars text not null default '',
        distances text not null default ''
    );
    """,
    """
    create table if not exists tournaments (
        id text primary key,
        name text not null,
        date text not null default '',
        course_id text not null default '',
        status text not null default 'upcoming',
        scoring_system text not null default 'stroke'
    );
    """,
    """
    create table if not exists scores (
        tournament_id text not null,
        player_id text not null,
        strokes integer[] not null,
        updated_at timestamptz not null default now(),
        primary key (tournament_id, player_id)
    );
    """,
]


def _wrap_errors(func: Callable[..., T]) -> Callable[..., T]:
    @wraps(func)
    def wrapper(*args, **kwargs) -> T:
        try:
            return func(*args, **kwargs)
        except psycopg.Error as exc:
            logger.error("Database call %s failed: %s", func.__name__, exc)
            raise StoreError(str(exc)) from exc

    return wrapper


@_wrap_errors
def ensure_schema(database_url: str) -> None:
    with psycopg.connect(database_url) as conn:
        with conn.cursor() as cur:
            for statement in SCHEMA_STATEMENTS:
                cur.execute(statement)


def _row_to_player(row: tuple) -> Player:
    return Player(
        id=row[0],
        name=row[1],
        handicap=row[2] or 0,
        team=row[3] or "",
        email=row[4] or "",
        phone=row[5] or "",
    )


def _row_to_course(row: tuple) -> Course:
    return Course(
        id=row[0],
        name=row[1],
        pars=parse_pars(row[2]),
        distances=parse_pars(row[3]),
    )


def _row_to_tournament(row: tuple) -> Tournament:
    return Tournament(
        id=row[0],
        name=row[1],
        date=row[2] or "",
        course_id=row[3] or "",
        status=parse_status(row[4]),
        scoring_system=parse_scoring_system(row[5]),
    )


@_wrap_errors
def fetch_players(database_url: str) -> list[Player]:
    with psycopg.connect(database_url) as conn:
        with conn.cursor() as cur:
            cur.execute(
                """
                select id, name, handicap, team, email, phone
                from players
                order by name;
                """
            )
            return [_row_to_player(row) for row in cur.fetchall()]


@_wrap_errors
def upsert_player(database_url: str, player: Player) -> None:
    with psycopg.connect(database_url) as conn:
        with conn.cursor() as cur:
            cur.execute(
                """
                insert into players (id, name, handicap, team, email, phone)
                values (%s, %s, %s, %s, %s, %s)
                on conflict (id) do update
                    set name = excluded.name,
                        handicap = excluded.handicap,
                        team = excluded.team,
                        email = excluded.email,
                        phone = excluded.phone;
                """,
                (player.id, player.name, player.handicap, player.team, player.email, player.phone),
            )


@_wrap_errors
def fetch_courses(database_url: str) -> list[Course]:
    with psycopg.connect(database_url) as conn:
        with conn.cursor() as cur:
            cur.execute(
                """
                select id, name, pars, distances
                from courses
                order by name;
                """
            )
            return [_row_to_course(row) for row in cur.fetchall()]


@_wrap_errors
def fetch_course(database_url: str, course_id: str) -> Course | None:
    with psycopg.connect(database_url) as conn:
        with conn.cursor() as cur:
            cur.execute(
                """
                select id, name, pars, distances
                from courses
                where id = %s;
                """,
                (course_id,),
            )
            row = cur.fetchone()
            return _row_to_course(row) if row else None


@_wrap_errors
def upsert_course(database_url: str, course: Course) -> None:
    with psycopg.connect(database_url) as conn:
        with conn.cursor() as cur:
            cur.execute(
                """
                insert into courses (id, name, pars, distances)
                values (%s, %s, %s, %s)
                on conflict (id) do update
                    set name = excluded.name,
                        pars = excluded.pars,
                        distances = excluded.distances;
                """,
                (course.id, course.name, format_pars(course.pars), format_pars(course.distances)),
            )


@_wrap_errors
def fetch_tournaments(database_url: str) -> list[Tournament]:
    with psycopg.connect(database_url) as conn:
        with conn.cursor() as cur:
            cur.execute(
                """
                select id, name, date, course_id, status, scoring_system
                from tournaments
                order by date, name;
                """
            )
            return [_row_to_tournament(row) for row in cur.fetchall()]


@_wrap_errors
def fetch_tournament(database_url: str, tournament_id: str) -> Tournament | None:
    with psycopg.connect(database_url) as conn:
        with conn.cursor() as cur:
            cur.execute(
                """
                select id, name, date, course_id, status, scoring_system
                from tournaments
                where id = %s;
                """,
                (tournament_id,),
            )
            row = cur.fetchone()
            return _row_to_tournament(row) if row else None


@_wrap_errors
def upsert_tournament(database_url: str, tournament: Tournament) -> None:
    with psycopg.connect(database_url) as conn:
        with conn.cursor() as cur:
            cur.execute(
                """
                insert into tournaments (id, name, date, course_id, status, scoring_system)
                values (%s, %s, %s, %s, %s, %s)
                on conflict (id) do update
                    set name = excluded.name,
                        date = excluded.date,
                        course_id = excluded.course_id,
                        status = excluded.status,
                        scoring_system = excluded.scoring_system;
                """,
                (
                    tournament.id,
                    tournament.name,
                    tournament.date,
                    tournament.course_id,
                    tournament.status,
                    tournament.scoring_system,
                ),
            )


@_wrap_errors
def fetch_scores(database_url: str, tournament_id: str) -> list[RawScore]:
    with psycopg.connect(database_url) as conn:
        with conn.cursor() as cur:
            cur.execute(
                """
                select player_id, strokes
                from scores
                where tournament_id = %s
                order by player_id;
                """,
                (tournament_id,),
            )
            scores: list[RawScore] = []
            for player_id, strokes in cur.fetchall():
                scores.extend(card_to_scores(tournament_id, player_id, list(strokes or [])))
            return scores


CREATE_CARD_SQL = """
    insert into scores (tournament_id, player_id, strokes)
    values (%s, %s, %s)
    on conflict (tournament_id, player_id) do nothing;
"""


@_wrap_errors
def upsert_scores(
    database_url: str,
    tournament_id: str,
    player_id: str,
    strokes_by_hole: Mapping[int, int],
) -> None:
    with psycopg.connect(database_url) as conn:
        with conn.cursor() as cur:
            cur.execute(CREATE_CARD_SQL, (tournament_id, player_id, empty_card()))
            cur.execute(
                """
                select strokes
                from scores
                where tournament_id = %s and player_id = %s
                for update;
                """,
                (tournament_id, player_id),
            )
            row = cur.fetchone()
            card = merge_strokes(list(row[0]), strokes_by_hole)
            cur.execute(
                """
                update scores
                set strokes = %s, updated_at = now()
                where tournament_id = %s and player_id = %s;
                """,
                (card, tournament_id, player_id),
            )


@_wrap_errors
def register_player(database_url: str, tournament_id: str, player_id: str) -> None:
    with psycopg.connect(database_url) as conn:
        with conn.cursor() as cur:
            cur.execute(CREATE_CARD_SQL, (tournament_id, player_id, empty_card()))


class PostgresStore:
    def __init__(self, database_url: str) -> None:
        self.database_url = database_url

    def fetch_players(self) -> list[Player]:
        return fetch_players(self.database_url)

    def fetch_courses(self) -> list[Course]:
        return fetch_courses(self.database_url)

    def fetch_course_pars(self, course_id: str) -> list[int]:
        course = fetch_course(self.database_url, course_id)
        return normalize_pars(course.pars if course else None)

    def fetch_tournaments(self) -> list[Tournament]:
        return fetch_tournaments(self.database_url)

    def fetch_tournament(self, tournament_id: str) -> Tournament | None:
        return fetch_tournament(self.database_url, tournament_id)

    def fetch_scores(self, tournament_id: str) -> list[RawScore]:
        return fetch_scores(self.database_url, tournament_id)

    def upsert_scores(
        self, tournament_id: str, player_id: str, strokes_by_hole: Mapping[int, int]
    ) -> None:
        upsert_scores(self.database_url, tournament_id, player_id, strokes_by_hole)

    def register_player(self, tournament_id: str, player_id: str) -> None:
        register_player(self.database_url, tournament_id, player_id)
