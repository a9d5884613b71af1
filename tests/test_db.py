import psycopg
import pytest

from tourney import db
from tourney.models import Course, Tournament
from tourney.store import StoreError


def test_row_to_tournament_defaults_scoring_system():
    row = ("t1", "Spring Open", "2026-03-01", "c1", None, "")
    assert db._row_to_tournament(row) == Tournament(
        "t1", "Spring Open", "2026-03-01", "c1", "upcoming", "stroke"
    )


def test_row_to_course_parses_pars():
    row = ("c1", "Hillside", "'4,5,3", "")
    assert db._row_to_course(row) == Course("c1", "Hillside", (4, 5, 3), ())


def test_connection_errors_become_store_errors(monkeypatch):
    def refuse(*_args, **_kwargs):
        raise psycopg.OperationalError("connection refused")

    monkeypatch.setattr(db.psycopg, "connect", refuse)
    store = db.PostgresStore("postgresql://localhost/golf")
    with pytest.raises(StoreError):
        store.fetch_scores("t1")
    with pytest.raises(StoreError):
        store.fetch_course_pars("c1")


@pytest.mark.parametrize("status, expected", [("Active", "active"), ("postponed", "upcoming"), ("", "upcoming")])
def test_row_to_tournament_normalizes_status(status, expected):
    row = ("t1", "Spring Open", "2026-03-01", "c1", status, "stableford")
    assert db._row_to_tournament(row).status == expected


class FakeCursor:
    def __init__(self, statements, stored_card):
        self.statements = statements
        self.stored_card = stored_card

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, sql, params=None):
        self.statements.append((" ".join(sql.split()), params))

    def fetchone(self):
        return (self.stored_card,)


class FakeConnection:
    def __init__(self, cursor):
        self._cursor = cursor

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def cursor(self):
        return self._cursor


def test_upsert_scores_creates_row_before_locking(monkeypatch):
    statements = []
    stored = [5, 4] + [None] * 16
    monkeypatch.setattr(db.psycopg, "connect", lambda _url: FakeConnection(FakeCursor(statements, stored)))

    db.PostgresStore("postgresql://localhost/golf").upsert_scores("t1", "p1", {3: 6})

    create, lock, update = statements
    assert create[0].startswith("insert into scores")
    assert create[0].endswith("do nothing;")
    assert lock[0].endswith("for update;")
    assert update[0].startswith("update scores")
    assert update[1][0][:3] == [5, 4, 6]
    assert update[1][1:] == ("t1", "p1")
