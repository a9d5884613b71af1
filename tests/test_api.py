import pytest
from fastapi.testclient import TestClient

import tourney.main as main
from tourney.settings import Settings
from tourney.store import StoreError


@pytest.fixture
def client(monkeypatch, sample_store):
    monkeypatch.setattr(main, "store", sample_store)
    monkeypatch.setattr(main, "settings", Settings(database_url="", scoring_pin="9999"))
    return TestClient(main.app)


def test_scores_require_tournament_id(client):
    response = client.get("/api/scores")
    assert response.status_code == 400
    assert response.json() == {"error": "Tournament ID required"}


def test_scores_listing(client):
    response = client.get("/api/scores", params={"tournament_id": "stroke-cup"})
    assert response.status_code == 200
    rows = response.json()
    assert len(rows) == 36
    assert "p3" not in {row["player_id"] for row in rows}
    assert rows[0] == {"tournament_id": "stroke-cup", "player_id": "p1", "hole": 1, "strokes": 5, "par": 0}


def test_submit_scores_rejects_bad_pin(client):
    payload = {"tournament_id": "stroke-cup", "player_id": "p4", "scores": {"1": 4}, "pin": "0000"}
    response = client.post("/api/scores", json=payload)
    assert response.status_code == 403


def test_submit_scores_invalid_payload(client):
    response = client.post("/api/scores", json={"player_id": "p4", "pin": "9999"})
    assert response.status_code == 422
    response = client.post(
        "/api/scores", json={"tournament_id": "stroke-cup", "player_id": "p4", "pin": "9999"}
    )
    assert response.status_code == 422


def test_submit_batch_scores_updates_leaderboard(client, sample_store):
    payload = {
        "tournament_id": "stroke-cup",
        "player_id": "p4",
        "scores": {"1": 4, "2": 5, "3": 3},
        "pin": "9999",
    }
    response = client.post("/api/scores", json=payload)
    assert response.status_code == 200
    assert response.json()["holes"] == [1, 2, 3]

    board = client.get("/api/leaderboard/stroke-cup").json()
    dan = next(entry for entry in board["entries"] if entry["player"]["id"] == "p4")
    assert dan["gross_score"] == 12
    assert dan["net_score"] == 0
    assert dan["thru"] == 3


def test_submit_single_score(client, sample_store):
    payload = {"tournament_id": "points-cup", "player_id": "p1", "hole": 3, "strokes": 2, "pin": "9999"}
    response = client.post("/api/scores", json=payload)
    assert response.status_code == 200
    board = client.get("/api/leaderboard/points-cup").json()
    assert [entry["player"]["id"] for entry in board["entries"]] == ["p1", "p2"]
    assert board["entries"][0]["points"] == 9


def test_submit_out_of_range_hole(client):
    payload = {"tournament_id": "stroke-cup", "player_id": "p4", "scores": {"19": 4}, "pin": "9999"}
    response = client.post("/api/scores", json=payload)
    assert response.status_code == 400


def test_leaderboard_unknown_tournament(client):
    assert client.get("/api/leaderboard/nope").status_code == 404
    assert client.get("/api/leaderboard/nope/export").status_code == 404


def test_leaderboard_locale(client):
    board = client.get("/api/leaderboard/points-cup", params={"locale": "en"}).json()
    assert board["scoring_system_name"] == "Stableford"


def test_leaderboard_home(client):
    preview = client.get("/api/leaderboard/home").json()
    assert preview["tournament_name"] == "Stroke Cup"
    assert [player["id"] for player in preview["players"]] == ["p2", "p1"]


def test_leaderboard_export(client):
    response = client.get("/api/leaderboard/stroke-cup/export")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith(main.XLSX_MEDIA_TYPE)
    assert "tournament_results_stroke-cup.xlsx" in response.headers["content-disposition"]
    assert response.content[:2] == b"PK"


def test_leaderboard_page(client):
    response = client.get("/leaderboard")
    assert response.status_code == 200
    assert "Stroke Cup" in response.text
    assert "Ann" in response.text


def test_listings(client):
    assert {t["id"] for t in client.get("/api/tournaments").json()} == {
        "stroke-cup",
        "points-cup",
        "old-cup",
    }
    assert len(client.get("/api/players").json()) == 4
    assert client.get("/api/courses").json()[0]["pars"] == [4] * 18


def test_store_failure_returns_500(client, monkeypatch, sample_store):
    def broken(_tournament_id):
        raise StoreError("connection refused")

    monkeypatch.setattr(sample_store, "fetch_scores", broken)
    response = client.get("/api/scores", params={"tournament_id": "stroke-cup"})
    assert response.status_code == 500
    assert response.json() == {"error": "Storage unavailable"}
