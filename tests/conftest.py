import pytest

from tourney.models import Course, Player, Tournament
from tourney.store import MemoryStore


@pytest.fixture
def sample_store() -> MemoryStore:
    store = MemoryStore(
        players=[
            Player("p1", "Ann", handicap=10),
            Player("p2", "Ben", handicap=4),
            Player("p3", "Cat", handicap=0),
            Player("p4", "Dan", handicap=12),
        ],
        courses=[Course("c1", "River Course", tuple([4] * 18))],
        tournaments=[
            Tournament("stroke-cup", "Stroke Cup", "2026-03-01", "c1", "active", "stroke"),
            Tournament("points-cup", "Points Cup", "2026-04-01", "c1", "upcoming", "stableford"),
            Tournament("old-cup", "Old Cup", "2025-10-01", "missing", "completed", "36system"),
        ],
    )
    store.upsert_scores("stroke-cup", "p1", {hole: 5 for hole in range(1, 19)})
    store.upsert_scores("stroke-cup", "p2", {hole: 4 for hole in range(1, 19)})
    store.register_player("stroke-cup", "p3")
    store.upsert_scores("points-cup", "p1", {1: 3, 2: 4})
    store.upsert_scores("points-cup", "p2", {1: 4, 2: 4, 3: 4})
    return store
