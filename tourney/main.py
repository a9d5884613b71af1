import logging
from pathlib import Path

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse, Response
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel, ValidationError

from tourney.db import PostgresStore, ensure_schema
from tourney.export import export_filename, leaderboard_workbook
from tourney.leaderboard import (
    TournamentNotFound,
    build_leaderboard,
    home_preview,
    pick_featured_tournament,
)
from tourney.settings import configure_logging, load_settings
from tourney.store import ScoreEntryError, ScoreStore, StoreError, demo_store

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
HOME_PREVIEW_SIZE = 5

settings = load_settings()
configure_logging(settings.log_level)


def _create_store() -> ScoreStore:
    if settings.uses_memory_store:
        logger.warning("DATABASE_URL not set, serving the in-memory demo tournament.")
        return demo_store()
    return PostgresStore(settings.database_url)


app = FastAPI(title="Tournament Scoring")
templates = Jinja2Templates(directory=str(TEMPLATE_DIR))
store: ScoreStore = _create_store()


@app.on_event("startup")
def startup() -> None:
    if not settings.uses_memory_store:
        ensure_schema(settings.database_url)


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    logger.error("Store failure on %s: %s", request.url.path, exc)
    return JSONResponse({"error": "Storage unavailable"}, status_code=500)


class ScorePayload(BaseModel):
    tournament_id: str
    player_id: str
    scores: dict[int, int] | None = None
    hole: int | None = None
    strokes: int | None = None
    pin: str

    def strokes_by_hole(self) -> dict[int, int] | None:
        if self.scores is not None:
            return self.scores
        if self.hole is not None and self.strokes is not None:
            return {self.hole: self.strokes}
        return None


@app.get("/", response_class=RedirectResponse)
async def index():
    return RedirectResponse(url="/leaderboard")


@app.get("/leaderboard", response_class=HTMLResponse)
async def leaderboard_page(request: Request, tournament_id: str = "", locale: str = ""):
    locale = locale or settings.default_locale
    if not tournament_id:
        featured = pick_featured_tournament(store.fetch_tournaments())
        tournament_id = featured.id if featured else ""
    board = None
    if tournament_id:
        try:
            board = build_leaderboard(store, tournament_id, locale=locale)
        except TournamentNotFound:
            raise HTTPException(status_code=404, detail="Tournament not found")
    return templates.TemplateResponse(
        request,
        "leaderboard.html",
        {"board": board},
    )


@app.get("/api/tournaments")
async def api_tournaments():
    return [
        {
            "id": t.id,
            "name": t.name,
            "date": t.date,
            "course_id": t.course_id,
            "status": t.status,
            "scoring_system": t.scoring_system,
        }
        for t in store.fetch_tournaments()
    ]


@app.get("/api/players")
async def api_players():
    return [
        {"id": p.id, "name": p.name, "handicap": p.handicap, "team": p.team}
        for p in store.fetch_players()
    ]


@app.get("/api/courses")
async def api_courses():
    return [
        {"id": c.id, "name": c.name, "pars": list(c.pars), "distances": list(c.distances)}
        for c in store.fetch_courses()
    ]


@app.get("/api/scores")
async def api_scores(tournament_id: str = ""):
    if not tournament_id:
        return JSONResponse({"error": "Tournament ID required"}, status_code=400)
    return [
        {
            "tournament_id": s.tournament_id,
            "player_id": s.player_id,
            "hole": s.hole,
            "strokes": s.strokes,
            "par": s.par,
        }
        for s in store.fetch_scores(tournament_id)
    ]


@app.post("/api/scores")
async def api_submit_scores(request: Request):
    try:
        payload = ScorePayload.model_validate(await request.json())
    except ValidationError as exc:
        return JSONResponse({"error": "Invalid payload", "details": exc.errors()}, status_code=422)

    if payload.pin != settings.scoring_pin:
        return JSONResponse({"error": "Invalid PIN"}, status_code=403)

    strokes_by_hole = payload.strokes_by_hole()
    if strokes_by_hole is None:
        return JSONResponse(
            {"error": "Invalid payload", "details": "Provide scores or hole and strokes."},
            status_code=422,
        )

    try:
        store.upsert_scores(payload.tournament_id, payload.player_id, strokes_by_hole)
    except ScoreEntryError as exc:
        return JSONResponse({"error": str(exc)}, status_code=400)

    logger.info(
        "Recorded %d hole(s) for player %s in tournament %s",
        len(strokes_by_hole),
        payload.player_id,
        payload.tournament_id,
    )
    return {
        "success": True,
        "tournament_id": payload.tournament_id,
        "player_id": payload.player_id,
        "holes": sorted(strokes_by_hole),
    }


@app.get("/api/leaderboard/home")
async def api_leaderboard_home(locale: str = ""):
    return home_preview(store, limit=HOME_PREVIEW_SIZE, locale=locale or settings.default_locale)


@app.get("/api/leaderboard/{tournament_id}")
async def api_leaderboard(tournament_id: str, locale: str = ""):
    try:
        board = build_leaderboard(store, tournament_id, locale=locale or settings.default_locale)
    except TournamentNotFound:
        raise HTTPException(status_code=404, detail="Tournament not found")
    return board.as_dict()


@app.get("/api/leaderboard/{tournament_id}/export")
async def api_leaderboard_export(tournament_id: str):
    try:
        board = build_leaderboard(store, tournament_id)
    except TournamentNotFound:
        raise HTTPException(status_code=404, detail="Tournament not found")
    return Response(
        content=leaderboard_workbook(board),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{export_filename(tournament_id)}"'},
    )
