from io import BytesIO

from openpyxl import Workbook
from openpyxl.styles import Font

from tourney.leaderboard import TournamentLeaderboard

EXPORT_HEADERS = ["Position", "Player", "Gross", "Handicap", "Net", "Points", "Score"]


def export_filename(tournament_id: str) -> str:
    return f"tournament_results_{tournament_id}.xlsx"


def leaderboard_rows(board: TournamentLeaderboard) -> list[list]:
    return [
        [
            entry.rank,
            entry.player.name,
            entry.gross_score,
            entry.handicap,
            entry.net_score,
            entry.points,
            entry.score,
        ]
        for entry in board.entries
    ]


def leaderboard_workbook(board: TournamentLeaderboard) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = "Leaderboard"
    ws.append(EXPORT_HEADERS)
    for cell in ws[1]:
        cell.font = Font(bold=True)
    for row in leaderboard_rows(board):
        ws.append(row)
    ws.column_dimensions["B"].width = 24

    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()
