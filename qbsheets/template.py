"""Blank electronic scoresheet template for file exports.

The layout follows NAQT's electronic scoresheet: a header for the room and
moderator, then one block of columns per team with six player columns, three
bonus part columns and a total. Rows 8-31 hold the 24 regulation phases, row 32
is a divider, and rows 33-36 hold tiebreakers.
"""

from pathlib import Path

import openpyxl
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

TEMPLATE_SHEET_NAME = 'Scoresheet'
TEMPLATE_FILENAME = 'naqt-scoresheet-electronic-template.xlsx'

ROOM_ROW = 2
MODERATOR_ROW = 3
TEAM_NAME_ROW = 6
PLAYER_NAME_ROW = 7
FIRST_PHASE_ROW = 8
LAST_BONUS_ROW = 31
DIVIDER_ROW = 32
LAST_PHASE_ROW = 36

# (first player column, first bonus column, total column) per team, 1-based
TEAM_BLOCKS = ((2, 8, 11), (14, 20, 23))
PLAYERS_PER_TEAM = 6
BONUS_PARTS = 3

HEADER_FONT = Font(bold=True)
DIVIDER_FILL = PatternFill(start_color='D9D9D9', end_color='D9D9D9', fill_type='solid')


def create_template_workbook() -> openpyxl.Workbook:
    """Build the blank scoresheet workbook."""
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = TEMPLATE_SHEET_NAME

    ws.cell(row=1, column=1, value='Electronic Scoresheet').font = Font(bold=True, size=14)
    ws.cell(row=ROOM_ROW, column=1, value='Room').font = HEADER_FONT
    ws.cell(row=MODERATOR_ROW, column=1, value='Moderator').font = HEADER_FONT
    ws.cell(row=MODERATOR_ROW, column=11, value='Scorekeeper').font = HEADER_FONT
    ws.cell(row=TEAM_NAME_ROW, column=1, value='Team').font = HEADER_FONT
    ws.cell(row=PLAYER_NAME_ROW, column=1, value='TU').font = HEADER_FONT

    for _player_column, bonus_column, total_column in TEAM_BLOCKS:
        for part in range(BONUS_PARTS):
            cell = ws.cell(row=PLAYER_NAME_ROW, column=bonus_column + part, value=f'B{part + 1}')
            cell.font = HEADER_FONT
            cell.alignment = Alignment(horizontal='center')
        ws.cell(row=PLAYER_NAME_ROW, column=total_column, value='Total').font = HEADER_FONT

    phase_number = 1
    for row in range(FIRST_PHASE_ROW, LAST_PHASE_ROW + 1):
        if row == DIVIDER_ROW:
            ws.cell(row=row, column=1, value='Tiebreakers').font = HEADER_FONT
            for column in range(1, TEAM_BLOCKS[-1][2] + 1):
                ws.cell(row=row, column=column).fill = DIVIDER_FILL
            continue

        ws.cell(row=row, column=1, value=phase_number)
        for player_column, _bonus_column, total_column in TEAM_BLOCKS:
            first = get_column_letter(player_column)
            last = get_column_letter(total_column - 1)
            ws.cell(row=row, column=total_column, value=f'=SUM({first}{row}:{last}{row})')
        phase_number += 1

    ws.column_dimensions['A'].width = 12
    return wb


def save_template(path: Path | str) -> Path:
    """Write the blank template to disk."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    wb = create_template_workbook()
    wb.save(path)
    wb.close()
    return path
