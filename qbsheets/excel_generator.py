"""Scoresheet export to a downloadable Excel workbook."""

import logging
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Optional

import openpyxl

from .columns import ColumnAddress
from .config import get_template_path
from .generator import FormatParameters, build_scoresheet
from .models import CellWrite, GameSnapshot, PhaseScore, Result
from .template import (
    BONUS_PARTS,
    FIRST_PHASE_ROW,
    LAST_BONUS_ROW,
    MODERATOR_ROW,
    PLAYER_NAME_ROW,
    PLAYERS_PER_TEAM,
    ROOM_ROW,
    TEAM_BLOCKS,
    TEAM_NAME_ROW,
    TEMPLATE_SHEET_NAME,
)

logger = logging.getLogger('qbsheets.excel_generator')

ATTRIBUTION = (
    "Scoresheet for this game. This scoresheet is based on NAQT's electronic scoresheet "
    '(© National Academic Quiz Tournaments, LLC).'
)
READER_NAME_FILENAME_LENGTH = 12

ROOM_COLUMN = ColumnAddress(2)
MODERATOR_COLUMN = ColumnAddress(2)
SCOREKEEPER_COLUMN = ColumnAddress(12)


def excel_bonus_ranges(
    parameters: FormatParameters,
    phase_score: PhaseScore,
    team_ids: list[str],
    sheet_name: str,
    row: int,
    phases_count: int,
) -> Result[list[CellWrite]]:
    """Write each bonus part's points into the owning team's bonus columns."""
    if not phase_score.bonus_scores:
        return Result.ok([])

    bonus_part_count = len(phase_score.bonus_scores)
    if bonus_part_count != BONUS_PARTS:
        return Result.fail(
            f'Non-three part bonus in phase {parameters.phase_number(row)}. '
            f"Number of parts: {bonus_part_count}. These aren't supported for the scoresheet."
        )

    if phase_score.bonus_team_id not in team_ids:
        return Result.fail(
            f'Unknown bonus team in phase {parameters.phase_number(row)}. '
            'Cannot accurately create a scoresheet.'
        )

    bonus_column = parameters.bonus_columns[team_ids.index(phase_score.bonus_team_id)]
    return Result.ok([CellWrite.along_row(sheet_name, bonus_column, row, phase_score.bonus_scores)])


EXCEL_FORMAT = FormatParameters(
    name='electronic scoresheet',
    first_phase_row=FIRST_PHASE_ROW,
    last_bonus_row=LAST_BONUS_ROW,
    phases_limit=28,
    players_per_team_limit=PLAYERS_PER_TEAM,
    starting_columns=tuple(ColumnAddress(player_column) for player_column, _, _ in TEAM_BLOCKS),
    bonus_columns=tuple(ColumnAddress(bonus_column) for _, bonus_column, _ in TEAM_BLOCKS),
    team_name_row=TEAM_NAME_ROW,
    player_name_row=PLAYER_NAME_ROW,
    sheet_name_format=TEMPLATE_SHEET_NAME,
    bonus_hook=excel_bonus_ranges,
    # Tiebreakers start after the divider row
    skip_row_after=LAST_BONUS_ROW,
)


@dataclass
class ScoresheetFile:
    """A filled-in workbook, ready to send."""
    stream: BytesIO
    trimmed: bool = False


def apply_writes(workbook: openpyxl.Workbook, writes: list[CellWrite]) -> None:
    """Set every cell covered by the writes."""
    for write in writes:
        ws = workbook[write.sheet_name]
        for column, row, value in write.cells():
            ws.cell(row=row, column=column.number, value=value)


def get_export_filename(reader_name: str, export_count: int) -> str:
    """Filename for a reader's nth export, e.g. Scoresheet_The Reader_3.xlsx."""
    return f'Scoresheet_{reader_name[:READER_NAME_FILENAME_LENGTH]}_{export_count}.xlsx'


class ExcelFileScoresheetGenerator:
    """Fills in a copy of the workbook template for a game."""

    def __init__(self, template_path: Optional[Path | str] = None):
        """
        Args:
            template_path: Workbook template (default: template_path from the config)
        """
        self.template_path = Path(template_path) if template_path else get_template_path()

    def try_create_scoresheet(
        self, game: GameSnapshot, reader_name: str, room_name: str
    ) -> Result[ScoresheetFile]:
        """
        Create a filled-in scoresheet workbook for a game.

        The template is read from disk on every call, so each export gets its
        own workbook.

        Args:
            game: Game to export
            reader_name: Written as the moderator and scorekeeper
            room_name: Written as the room

        Returns:
            Result holding the workbook bytes, or the reason the game can't be exported
        """
        plan_result = build_scoresheet(game, EXCEL_FORMAT, TEMPLATE_SHEET_NAME)
        if not plan_result.success:
            logger.info(f'File export failed: {plan_result.error_message}')
            return Result.fail(plan_result.error_message)

        if not self.template_path.exists():
            logger.error(f'Scoresheet template not found: {self.template_path}')
            return Result.fail("The scoresheet template is missing, so the scoresheet couldn't be created.")

        plan = plan_result.value
        writes = [
            CellWrite.single(TEMPLATE_SHEET_NAME, ROOM_COLUMN, ROOM_ROW, room_name),
            CellWrite.single(TEMPLATE_SHEET_NAME, MODERATOR_COLUMN, MODERATOR_ROW, reader_name),
            CellWrite.single(TEMPLATE_SHEET_NAME, SCOREKEEPER_COLUMN, MODERATOR_ROW, reader_name),
        ]
        writes.extend(plan.writes)

        wb = openpyxl.load_workbook(BytesIO(self.template_path.read_bytes()))
        try:
            apply_writes(wb, writes)
            stream = BytesIO()
            wb.save(stream)
        finally:
            wb.close()

        stream.seek(0)
        logger.info(f'Created scoresheet with {len(writes)} writes')
        return Result.ok(ScoresheetFile(stream=stream, trimmed=plan.trimmed))
