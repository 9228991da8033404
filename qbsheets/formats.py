"""Google Sheets layouts: TJ Sheets and the UCSD scoresheet."""

from .columns import MAXIMUM_COLUMN_NUMBER, ColumnAddress
from .generator import FormatParameters, TeamGrouping, get_team_name
from .models import CellWrite, PhaseScore, Result

FIRST_COLUMN = ColumnAddress(1)
SHEETS_FAILURE_PREFIX = "Couldn't write to the sheet. "

# TJ Sheets
TJ_ROSTERS_SHEET_NAME = 'ROSTERS'
TJ_ROSTERS_FIRST_PLAYER_ROW = 2
TJ_STARTING_COLUMNS = (ColumnAddress.from_letter('C'), ColumnAddress.from_letter('M'))
TJ_BONUS_COLUMNS = (ColumnAddress.from_letter('I'), ColumnAddress.from_letter('S'))
DEAD_TOSSUP_MARKER = 'DT'
VALID_BONUS_TOTALS = (0, 10, 20, 30)

# UCSD
UCSD_ROSTERS_SHEET_NAME = 'Rosters'
UCSD_ROSTERS_FIRST_ROW = 2
UCSD_STARTING_COLUMNS = (ColumnAddress.from_letter('C'), ColumnAddress.from_letter('O'))
UCSD_BONUS_COLUMNS = (ColumnAddress.from_letter('I'), ColumnAddress.from_letter('U'))
UCSD_BONUS_PARTS = 3
CLEARED_BONUS = (False, False, False)


def unknown_bonus_team(parameters: FormatParameters, row: int) -> Result:
    return Result.fail(
        f'Unknown bonus team in phase {parameters.phase_number(row)}. '
        'Cannot accurately create a scoresheet.'
    )


def tj_tossup_ranges(
    parameters: FormatParameters,
    phase_score: PhaseScore,
    team_ids: list[str],
    sheet_name: str,
    row: int,
    phases_count: int,
) -> Result[list[CellWrite]]:
    """Mark dead tossups with "DT" in the first bonus column."""
    if parameters.is_placeholder_phase(phase_score, row, phases_count):
        return Result.ok([])

    if all(action.score <= 0 for action in phase_score.scoring_actions):
        return Result.ok(
            [CellWrite.single(sheet_name, parameters.bonus_columns[0], row, DEAD_TOSSUP_MARKER)]
        )

    return Result.ok([])


def tj_bonus_ranges(
    parameters: FormatParameters,
    phase_score: PhaseScore,
    team_ids: list[str],
    sheet_name: str,
    row: int,
    phases_count: int,
) -> Result[list[CellWrite]]:
    """
    Write the bonus total into the owning team's bonus column.

    A correct tossup without a recorded bonus gets a 0 bonus, so the sheet
    doesn't treat the bonus as unread.
    """
    writes = []
    if phase_score.bonus_scores:
        if phase_score.bonus_team_id not in team_ids:
            return unknown_bonus_team(parameters, row)

        bonus_index = team_ids.index(phase_score.bonus_team_id)
        bonus_total = sum(phase_score.bonus_scores)
        if bonus_total not in VALID_BONUS_TOTALS:
            return Result.fail(
                f'Invalid bonus value in phase {parameters.phase_number(row)}. '
                f'Value must be 0/10/20/30, but it was {bonus_total}'
            )

        writes.append(CellWrite.single(sheet_name, parameters.bonus_columns[bonus_index], row, bonus_total))
    elif not parameters.is_placeholder_phase(phase_score, row, phases_count):
        correct_action = next(
            (action for action in phase_score.scoring_actions if action.score > 0), None
        )
        if correct_action is not None:
            # A lone player's team ID is their own player ID
            team_id = correct_action.team_id or correct_action.player_id
            if team_id not in team_ids or team_ids.index(team_id) >= len(parameters.bonus_columns):
                return unknown_bonus_team(parameters, row)

            bonus_column = parameters.bonus_columns[team_ids.index(team_id)]
            writes.append(CellWrite.single(sheet_name, bonus_column, row, 0))

    return Result.ok(writes)


def tj_clear_ranges(parameters: FormatParameters, sheet_name: str) -> list[str]:
    first_column, second_column = parameters.starting_columns
    last_row = parameters.first_phase_row + parameters.phases_limit - 1

    # Player columns plus the bonus column that follows them
    columns_after_initial = parameters.players_per_team_limit
    return [
        f"'{sheet_name}'!{first_column}{parameters.first_phase_row}:"
        f'{first_column.add(columns_after_initial)}{last_row}',
        f"'{sheet_name}'!{second_column}{parameters.first_phase_row}:"
        f'{second_column.add(columns_after_initial)}{last_row}',
        # The first team name is always overwritten
        f"'{sheet_name}'!{second_column}{parameters.team_name_row}:{second_column}{parameters.team_name_row}",
        f"'{sheet_name}'!{first_column}{parameters.player_name_row}:"
        f'{first_column.add(columns_after_initial - 1)}{parameters.player_name_row}',
        f"'{sheet_name}'!{second_column}{parameters.player_name_row}:"
        f'{second_column.add(columns_after_initial - 1)}{parameters.player_name_row}',
    ]


def tj_roster_ranges(
    parameters: FormatParameters, team_id_to_names: dict[str, str], groupings: list[TeamGrouping]
) -> Result[list[CellWrite]]:
    """Team names across the first row, each team's players down its column."""
    if not groupings:
        return Result.ok([])

    sheet_name = parameters.rosters_sheet_name
    team_names = [get_team_name(team_id, team_id_to_names, groupings) for team_id, _players in groupings]
    writes = [CellWrite.along_row(sheet_name, FIRST_COLUMN, 1, team_names)]
    for offset, (_team_id, players) in enumerate(groupings):
        writes.append(
            CellWrite.along_column(
                sheet_name,
                FIRST_COLUMN.add(offset),
                TJ_ROSTERS_FIRST_PLAYER_ROW,
                [pair.display_name for pair in players],
            )
        )

    return Result.ok(writes)


def ucsd_bonus_ranges(
    parameters: FormatParameters,
    phase_score: PhaseScore,
    team_ids: list[str],
    sheet_name: str,
    row: int,
    phases_count: int,
) -> Result[list[CellWrite]]:
    """
    Mark each bonus part as answered or not for the team that heard it.

    Only one team can hear a bonus, so the other team's parts are cleared.
    """
    writes = []
    if phase_score.bonus_scores:
        bonus_part_count = len(phase_score.bonus_scores)
        if bonus_part_count != UCSD_BONUS_PARTS:
            return Result.fail(
                f'Non-three part bonus in phase {parameters.phase_number(row)}. '
                f"Number of parts: {bonus_part_count}. These aren't supported for the scoresheet."
            )

        if phase_score.bonus_team_id not in team_ids:
            return unknown_bonus_team(parameters, row)

        bonus_index = team_ids.index(phase_score.bonus_team_id)
        bonus_column = parameters.bonus_columns[bonus_index]
        writes.append(
            CellWrite.along_row(sheet_name, bonus_column, row, [score > 0 for score in phase_score.bonus_scores])
        )

        other_bonus_column = parameters.bonus_columns[len(parameters.bonus_columns) - bonus_index - 1]
        writes.append(CellWrite.along_row(sheet_name, other_bonus_column, row, CLEARED_BONUS))
    else:
        for bonus_column in parameters.bonus_columns:
            writes.append(CellWrite.along_row(sheet_name, bonus_column, row, CLEARED_BONUS))

    return Result.ok(writes)


def ucsd_clear_ranges(parameters: FormatParameters, sheet_name: str) -> list[str]:
    # The first column already holds the first player
    columns_after_initial = parameters.players_per_team_limit - 1
    last_row = parameters.first_phase_row + parameters.phases_limit - 1
    return [
        f"'{sheet_name}'!{column}{parameters.first_phase_row}:{column.add(columns_after_initial)}{last_row}"
        for column in parameters.starting_columns
    ]


def ucsd_roster_ranges(
    parameters: FormatParameters, team_id_to_names: dict[str, str], groupings: list[TeamGrouping]
) -> Result[list[CellWrite]]:
    """One row per team: the team name, then its players."""
    writes = []
    for offset, (team_id, players) in enumerate(groupings):
        # Lone players aren't in the name map, so they use their own name
        team_name = get_team_name(team_id, team_id_to_names, groupings)
        row_values = [team_name] + [pair.display_name for pair in players]
        writes.append(
            CellWrite.along_row(parameters.rosters_sheet_name, FIRST_COLUMN, UCSD_ROSTERS_FIRST_ROW + offset, row_values)
        )

    return Result.ok(writes)


TJ_FORMAT = FormatParameters(
    name='TJ Sheets',
    first_phase_row=4,
    last_bonus_row=23,
    phases_limit=24,
    # TJ rosters have no real player limit, but each team only has 6 columns on a round sheet
    players_per_team_limit=6,
    starting_columns=TJ_STARTING_COLUMNS,
    bonus_columns=TJ_BONUS_COLUMNS,
    team_name_row=2,
    player_name_row=3,
    sheet_name_format='ROUND {round_number}',
    bonus_hook=tj_bonus_ranges,
    tossup_hook=tj_tossup_ranges,
    clear_ranges_builder=tj_clear_ranges,
    roster_hook=tj_roster_ranges,
    rosters_sheet_name=TJ_ROSTERS_SHEET_NAME,
    rosters_clear_ranges=(f"'{TJ_ROSTERS_SHEET_NAME}'!A1:ZZ21",),
    # One roster column per team
    teams_limit=MAXIMUM_COLUMN_NUMBER,
    failure_prefix=SHEETS_FAILURE_PREFIX,
)

UCSD_FORMAT = FormatParameters(
    name='UCSD',
    first_phase_row=4,
    last_bonus_row=27,
    phases_limit=28,
    players_per_team_limit=6,
    starting_columns=UCSD_STARTING_COLUMNS,
    bonus_columns=UCSD_BONUS_COLUMNS,
    team_name_row=1,
    player_name_row=3,
    sheet_name_format='Round {round_number}',
    bonus_hook=ucsd_bonus_ranges,
    clear_ranges_builder=ucsd_clear_ranges,
    roster_hook=ucsd_roster_ranges,
    rosters_sheet_name=UCSD_ROSTERS_SHEET_NAME,
    rosters_clear_ranges=(f"'{UCSD_ROSTERS_SHEET_NAME}'!A2:G999",),
    teams_limit=100,
    failure_prefix=SHEETS_FAILURE_PREFIX,
)
