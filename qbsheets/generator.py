"""Shared scoresheet generation for every spreadsheet layout.

A layout is described by a FormatParameters value: the rows and columns it
uses plus hook functions for the parts that differ between layouts (dead
tossup markers, bonus columns, clear ranges and rosters). The same algorithm
turns a GameSnapshot into a list of cell writes for any of them.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from .columns import ColumnAddress
from .models import (
    CellWrite,
    GameSnapshot,
    PhaseScore,
    PlayerTeamPair,
    Result,
    ScoresheetPlan,
)

logger = logging.getLogger('qbsheets.generator')

TeamGrouping = tuple[str, list[PlayerTeamPair]]

# hook(parameters, phase_score, team_ids, sheet_name, row, phases_count)
PhaseHook = Callable[
    ['FormatParameters', PhaseScore, list[str], str, int, int], Result[list[CellWrite]]
]
ClearRangesBuilder = Callable[['FormatParameters', str], list[str]]
RosterHook = Callable[
    ['FormatParameters', dict[str, str], list[TeamGrouping]], Result[list[CellWrite]]
]

TEAMS_LIMIT_MESSAGE = 'Export only works if there are 1 or 2 teams in the game.'


def no_additional_tossup_ranges(
    parameters: 'FormatParameters',
    phase_score: PhaseScore,
    team_ids: list[str],
    sheet_name: str,
    row: int,
    phases_count: int,
) -> Result[list[CellWrite]]:
    """Tossup hook for layouts that only record the buzzes themselves."""
    return Result.ok([])


def no_clear_ranges(parameters: 'FormatParameters', sheet_name: str) -> list[str]:
    return []


@dataclass(frozen=True)
class FormatParameters:
    """Layout constants and hooks for one kind of scoresheet."""
    name: str
    first_phase_row: int
    last_bonus_row: int
    phases_limit: int
    players_per_team_limit: int
    starting_columns: tuple[ColumnAddress, ...]
    bonus_columns: tuple[ColumnAddress, ...]
    team_name_row: int
    player_name_row: int
    sheet_name_format: str
    bonus_hook: PhaseHook
    tossup_hook: PhaseHook = no_additional_tossup_ranges
    clear_ranges_builder: ClearRangesBuilder = no_clear_ranges
    roster_hook: Optional[RosterHook] = None
    rosters_sheet_name: str = ''
    rosters_clear_ranges: tuple[str, ...] = ()
    teams_limit: int = 2
    skip_row_after: Optional[int] = None  # A divider row follows this row
    failure_prefix: str = ''

    def sheet_name(self, round_number: int) -> str:
        return self.sheet_name_format.format(round_number=round_number)

    def phase_number(self, row: int) -> int:
        """1-based phase offset for a phase row, used in error messages."""
        if self.skip_row_after is not None and row > self.skip_row_after:
            row -= 1
        return row - self.first_phase_row + 1

    def is_placeholder_phase(self, phase_score: PhaseScore, row: int, phases_count: int) -> bool:
        """True for a trailing phase nobody has buzzed on yet."""
        return row == self.first_phase_row + phases_count - 1 and not phase_score.scoring_actions

    def clear_ranges(self, sheet_name: str) -> list[str]:
        return self.clear_ranges_builder(self, sheet_name)

    def validation_failure(self, message: str) -> Result:
        return Result.fail(f'{self.failure_prefix}{message}')


def group_players_by_team(players) -> list[TeamGrouping]:
    """Group players by team, keeping the order teams and players first appear."""
    groupings: dict[str, list[PlayerTeamPair]] = {}
    for pair in players:
        groupings.setdefault(pair.team_id, []).append(pair)
    return list(groupings.items())


def get_team_ids(team_id_to_names: dict[str, str], groupings: list[TeamGrouping]) -> list[str]:
    """Team IDs in encounter order, then named teams that have no players."""
    team_ids = [team_id for team_id, _players in groupings]
    team_ids.extend(team_id for team_id in team_id_to_names if team_id not in team_ids)
    return team_ids


def get_team_name(team_id: str, team_id_to_names: dict[str, str], groupings: list[TeamGrouping]) -> str:
    """Display name for a team, falling back to its first player's name."""
    if team_id in team_id_to_names:
        return team_id_to_names[team_id]

    for grouping_team_id, players in groupings:
        if grouping_team_id == team_id and players:
            return players[0].display_name

    return team_id


def trim_phases(phase_scores, phases_limit: int) -> tuple[list[PhaseScore], bool]:
    """
    Drop phases that don't fit in the scoresheet.

    One extra phase is allowed if nobody buzzed in it, since that is the
    placeholder for the question currently being read.

    Returns:
        Tuple of (phases to export, whether any phase was dropped)
    """
    phase_scores = list(phase_scores)
    phases_count = len(phase_scores)
    if phases_count > phases_limit + 1 or (
        phases_count == phases_limit + 1 and phase_scores[-1].scoring_actions
    ):
        return phase_scores[:phases_limit], True

    return phase_scores, False


def create_player_id_to_column_mapping(
    groupings: list[TeamGrouping], starting_columns: tuple[ColumnAddress, ...]
) -> dict[str, ColumnAddress]:
    """Give each player a column, starting from their team's first column."""
    player_id_to_column: dict[str, ColumnAddress] = {}
    for starting_column, (_team_id, players) in zip(starting_columns, groupings):
        for offset, pair in enumerate(players):
            player_id_to_column[pair.player_id] = starting_column.add(offset)

    return player_id_to_column


def get_trim_advisory(phases_limit: int) -> str:
    return (
        f' The game had more than {phases_limit} tossups, '
        f'so only the first {phases_limit} were exported.'
    )


def build_scoresheet(
    game: GameSnapshot, parameters: FormatParameters, sheet_name: str
) -> Result[ScoresheetPlan]:
    """
    Build every cell write for a game's scoresheet.

    Nothing is sent anywhere; a failure here means the sheet was never touched.

    Args:
        game: Rosters and phases for the game
        parameters: Layout to generate
        sheet_name: Worksheet to write into

    Returns:
        Result holding a ScoresheetPlan, or the reason the game can't be exported
    """
    groupings = group_players_by_team(game.players)
    team_ids = get_team_ids(game.team_id_to_names, groupings)
    if not team_ids or len(team_ids) > 2 or len(team_ids) > len(parameters.starting_columns):
        return parameters.validation_failure(TEAMS_LIMIT_MESSAGE)

    if any(len(players) > parameters.players_per_team_limit for _team_id, players in groupings):
        return parameters.validation_failure(
            f'Export only currently works if there are at most '
            f'{parameters.players_per_team_limit} players on a team.'
        )

    phase_scores, trimmed = trim_phases(game.phase_scores, parameters.phases_limit)
    if trimmed:
        logger.info(
            f'Trimming {len(game.phase_scores)} phases to {parameters.phases_limit} '
            f'for the {parameters.name} scoresheet'
        )

    player_id_to_column = create_player_id_to_column_mapping(groupings, parameters.starting_columns)

    writes = []
    for starting_column, team_id in zip(parameters.starting_columns, team_ids):
        team_name = get_team_name(team_id, game.team_id_to_names, groupings)
        writes.append(CellWrite.single(sheet_name, starting_column, parameters.team_name_row, team_name))

    for _team_id, players in groupings:
        for pair in players:
            column = player_id_to_column[pair.player_id]
            writes.append(CellWrite.single(sheet_name, column, parameters.player_name_row, pair.display_name))

    row = parameters.first_phase_row
    phases_count = len(phase_scores)
    for phase_score in phase_scores:
        for action in phase_score.scoring_actions:
            column = player_id_to_column.get(action.player_id)
            if column is None:
                return Result.fail(
                    f'Unknown player {action.display_name} (ID {action.player_id}). Cannot accurately '
                    f'create a scoresheet. This happens in phase {parameters.phase_number(row)}'
                )

            writes.append(CellWrite.single(sheet_name, column, row, action.score))

        tossup_result = parameters.tossup_hook(
            parameters, phase_score, team_ids, sheet_name, row, phases_count
        )
        if not tossup_result.success:
            return Result.fail(tossup_result.error_message)
        writes.extend(tossup_result.value)

        if row <= parameters.last_bonus_row:
            bonus_result = parameters.bonus_hook(
                parameters, phase_score, team_ids, sheet_name, row, phases_count
            )
            if not bonus_result.success:
                return Result.fail(bonus_result.error_message)
            writes.extend(bonus_result.value)

        if row == parameters.skip_row_after:
            row += 1

        row += 1

    logger.debug(f'Built {len(writes)} writes for {phases_count} phases on {sheet_name}')
    return Result.ok(
        ScoresheetPlan(writes=writes, clear_ranges=parameters.clear_ranges(sheet_name), trimmed=trimmed)
    )


def build_rosters(
    team_id_to_names: dict[str, str], players, parameters: FormatParameters
) -> Result[ScoresheetPlan]:
    """
    Build the writes for a layout's rosters sheet.

    Args:
        team_id_to_names: Names for teams that have one
        players: Every known player with their team
        parameters: Layout to generate

    Returns:
        Result holding a ScoresheetPlan, or the reason the rosters can't be written
    """
    if parameters.roster_hook is None:
        raise ValueError(f'The {parameters.name} layout has no rosters sheet')

    groupings = [grouping for grouping in group_players_by_team(players) if grouping[1]]
    if any(len(players) > parameters.players_per_team_limit for _team_id, players in groupings):
        return parameters.validation_failure(
            f'Rosters can only support up to {parameters.players_per_team_limit} players per team.'
        )

    if len(groupings) > parameters.teams_limit:
        return parameters.validation_failure(
            f'Rosters can only support up to {parameters.teams_limit} teams.'
        )

    writes_result = parameters.roster_hook(parameters, team_id_to_names, groupings)
    if not writes_result.success:
        return parameters.validation_failure(writes_result.error_message)

    return Result.ok(
        ScoresheetPlan(writes=writes_result.value, clear_ranges=list(parameters.rosters_clear_ranges))
    )


class GoogleSheetsGenerator:
    """Writes scoresheets and rosters for one Google Sheets layout."""

    def __init__(self, sheets_api, parameters: FormatParameters):
        self.sheets_api = sheets_api
        self.parameters = parameters

    async def try_create_scoresheet(
        self, game: GameSnapshot, sheets_url: str, round_number: int
    ) -> Result[str]:
        """
        Export a game into the round's worksheet of a Google Sheet.

        Args:
            game: Game to export
            sheets_url: URL of the Google Sheet, copied from the address bar
            round_number: Round number, starting from 1

        Returns:
            Result with a message to show the user
        """
        sheet_name = self.parameters.sheet_name(round_number)
        plan_result = build_scoresheet(game, self.parameters, sheet_name)
        if not plan_result.success:
            logger.info(f'Scoresheet export to {sheet_name} failed: {plan_result.error_message}')
            return Result.fail(plan_result.error_message)

        plan = plan_result.value
        result = await self.sheets_api.update_google_sheet(plan.writes, plan.clear_ranges, sheets_url)
        if result.success and plan.trimmed:
            return Result.ok(result.value + get_trim_advisory(self.parameters.phases_limit))

        return result

    async def try_update_rosters(
        self, team_id_to_names: dict[str, str], players, sheets_url: str
    ) -> Result[str]:
        """Write every team and its players to the layout's rosters sheet."""
        plan_result = build_rosters(team_id_to_names, players, self.parameters)
        if not plan_result.success:
            logger.info(f'Roster update failed: {plan_result.error_message}')
            return Result.fail(plan_result.error_message)

        plan = plan_result.value
        return await self.sheets_api.update_google_sheet(plan.writes, plan.clear_ranges, sheets_url)
