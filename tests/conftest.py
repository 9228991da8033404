"""Shared fixtures for scoresheet tests."""

import pytest

from qbsheets.models import GameSnapshot, PhaseScore, PlayerTeamPair, Result, ScoreAction
from qbsheets.sheets_api import SUCCESS_MESSAGE
from qbsheets.template import save_template

SHEETS_URL = 'https://docs.google.com/spreadsheets/d/1a2b3c/edit#gid=0'


class RecordingSheetsApi:
    """Stands in for GoogleSheetsApi and keeps every update it was asked to send."""

    def __init__(self, result=None):
        self.result = result or Result.ok(SUCCESS_MESSAGE)
        self.updates = []

    async def update_google_sheet(self, writes, clear_ranges, sheets_url):
        self.updates.append((list(writes), list(clear_ranges), sheets_url))
        return self.result


def tossup(player_id, score, team_id=None, name=None):
    return ScoreAction(player_id=player_id, display_name=name or f'Player {player_id}', score=score, team_id=team_id)


@pytest.fixture
def sheets_api():
    return RecordingSheetsApi()


@pytest.fixture
def two_team_game():
    """
    Alpha (Alice, Andy) against Beta (Bob).

    Phase 1: Alice 15, Alpha bonus 10/0/10
    Phase 2: Andy -5, Bob 10, Beta bonus 10/0/0
    Phase 3: dead tossup
    """
    players = (
        PlayerTeamPair('2', 'Alice', 'alpha'),
        PlayerTeamPair('3', 'Andy', 'alpha'),
        PlayerTeamPair('4', 'Bob', 'beta'),
    )
    phases = (
        PhaseScore((tossup('2', 15, 'alpha', 'Alice'),), 'alpha', (10, 0, 10)),
        PhaseScore((tossup('3', -5, 'alpha', 'Andy'), tossup('4', 10, 'beta', 'Bob')), 'beta', (10, 0, 0)),
        PhaseScore(),
    )
    return GameSnapshot({'alpha': 'Alpha', 'beta': 'Beta'}, players, phases)


@pytest.fixture
def template_path(tmp_path):
    return save_template(tmp_path / 'template.xlsx')
