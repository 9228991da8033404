"""End-to-end tests for the export_scoresheet command line."""

import json
import logging
from unittest.mock import patch

import openpyxl
import pytest

import export_scoresheet
from qbsheets.schemas import SheetsConfig

GAME_DATA = {
    'teams': {'alpha': 'Alpha', 'beta': 'Beta'},
    'players': [
        {'id': '2', 'name': 'Alice', 'team': 'alpha'},
        {'id': '4', 'name': 'Bob', 'team': 'beta'},
    ],
    'phases': [
        {'actions': [{'player': '2', 'score': 15}], 'bonus': {'team': 'alpha', 'parts': [10, 0, 10]}},
        {'actions': [{'player': '4', 'score': -5}]},
    ],
}


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logging.getLogger('qbsheets').handlers = []


@pytest.fixture
def game_path(tmp_path):
    path = tmp_path / 'game.json'
    path.write_text(json.dumps(GAME_DATA))
    return path


def run_cli(*args):
    with patch('sys.argv', ['export_scoresheet.py', '--no-log-file', *args]):
        return export_scoresheet.main()


class TestCommands:
    """Tests for each subcommand."""

    def test_template(self, tmp_path):
        output = tmp_path / 'template.xlsx'
        assert run_cli('template', '--output', str(output)) == 0
        assert output.exists()

    def test_file_export(self, tmp_path, game_path, template_path, capsys):
        output = tmp_path / 'out' / 'scoresheet.xlsx'
        exit_code = run_cli(
            'file', str(game_path), '--reader', 'The Reader', '--room', 'Room 1',
            '--template', str(template_path), '--output', str(output),
        )

        assert exit_code == 0
        assert "NAQT's electronic scoresheet" in capsys.readouterr().out
        ws = openpyxl.load_workbook(output)['Scoresheet']
        assert ws['B2'].value == 'Room 1'
        assert ws['B8'].value == 15

    def test_file_export_creates_missing_default_template(self, tmp_path, game_path):
        default_template = tmp_path / 'data' / 'template.xlsx'
        output = tmp_path / 'scoresheet.xlsx'
        with patch('export_scoresheet.get_template_path', return_value=default_template):
            exit_code = run_cli('file', str(game_path), '--reader', 'R', '--output', str(output))

        assert exit_code == 0
        assert default_template.exists()
        assert openpyxl.load_workbook(output)['Scoresheet']['B8'].value == 15

    def test_file_export_failure(self, tmp_path, game_path, capsys):
        exit_code = run_cli(
            'file', str(game_path), '--reader', 'R', '--template', str(tmp_path / 'missing.xlsx'),
        )
        assert exit_code == 1
        assert 'Export failed.' in capsys.readouterr().out

    def test_sheets_without_credentials(self, game_path, capsys):
        with patch('export_scoresheet.get_config', return_value=SheetsConfig()):
            exit_code = run_cli(
                'sheets', str(game_path), '--type', 'tj',
                '--url', 'https://docs.google.com/spreadsheets/d/abc/edit', '--round', '1',
            )

        assert exit_code == 1
        assert "isn't configured" in capsys.readouterr().out
