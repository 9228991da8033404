"""Tests for configuration, schemas and game file loading."""

import json
import logging
from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError

from qbsheets.config import (
    CONFIG_PATH_ENV_VAR,
    PROJECT_ROOT,
    clear_config_cache,
    get_config,
    get_template_path,
    reload_config,
)
from qbsheets.game_loader import load_game
from qbsheets.logging_config import setup_logging
from qbsheets.schemas import GameFile, SheetsConfig
from qbsheets.utils import load_json, save_bytes

GAME_DATA = {
    'teams': {'alpha': 'Alpha', 'beta': 'Beta'},
    'players': [
        {'id': '2', 'name': 'Alice', 'team': 'alpha'},
        {'id': '4', 'name': 'Bob', 'team': 'beta'},
        {'id': '9', 'name': 'Solo'},
    ],
    'phases': [
        {'actions': [{'player': '2', 'score': 15}], 'bonus': {'team': 'alpha', 'parts': [10, 0, 10]}},
        {'actions': [{'player': '4', 'score': -5}, {'player': '7', 'score': 10, 'name': 'Visitor'}]},
        {},
    ],
}


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    """Point the config loader at a temporary file."""
    path = tmp_path / 'sheets_config.json'
    monkeypatch.setenv(CONFIG_PATH_ENV_VAR, str(path))
    clear_config_cache()
    yield path
    clear_config_cache()


@pytest.fixture
def game_path(tmp_path):
    path = tmp_path / 'game.json'
    path.write_text(json.dumps(GAME_DATA))
    return path


class TestSheetsConfig:
    """Tests for the config schema."""

    def test_defaults_have_no_credentials(self):
        config = SheetsConfig()
        assert not config.has_google_credentials
        assert config.template_path == 'data/naqt-scoresheet-electronic-template.xlsx'

    def test_credentials(self):
        config = SheetsConfig(google_app_email='bot@example.iam.gserviceaccount.com', google_app_private_key='key')
        assert config.has_google_credentials

    def test_email_without_key_is_not_configured(self):
        assert not SheetsConfig(google_app_email='bot@example.com').has_google_credentials

    def test_invalid_email(self):
        with pytest.raises(ValidationError):
            SheetsConfig(google_app_email='not-an-email')

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            SheetsConfig(google_app_password='hunter2')


class TestConfigLoading:
    """Tests for get_config and friends."""

    def test_missing_file_gives_defaults(self, config_file):
        assert get_config() == SheetsConfig()

    def test_loads_file(self, config_file):
        config_file.write_text(json.dumps({'google_app_email': 'bot@example.com', 'google_app_private_key': 'k'}))
        assert get_config().google_app_email == 'bot@example.com'

    def test_cached_until_cleared(self, config_file):
        config_file.write_text(json.dumps({'template_path': 'first.xlsx'}))
        assert get_config().template_path == 'first.xlsx'

        config_file.write_text(json.dumps({'template_path': 'second.xlsx'}))
        assert get_config().template_path == 'first.xlsx'

        clear_config_cache()
        assert get_config().template_path == 'second.xlsx'

    def test_invalid_file(self, config_file):
        config_file.write_text(json.dumps({'unexpected': True}))
        with pytest.raises(ValueError, match='Schema validation failed'):
            get_config()

    def test_relative_template_path(self, config_file):
        config_file.write_text(json.dumps({'template_path': 'data/template.xlsx'}))
        assert get_template_path() == PROJECT_ROOT / 'data' / 'template.xlsx'

    def test_absolute_template_path(self, config_file, tmp_path):
        config_file.write_text(json.dumps({'template_path': str(tmp_path / 'template.xlsx')}))
        assert get_template_path() == tmp_path / 'template.xlsx'

    def test_reload_config_rotates_credentials(self, config_file):
        config_file.write_text(json.dumps({'template_path': 'first.xlsx'}))
        get_config()
        config_file.write_text(json.dumps({'google_app_email': 'new@example.com', 'google_app_private_key': 'k'}))

        sheets_api = MagicMock()
        config = reload_config(sheets_api)

        assert config.google_app_email == 'new@example.com'
        sheets_api.on_configuration_change.assert_called_once_with(config)


class TestJsonFiles:
    """Tests for JSON and byte file helpers."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_json(tmp_path / 'nope.json')

    def test_malformed_json(self, tmp_path):
        path = tmp_path / 'bad.json'
        path.write_text('{"teams": ')
        with pytest.raises(json.JSONDecodeError):
            load_json(path)

    def test_save_bytes_creates_directories(self, tmp_path):
        path = save_bytes(tmp_path / 'out' / 'sheet.xlsx', b'data')
        assert path.read_bytes() == b'data'


class TestGameFile:
    """Tests for game file validation and loading."""

    def test_duplicate_player_rejected(self):
        data = dict(GAME_DATA, players=[{'id': '2', 'name': 'Alice'}, {'id': '2', 'name': 'Again'}])
        with pytest.raises(ValidationError, match='Duplicate player ID'):
            GameFile.model_validate(data)

    def test_empty_bonus_rejected(self):
        data = dict(GAME_DATA, phases=[{'bonus': {'team': 'alpha', 'parts': []}}])
        with pytest.raises(ValidationError):
            GameFile.model_validate(data)

    def test_load_game(self, game_path):
        game = load_game(game_path)

        assert game.team_id_to_names == {'alpha': 'Alpha', 'beta': 'Beta'}
        assert [pair.team_id for pair in game.players] == ['alpha', 'beta', '9']
        assert len(game.phase_scores) == 3

        first, second, third = game.phase_scores
        assert first.scoring_actions[0].display_name == 'Alice'
        assert first.scoring_actions[0].team_id == 'alpha'
        assert first.bonus_team_id == 'alpha'
        assert first.bonus_scores == (10, 0, 10)

        assert second.scoring_actions[0].team_id == 'beta'
        assert second.scoring_actions[1].display_name == 'Visitor'
        assert second.scoring_actions[1].team_id is None
        assert second.bonus_scores == ()

        assert third.scoring_actions == ()

    def test_invalid_game_file(self, tmp_path):
        path = tmp_path / 'game.json'
        path.write_text(json.dumps({'teams': {}}))
        with pytest.raises(ValueError):
            load_game(path)


class TestLogging:
    """Tests for logging setup."""

    def test_console_only(self):
        logger = setup_logging(verbose=True, log_to_file=False)
        try:
            assert logger.name == 'qbsheets'
            assert logger.level == logging.DEBUG
            assert len(logger.handlers) == 1
            assert logging.getLogger('googleapiclient').level == logging.WARNING
        finally:
            logger.handlers = []

    def test_log_file(self, tmp_path):
        logger = setup_logging(log_dir=tmp_path)
        try:
            assert logger.level == logging.INFO
            assert len(list(tmp_path.glob('export_*.log'))) == 1
        finally:
            for handler in logger.handlers:
                handler.close()
            logger.handlers = []
