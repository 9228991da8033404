from .columns import ColumnAddress
from .models import (
    CellWrite,
    GameSnapshot,
    PhaseScore,
    PlayerTeamPair,
    Result,
    ScoreAction,
    ScoresheetPlan,
)
from .generator import (
    FormatParameters,
    GoogleSheetsGenerator,
    build_rosters,
    build_scoresheet,
)
from .formats import TJ_FORMAT, UCSD_FORMAT
from .excel_generator import EXCEL_FORMAT, ExcelFileScoresheetGenerator, ScoresheetFile
from .sheets_api import GoogleSheetsApi, try_get_sheets_id
from .selector import GoogleSheetsGeneratorFactory, GoogleSheetsType, get_format_parameters
from .game_loader import load_game

__all__ = [
    # Models
    'ColumnAddress',
    'CellWrite',
    'GameSnapshot',
    'PhaseScore',
    'PlayerTeamPair',
    'Result',
    'ScoreAction',
    'ScoresheetPlan',
    # Generation
    'FormatParameters',
    'GoogleSheetsGenerator',
    'build_rosters',
    'build_scoresheet',
    # Layouts
    'TJ_FORMAT',
    'UCSD_FORMAT',
    'EXCEL_FORMAT',
    'GoogleSheetsType',
    'get_format_parameters',
    'GoogleSheetsGeneratorFactory',
    # Output
    'ExcelFileScoresheetGenerator',
    'ScoresheetFile',
    'GoogleSheetsApi',
    'try_get_sheets_id',
    # Game files
    'load_game',
]
