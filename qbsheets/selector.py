"""Choosing a Google Sheets layout by name."""

from enum import Enum

from .formats import TJ_FORMAT, UCSD_FORMAT
from .generator import FormatParameters, GoogleSheetsGenerator


class GoogleSheetsType(str, Enum):
    """Supported Google Sheets scoresheet layouts."""
    TJ = 'tj'
    UCSD = 'ucsd'


FORMAT_PARAMETERS = {
    GoogleSheetsType.TJ: TJ_FORMAT,
    GoogleSheetsType.UCSD: UCSD_FORMAT,
}


def get_format_parameters(sheets_type: GoogleSheetsType | str) -> FormatParameters:
    """
    Look up the layout for a sheets type.

    Raises:
        ValueError: If the sheets type isn't supported
    """
    try:
        return FORMAT_PARAMETERS[GoogleSheetsType(sheets_type)]
    except (KeyError, ValueError):
        raise ValueError(f'Cannot create a generator for type {sheets_type}') from None


class GoogleSheetsGeneratorFactory:
    """Creates generators that share one Google Sheets client."""

    def __init__(self, sheets_api):
        self.sheets_api = sheets_api

    def create(self, sheets_type: GoogleSheetsType | str) -> GoogleSheetsGenerator:
        return GoogleSheetsGenerator(self.sheets_api, get_format_parameters(sheets_type))
