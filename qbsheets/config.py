"""Exporter configuration management."""

import logging
import os
from functools import lru_cache
from pathlib import Path

from .schemas import SheetsConfig
from .utils import load_json

logger = logging.getLogger('qbsheets.config')

CONFIG_PATH_ENV_VAR = 'QBSHEETS_CONFIG'
PROJECT_ROOT = Path(__file__).parent.parent
DEFAULT_CONFIG_PATH = PROJECT_ROOT / 'data' / 'sheets_config.json'


def get_config_path() -> Path:
    """Config file location, overridable with the QBSHEETS_CONFIG environment variable."""
    return Path(os.environ.get(CONFIG_PATH_ENV_VAR, DEFAULT_CONFIG_PATH))


@lru_cache(maxsize=1)
def get_config() -> SheetsConfig:
    """
    Load exporter configuration.

    Configuration is cached after first load. A missing file gives the
    defaults, which have no Google credentials, so only file exports work.

    Returns:
        SheetsConfig object with validated settings

    Raises:
        ValueError: If the config file has invalid structure

    Example:
        from qbsheets.config import get_config
        config = get_config()
        print(f"Service account: {config.google_app_email}")
    """
    config_path = get_config_path()
    if not config_path.exists():
        logger.warning(f'No config file at {config_path}; Google Sheets export is disabled')
        return SheetsConfig()

    return load_json(config_path, schema=SheetsConfig)


def get_template_path() -> Path:
    """Workbook template path, resolved against the project root when relative."""
    template_path = Path(get_config().template_path)
    if not template_path.is_absolute():
        template_path = PROJECT_ROOT / template_path
    return template_path


def clear_config_cache() -> None:
    """
    Clear the configuration cache.

    Use this if the config file is modified during runtime
    and you need to reload it.
    """
    get_config.cache_clear()


def reload_config(sheets_api) -> SheetsConfig:
    """
    Re-read the config file and hand it to a running Google Sheets client.

    Args:
        sheets_api: GoogleSheetsApi whose credentials should follow the file

    Returns:
        The newly loaded config
    """
    clear_config_cache()
    config = get_config()
    sheets_api.on_configuration_change(config)
    return config
