"""Logging setup for scoresheet exports."""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

# Third-party loggers that are chatty at INFO during every Sheets request
NOISY_LOGGERS = ('googleapiclient', 'googleapiclient.discovery_cache', 'google.auth')


def setup_logging(
    log_dir: Optional[Path] = None,
    verbose: bool = False,
    log_to_file: bool = True,
) -> logging.Logger:
    """
    Configure the 'qbsheets' logger for a command-line run.

    Console output stays short. The log file, when enabled, gets the full
    record with source locations so failed exports can be traced afterwards.

    Args:
        log_dir: Directory for log files (default: ./logs)
        verbose: Log at DEBUG instead of INFO
        log_to_file: Whether to also write a timestamped log file

    Returns:
        The configured 'qbsheets' logger
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger('qbsheets')
    logger.setLevel(level)
    logger.handlers = []

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
    logger.addHandler(console_handler)

    if log_to_file:
        log_dir = log_dir or Path('logs')
        log_dir.mkdir(parents=True, exist_ok=True)

        log_file = log_dir / f'export_{datetime.now().strftime("%Y%m%d_%H%M%S")}.log'
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S',
            )
        )
        logger.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logger
