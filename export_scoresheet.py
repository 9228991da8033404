#!/usr/bin/env python3
"""
Quiz bowl scoresheet exporter.

Exports a saved game to an Excel scoresheet or to a TJ/UCSD Google Sheet,
and writes team rosters to the Google Sheet's rosters tab.

Usage:
    python export_scoresheet.py file games/round_1.json --reader "The Reader" --room "Room A"
    python export_scoresheet.py sheets games/round_1.json --type tj --url URL --round 1
    python export_scoresheet.py rosters games/teams.json --type ucsd --url URL
    python export_scoresheet.py template
"""

import argparse
import asyncio
import sys
from pathlib import Path

from qbsheets import (
    ExcelFileScoresheetGenerator,
    GoogleSheetsApi,
    GoogleSheetsGeneratorFactory,
    GoogleSheetsType,
    load_game,
)
from qbsheets.config import get_config, get_template_path
from qbsheets.excel_generator import ATTRIBUTION, EXCEL_FORMAT, get_export_filename
from qbsheets.generator import get_trim_advisory
from qbsheets.logging_config import setup_logging
from qbsheets.template import save_template
from qbsheets.utils import save_bytes


def export_file(args: argparse.Namespace) -> int:
    game = load_game(args.game)
    template = Path(args.template) if args.template else get_template_path()
    if not args.template and not template.exists():
        save_template(template)
        print(f'Created the scoresheet template at {template}')
    generator = ExcelFileScoresheetGenerator(template)
    result = generator.try_create_scoresheet(game, args.reader, args.room)
    if not result.success:
        print(f'Export failed. Error: {result.error_message}')
        return 1

    output = Path(args.output) if args.output else Path(get_export_filename(args.reader, args.count))
    save_bytes(output, result.value.stream.getvalue())
    print(ATTRIBUTION)
    if result.value.trimmed:
        print(get_trim_advisory(EXCEL_FORMAT.phases_limit).strip())
    print(f'Scoresheet saved to {output}')
    return 0


async def export_sheets(args: argparse.Namespace) -> int:
    game = load_game(args.game)
    sheets_api = GoogleSheetsApi(get_config())
    try:
        generator = GoogleSheetsGeneratorFactory(sheets_api).create(args.type)
        if args.command == 'rosters':
            result = await generator.try_update_rosters(game.team_id_to_names, game.players, args.url)
        else:
            result = await generator.try_create_scoresheet(game, args.url, args.round)
    finally:
        sheets_api.close()

    if not result.success:
        print(f'Export failed. Error: {result.error_message}')
        return 1

    print(result.value)
    return 0


def write_template(args: argparse.Namespace) -> int:
    output = Path(args.output) if args.output else get_template_path()
    save_template(output)
    print(f'Template saved to {output}')
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description='Quiz bowl scoresheet exporter')
    parser.add_argument('--verbose', '-v', action='store_true', help='Log debug output')
    parser.add_argument('--no-log-file', action='store_true', help="Don't write a log file")
    subparsers = parser.add_subparsers(dest='command', required=True)

    file_parser = subparsers.add_parser('file', help='Export a game to an Excel scoresheet')
    file_parser.add_argument('game', help='Path to the game JSON file')
    file_parser.add_argument('--reader', required=True, help='Reader name, used as moderator and scorekeeper')
    file_parser.add_argument('--room', default='', help='Room name')
    file_parser.add_argument('--output', '-o', default=None, help='Output path (default: Scoresheet_{reader}_{count}.xlsx)')
    file_parser.add_argument('--count', type=int, default=1, help='Export number used in the default filename')
    file_parser.add_argument('--template', default=None, help='Workbook template (default: from config, created if missing)')

    sheets_types = [sheets_type.value for sheets_type in GoogleSheetsType]
    sheets_parser = subparsers.add_parser('sheets', help='Export a game to a Google Sheet')
    sheets_parser.add_argument('game', help='Path to the game JSON file')
    sheets_parser.add_argument('--type', '-t', choices=sheets_types, required=True, help='Sheet layout')
    sheets_parser.add_argument('--url', '-u', required=True, help='URL of the Google Sheet')
    sheets_parser.add_argument('--round', '-r', type=int, required=True, help='Round number, starting from 1')

    rosters_parser = subparsers.add_parser('rosters', help="Write teams to a Google Sheet's rosters tab")
    rosters_parser.add_argument('game', help='Path to a game JSON file with the teams and players')
    rosters_parser.add_argument('--type', '-t', choices=sheets_types, required=True, help='Sheet layout')
    rosters_parser.add_argument('--url', '-u', required=True, help='URL of the Google Sheet')

    template_parser = subparsers.add_parser('template', help='Write the blank workbook template')
    template_parser.add_argument('--output', '-o', default=None, help='Output path (default: from config)')

    args = parser.parse_args()
    setup_logging(verbose=args.verbose, log_to_file=not args.no_log_file)

    if args.command == 'file':
        return export_file(args)
    if args.command == 'template':
        return write_template(args)
    return asyncio.run(export_sheets(args))


if __name__ == '__main__':
    sys.exit(main())
