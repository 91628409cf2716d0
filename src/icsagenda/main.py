#!/usr/bin/env python
'''
@File    :   main.py
@Version :   1.0
@Desc    :   ICS Agenda for status bars and terminals
'''
import argparse
import importlib
import importlib.util
import json
import logging
import os
import re
import sys
from datetime import timedelta
from pathlib import Path
from typing import Protocol

from icsagenda.cache import CacheStore
from icsagenda.errors import AgendaError, ConfigError
from icsagenda.events import Event
from icsagenda.feed import get_todays_events

DEFAULT_CACHE_DURATION = '5m'
HANDLER_PACKAGE = 'icsagenda.handlers'
OUTPUT_MODES = ['current', 'current-link', 'next', 'next-link', 'tail', 'agenda']


class BaseHandler(Protocol):
    def __call__(self, events: list[Event]) -> None: ...


def load_handler(handler_name: str, handler_params: dict | None = None) -> BaseHandler | None:
    """Load and instantiate the output handler of a mode.

    Args:
        handler_name: Output mode (e.g. 'next-link') or path to a handler script
        handler_params: Optional parameters to pass to handler constructor

    Returns:
        Callable handler instance, or None if the mode is unknown
    """
    handler_file = Path(handler_name)
    if handler_file.suffix == '.py' and handler_file.is_file():
        spec = importlib.util.spec_from_file_location(handler_file.stem, handler_name)
        if not spec or not spec.loader:
            return None
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
    else:
        if not re.fullmatch(r'[a-z][a-z_-]*', handler_name):
            return None
        module_name = f"{HANDLER_PACKAGE}.{handler_name.replace('-', '_')}"
        try:
            module = importlib.import_module(module_name)
        except ModuleNotFoundError as e:
            if e.name != module_name:
                raise
            return None

    handler_class = getattr(module, 'Handler')

    if handler_params:
        return handler_class(**handler_params)
    else:
        return handler_class()


def parse_duration(duration_str: str) -> timedelta:
    """Parse duration string to timedelta object.

    Args:
        duration_str: Duration string made of one or more groups (e.g. '90s', '5m', '1h30m', '1d')

    Returns:
        timedelta object representing the duration

    Raises:
        ConfigError: If duration format is invalid
    """
    if not re.fullmatch(r'(\d+[smhd])+', duration_str):
        raise ConfigError(f"Invalid duration format: {duration_str}. Supported formats: 90s, 5m, 1h30m, 1d")

    units = {'s': 'seconds', 'm': 'minutes', 'h': 'hours', 'd': 'days'}
    duration = timedelta()
    for match in re.finditer(r'(\d+)([smhd])', duration_str):
        duration += timedelta(**{units[match.group(2)]: int(match.group(1))})
    return duration


def parse_params(params_str: str | None) -> dict | None:
    if not params_str:
        return None
    try:
        params = json.loads(params_str)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON format for handler parameters: {e}") from e
    if not isinstance(params, dict):
        raise ConfigError("Params must be a JSON object (dict)")
    return params


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='ICS Agenda: shows the current and next event of a calendar feed'
    )

    parser.add_argument(
        '--ics-url',
        required=True,
        help='the ICS URL that will be used to retrieve the events'
    )

    parser.add_argument(
        '--output',
        required=True,
        help=f"what to output, one of {', '.join(OUTPUT_MODES)}, or the path to a handler script; "
             "'tail' prints current and next event continuously, 'agenda' lists all events of today"
    )

    parser.add_argument(
        '--cal-cache-duration',
        type=str,
        default=DEFAULT_CACHE_DURATION,
        help=f'how long the fetched events are cached; formats: 90s, 5m, 1h30m. (Default: {DEFAULT_CACHE_DURATION})'
    )

    parser.add_argument(
        '--cache-dir',
        type=str,
        help='directory of the cache files (default: system temporary directory)'
    )

    parser.add_argument(
        '-p', '--params',
        type=str,
        help='handler initialization parameters in JSON format, e.g. \'{"width": 30}\''
    )

    parser.add_argument(
        '-l', '--log-level',
        type=str.upper,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        default='WARNING',
        help='set the logging level (default: WARNING)'
    )

    parser.add_argument(
        '-v', '--version',
        action='version',
        version='ics-agenda 1.0.0',
        help='show program version and exit'
    )

    return parser


def main(argv: list[str] | None = None):
    """Main entry point for the ICS agenda."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    try:
        params = parse_params(args.params)
        cache_duration = parse_duration(args.cal_cache_duration)
    except ConfigError as e:
        logging.error(e)
        sys.exit(1)

    try:
        handler = load_handler(args.output, params)
    except Exception as e:
        logging.error(f"Error loading handler for output '{args.output}': {e}")
        sys.exit(1)

    if handler is None:
        logging.debug(f"Unknown output '{args.output}', nothing to do.")
        return

    try:
        events = get_todays_events(args.ics_url, cache_duration, cache=CacheStore(args.cache_dir))
    except AgendaError as e:
        logging.error(e)
        sys.exit(1)

    logging.info(f"{len(events)} events today")

    handler(events)
    return


def run():
    try:
        main()
    except KeyboardInterrupt:
        print(file=sys.stderr)
        sys.exit(130)
    except BrokenPipeError:
        sys.stderr = open(os.devnull, 'w')
        sys.exit(1)


if __name__ == "__main__":
    run()
