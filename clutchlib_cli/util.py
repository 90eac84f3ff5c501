# Copyright 2025 Hathor Labs
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import logging.config
import sys
from argparse import ArgumentParser, Namespace
from collections import OrderedDict
from datetime import datetime
from enum import IntEnum, auto
from typing import Any, NamedTuple, Optional

import configargparse
import structlog
from colorama import Back, Fore, Style
from typing_extensions import assert_never

# environment variables with this prefix fill in any option, e.g. CLUTCH_API_URL for --api-url
ENV_VAR_PREFIX = 'clutch_'


def create_parser(*, prefix: Optional[str] = None, add_help: bool = True) -> ArgumentParser:
    return configargparse.ArgumentParser(auto_env_var_prefix=prefix or ENV_VAR_PREFIX, add_help=add_help)


class ConsoleRenderer(structlog.dev.ConsoleRenderer):
    """One line per event: `timestamp [level] event key=value ...`, keys sorted, colored with colorama."""

    @staticmethod
    def get_default_level_styles(colors: bool = True) -> dict[str, str]:
        if not colors:
            return structlog.dev.ConsoleRenderer.get_default_level_styles(False)
        return {
            'critical': Style.BRIGHT + Fore.RED,
            'exception': Fore.RED,
            'error': Fore.RED,
            'warn': Fore.YELLOW,
            'warning': Fore.YELLOW,
            'info': Fore.GREEN,
            'debug': Style.BRIGHT + Fore.CYAN,
            'notset': Back.RED,
        }

    def _repr(self, val: Any) -> str:
        if isinstance(val, datetime):
            return str(val)
        return super()._repr(val)


class LoggingOutput(IntEnum):
    NULL = auto()
    PRETTY = auto()
    JSON = auto()


class LoggingOptions(NamedTuple):
    debug: bool


def _pop_known_args(parser: ArgumentParser, argv: list[str]) -> Namespace:
    """Parse the options `parser` knows and leave everything else in `argv`, for the subcommand."""
    args, remaining = parser.parse_known_args(argv)
    argv[:] = remaining
    return args


def process_logging_output(argv: list[str]) -> LoggingOutput:
    """Pop `--json-logs`/`--disable-logs` from argv, they must be handled before the subcommand parses it."""
    parser = create_parser(add_help=False)
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--json-logs', action='store_true')
    group.add_argument('--disable-logs', action='store_true')
    args = _pop_known_args(parser, argv)

    if args.json_logs:
        return LoggingOutput.JSON
    if args.disable_logs:
        return LoggingOutput.NULL
    return LoggingOutput.PRETTY


def process_logging_options(argv: list[str]) -> LoggingOptions:
    parser = create_parser(add_help=False)
    parser.add_argument('--debug', action='store_true')
    args = _pop_known_args(parser, argv)
    return LoggingOptions(debug=args.debug)


def setup_logging(*, logging_output: LoggingOutput, logging_options: LoggingOptions) -> None:
    """Route structlog and stdlib logging (aiohttp, asyncio) through the handler chosen by `logging_output`."""
    timestamper = structlog.processors.TimeStamper(fmt='%Y-%m-%d %H:%M:%S')

    match logging_output:
        case LoggingOutput.NULL:
            handler: dict[str, Any] = {'class': 'logging.NullHandler'}
        case LoggingOutput.PRETTY:
            handler = {'class': 'logging.StreamHandler', 'formatter': 'pretty'}
        case LoggingOutput.JSON:
            handler = {'class': 'logging.StreamHandler', 'formatter': 'json'}
        case _:
            assert_never(logging_output)

    def formatter(renderer: Any) -> dict[str, Any]:
        return {
            '()': structlog.stdlib.ProcessorFormatter,
            'processor': renderer,
            'foreign_pre_chain': [structlog.stdlib.add_log_level, structlog.stdlib.add_logger_name, timestamper],
        }

    logging.config.dictConfig({
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'pretty': formatter(ConsoleRenderer(colors=sys.stderr.isatty())),
            'json': formatter(structlog.processors.JSONRenderer()),
        },
        'handlers': {'default': handler},
        'loggers': {
            # aiohttp logs every request at info
            'aiohttp': {
                'handlers': ['default'],
                'level': 'INFO' if logging_options.debug else 'WARNING',
                'propagate': False,
            },
            '': {
                'handlers': ['default'],
                'level': 'DEBUG' if logging_options.debug else 'INFO',
            },
        },
    })

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            timestamper,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=OrderedDict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def check_or_exit(condition: bool, message: str) -> None:
    """Print `message` to stderr and exit with status 2 unless `condition` holds."""
    if not condition:
        print(message, file=sys.stderr)
        sys.exit(2)


def read_input(path: Optional[str]) -> str:
    """Contents of `path`, or of stdin when it is None or '-'."""
    if path is None or path == '-':
        return sys.stdin.read()
    with open(path, 'r') as fp:
        return fp.read()
