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

import importlib
import os
import sys
from types import ModuleType
from typing import NamedTuple

from colorama import Fore, Style
from structlog import get_logger

logger = get_logger()


class Command(NamedTuple):
    group: str
    name: str
    description: str

    @property
    def module(self) -> ModuleType:
        return importlib.import_module(f'clutchlib_cli.{self.name}')


COMMANDS: list[Command] = [
    Command('tx', 'sign_tx', 'Sign an unsigned transaction given as JSON'),
    Command('tx', 'decode_tx', 'Decode a raw signed transaction into JSON'),
    Command('tx', 'verify_tx', 'Check the signature of a raw transaction and recover its signer'),
    Command('api', 'request_ride', 'Request, sign and submit a ride (running API required)'),
]


class CliManager:
    """Dispatch `clutchlib-cli <command> [options]` to the module of the same name."""

    def __init__(self) -> None:
        self.basename = os.path.basename(sys.argv[0])
        self.commands = {command.name: command for command in COMMANDS}

    def help(self) -> None:
        width = max(len(name) for name in self.commands)
        print('\nAvailable subcommands:\n')
        for group in sorted({command.group for command in COMMANDS}):
            print(f'{Fore.RED}{Style.BRIGHT}[{group}]{Style.RESET_ALL}')
            for command in COMMANDS:
                if command.group == group:
                    print(f'    {command.name.ljust(width)}   {command.description}')
            print()

    def execute_from_command_line(self) -> int:
        from clutchlib_cli.util import process_logging_options, process_logging_output, setup_logging

        if len(sys.argv) < 2 or sys.argv[1] == 'help':
            self.help()
            return 0

        name = sys.argv.pop(1)
        command = self.commands.get(name)
        if command is None:
            print(f'Unknown command: "{name}"')
            print(f'Type "{self.basename} help" for usage.')
            return -1

        # so the subcommand's --help shows the full invocation
        sys.argv[0] = f'{sys.argv[0]} {name}'

        output = process_logging_output(sys.argv)
        options = process_logging_options(sys.argv)
        setup_logging(logging_output=output, logging_options=options)
        return command.module.main()


def main() -> None:
    try:
        sys.exit(CliManager().execute_from_command_line())
    except KeyboardInterrupt:
        logger.warning('interrupted, exiting')
        sys.exit(1)
    except Exception:
        logger.exception('uncaught exception')
        sys.exit(2)


if __name__ == '__main__':
    main()
