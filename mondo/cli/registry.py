"""
Command registry for the mondoctl REPL.

Commands are looked up by the first word of the input line. Each command
receives the remaining words and the REPL state; session data lives in that
state object rather than in module globals.
"""

import logging
import time
from dataclasses import dataclass, field

from ..adapters.mondo import MondoClient, MondoConfig
from ..models import Transaction

logger = logging.getLogger(__name__)


class CommandError(Exception):
    """User-facing error raised by a command handler."""

    pass


class InvalidCommandError(CommandError):
    def __init__(self, name: str = ""):
        super().__init__("not a valid command")
        self.name = name


@dataclass
class ReplState:
    """Session state shared by commands for the lifetime of the REPL."""

    config: MondoConfig = field(default_factory=MondoConfig)
    client: MondoClient | None = None
    account_id: str | None = None
    # Populated by the first `ls`, reused afterwards
    transactions: list[Transaction] | None = None
    debug: bool = False

    def require_client(self) -> MondoClient:
        """Return the logged-in client or raise if there is no usable session."""
        if self.client is None:
            raise CommandError("not logged in to mondo. login first!")
        if not self.client.authenticated or not self.client.is_valid():
            self.logout()
            raise CommandError("your mondo session has expired. login again!")
        return self.client

    def logout(self) -> None:
        self.client = None
        self.account_id = None
        self.transactions = None


class Command:
    """Base class for REPL commands."""

    name = ""
    help = ""

    def run(self, args: list[str], state: ReplState) -> None:
        raise NotImplementedError


class CommandRegistry:
    """Maps command names to handlers."""

    def __init__(self):
        self._commands: dict[str, Command] = {}

    def register(self, command: Command) -> Command:
        if command.name in self._commands:
            raise ValueError(f"clashing commands: {command.name}")
        self._commands[command.name] = command
        return command

    def get(self, name: str) -> Command | None:
        return self._commands.get(name)

    def names(self) -> list[str]:
        return sorted(self._commands)

    def commands(self) -> list[Command]:
        return [self._commands[name] for name in self.names()]

    def complete(self, text: str) -> list[str]:
        """Command names starting with text."""
        return [name for name in self.names() if name.startswith(text)]

    def execute(self, line: str, state: ReplState) -> None:
        """Run one input line.

        Raises:
            InvalidCommandError: First word is not a registered command
        """
        fields = line.split()
        if not fields:
            return

        command = self._commands.get(fields[0])
        if command is None:
            raise InvalidCommandError(fields[0])

        started = time.perf_counter()
        try:
            command.run(fields[1:], state)
        finally:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.debug(f"Command {command.name} took {elapsed_ms:.0f} ms")
            if state.debug:
                print(f"\033[94mCommand took {elapsed_ms:.0f} ms\033[0m")
