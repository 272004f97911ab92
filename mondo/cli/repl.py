#!/usr/bin/env python3
"""
mondoctl - interactive shell for your Mondo account.

Usage:
    mondoctl
    python -m mondo.cli

Requires MONDO_CLIENT_ID and MONDO_CLIENT_SECRET in the environment (or a
.env file); the email and password are prompted for at startup.
"""

import logging
import os
import readline
import sys

from ..adapters.mondo import MondoConfig
from ..common.errors import MondoError
from ..config.loader import cfg
from ..utils.log_setup import setup_logging
from .commands import default_registry
from .registry import CommandError, CommandRegistry, ReplState

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_FILE = "/tmp/mondoctl.history"
PROMPT = "\033[1m\033[94mmondoctl: \033[0m"

BANNER = r"""
 __  __  ___  _  _ ___   ___
|  \/  |/ _ \| \| |   \ / _ \
| |\/| | (_) | .` | |) | (_) |
|_|  |_|\___/|_|\_|___/ \___/
"""

# Errors a command may raise that are reported without ending the session
COMMAND_ERRORS = (MondoError, CommandError, ValueError)


class Repl:
    """Read-eval-print loop over a command registry."""

    def __init__(
        self,
        registry: CommandRegistry,
        state: ReplState,
        history_file: str = DEFAULT_HISTORY_FILE,
        input_fn=input,
    ):
        self.registry = registry
        self.state = state
        self.history_file = history_file
        self.input_fn = input_fn

    def load_history(self) -> None:
        if not os.path.exists(self.history_file):
            return
        try:
            readline.read_history_file(self.history_file)
        except OSError as e:
            print(f"ERROR: Error reading history: {e}")

    def save_history(self) -> None:
        try:
            readline.write_history_file(self.history_file)
        except OSError as e:
            print(f"Error writing history file: {e}")

    def complete(self, text: str, index: int) -> str | None:
        """readline completer over command names."""
        matches = self.registry.complete(text)
        return matches[index] if index < len(matches) else None

    def run(self) -> int:
        """Run the shell until EOF or Ctrl-C.

        Returns:
            Process exit code; 1 if the initial login fails
        """
        readline.set_completer(self.complete)
        readline.parse_and_bind("tab: complete")

        print(BANNER)
        self.load_history()

        try:
            if self.state.client is None:
                try:
                    self.registry.execute("login", self.state)
                except COMMAND_ERRORS as e:
                    print(f"error logging in: {e}")
                    return 1

            while True:
                try:
                    line = self.input_fn(PROMPT)
                except EOFError:
                    print("bye!")
                    return 0
                except KeyboardInterrupt:
                    print()
                    return 0

                if not line.strip():
                    continue

                try:
                    self.registry.execute(line, self.state)
                except COMMAND_ERRORS as e:
                    print(f"\033[1m\033[91mERROR: {e}\033[0m")
        finally:
            self.save_history()


def main() -> int:
    """Main CLI entry point."""
    setup_logging(cfg("logging.level", "WARNING"), cfg("logging.format", "text"))

    state = ReplState(config=MondoConfig.from_env(), debug=bool(cfg("cli.debug", False)))
    registry = default_registry(page_size=int(cfg("transactions.page_size", 100)))
    repl = Repl(registry, state, history_file=cfg("cli.history_file", DEFAULT_HISTORY_FILE))
    return repl.run()


if __name__ == "__main__":
    sys.exit(main())
