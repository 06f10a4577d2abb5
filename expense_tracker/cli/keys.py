"""
Single-keystroke input for the clear confirmation.

The dispatcher only needs "give me the next key"; hiding the terminal behind
KeyReader lets tests feed keys without a TTY.
"""

from abc import ABC, abstractmethod

import click


class KeyReader(ABC):
    """Source of confirmation keystrokes."""

    @abstractmethod
    def read_key(self) -> str:
        """
        Block until one key is pressed and return it.

        Raises:
            KeyboardInterrupt: On Ctrl-C
            EOFError: On Ctrl-D / end of input
        """
        pass


class TerminalKeyReader(KeyReader):
    """Reads raw keystrokes from the controlling terminal, no Enter needed."""

    def read_key(self) -> str:
        key = click.getchar(echo=False)
        if not key:
            raise EOFError
        return key
