"""Transcript output abstraction for testing."""

from abc import ABC, abstractmethod


class Console(ABC):
    """Line-oriented output sink for the rendered transcript."""

    @abstractmethod
    def echo(self, line: str) -> None:
        """Write one line (a trailing newline is added).

        Args:
            line: Text to write, possibly containing ANSI styling
        """
        ...
