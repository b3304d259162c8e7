"""Fake Console implementation for testing."""

from slacktail.gateway.console.abc import Console


class FakeConsole(Console):
    """In-memory console that records every echoed line.

    Example:
        >>> console = FakeConsole()
        >>> console.echo("hello")
        >>> assert console.lines == ["hello"]
    """

    def __init__(self) -> None:
        self._lines: list[str] = []

    def echo(self, line: str) -> None:
        self._lines.append(line)

    @property
    def lines(self) -> list[str]:
        """Read-only access to echoed lines.

        Returns:
            Copy of the lines in output order
        """
        return list(self._lines)
