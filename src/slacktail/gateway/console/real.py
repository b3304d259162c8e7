"""Real Console implementation writing to stdout."""

import click

from slacktail.gateway.console.abc import Console


class RealConsole(Console):
    """Production implementation using click.echo.

    click strips ANSI styling automatically when stdout is not a terminal.
    """

    def echo(self, line: str) -> None:
        click.echo(line)
