"""Transcript rendering.

Consecutive messages from the same sender in the same channel and thread
share one header line; a change of channel also inserts a blank separator.
A request either renders completely or not at all.
"""

import re
from dataclasses import dataclass
from datetime import datetime

import click

from slacktail.config import NotificationConfig
from slacktail.gateway.console.abc import Console
from slacktail.normalize import TextNormalizer
from slacktail.types import RenderRequest

TIMESTAMP_FORMAT = "%Y/%m/%d %H:%M:%S"


@dataclass
class RenderState:
    """What the last rendered line belonged to.

    Attributes:
        channel: Channel name of the last rendered entry
        user: Sender display name of the last rendered entry; None forces
            the next entry to print a header
        thread_ts: Thread timestamp of the last rendered entry, 0 if none
    """

    channel: str = ""
    user: str | None = None
    thread_ts: int = 0


def format_timestamp(seconds: int) -> str:
    """Format seconds since the epoch as local time; "" if not representable."""
    try:
        return datetime.fromtimestamp(seconds).strftime(TIMESTAMP_FORMAT)
    except (ValueError, OverflowError, OSError):
        return ""


def matches_any(text: str, patterns: tuple[re.Pattern[str], ...]) -> bool:
    return any(pattern.search(text) for pattern in patterns)


class Renderer:
    """Filters, formats and writes render requests in arrival order."""

    def __init__(
        self,
        *,
        notification: NotificationConfig,
        normalizer: TextNormalizer,
        console: Console,
        state: RenderState | None = None,
    ) -> None:
        self._notification = notification
        self._normalizer = normalizer
        self._console = console
        self._state = state if state is not None else RenderState()

    @property
    def state(self) -> RenderState:
        return self._state

    def render(self, request: RenderRequest) -> bool:
        """Write one transcript entry unless it is suppressed.

        Suppressed when the channel or sender is muted, or when the body is
        empty after normalization.

        Args:
            request: The entry to render

        Returns:
            True if anything was written
        """
        if request.channel in self._notification.mute_channels:
            return False
        if request.user in self._notification.mute_users:
            return False

        body = self._normalizer.normalize(request.text)
        if not body:
            return False

        state = self._state
        if request.channel != state.channel:
            self._console.echo("")
            self._console.echo(self._header(request))
        elif request.user != state.user or request.thread_ts != state.thread_ts:
            self._console.echo(self._header(request))

        highlighted = matches_any(body, self._notification.patterns)
        if request.emphasis:
            body = click.style(body, italic=True, fg="bright_black")
        if highlighted:
            body = click.style(body, fg="bright_magenta", blink=True)
        self._console.echo(body + request.annotation)

        state.channel = request.channel
        state.user = request.user
        state.thread_ts = request.thread_ts
        if request.forces_header:
            state.user = None
        return True

    def _header(self, request: RenderRequest) -> str:
        timestamp = format_timestamp(request.timestamp)
        if request.thread_ts != 0:
            timestamp += " [at " + format_timestamp(request.thread_ts) + "]"
        sender = request.user_type + request.user
        return click.style(f"@{sender:<18} #{request.channel:<20} {timestamp}", fg="bright_yellow")
