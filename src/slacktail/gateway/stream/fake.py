"""Fake implementation of EventStream for testing."""

from typing import Any

from slacktail.errors import StreamError
from slacktail.gateway.stream.abc import EventStream


class FakeEventStream(EventStream):
    """Scripted stream that replays pre-configured frames.

    Each successful connect() consumes the next session from ``sessions``;
    receive() yields that session's frames and then raises StreamError as if
    the server had dropped the connection. ``connect_errors`` are raised by
    successive connect() calls before any session is served.

    Example:
        >>> stream = FakeEventStream(sessions=[[{"type": "hello"}]])
        >>> stream.connect("wss://example.invalid")
        >>> stream.receive()
        {'type': 'hello'}
    """

    def __init__(
        self,
        *,
        sessions: list[list[dict[str, Any]]] | None = None,
        connect_errors: list[str] | None = None,
    ) -> None:
        self._sessions = [list(frames) for frames in sessions] if sessions is not None else []
        self._connect_errors = list(connect_errors) if connect_errors is not None else []
        self._frames: list[dict[str, Any]] = []
        self._is_open = False
        self._connected_urls: list[str] = []
        self._close_calls = 0

    def connect(self, url: str) -> None:
        if self._connect_errors:
            raise StreamError(self._connect_errors.pop(0))
        self._connected_urls.append(url)
        self._frames = self._sessions.pop(0) if self._sessions else []
        self._is_open = True

    def receive(self) -> dict[str, Any]:
        if not self._is_open:
            raise StreamError("stream is not connected")
        if not self._frames:
            raise StreamError("connection closed by server")
        return self._frames.pop(0)

    def close(self) -> None:
        self._close_calls += 1
        self._is_open = False

    @property
    def is_open(self) -> bool:
        return self._is_open

    @property
    def connected_urls(self) -> list[str]:
        """URLs passed to successful connect() calls."""
        return list(self._connected_urls)

    @property
    def close_calls(self) -> int:
        return self._close_calls
