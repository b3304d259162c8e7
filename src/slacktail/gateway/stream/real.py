"""Real implementation of EventStream using websocket-client."""

import json
from typing import Any

import websocket

from slacktail.errors import StreamError
from slacktail.gateway.stream.abc import EventStream


class RealEventStream(EventStream):
    """Production implementation over a blocking websocket.

    The connect timeout bounds the handshake only; reads block until the
    server sends something, since an idle channel is normal.
    """

    def __init__(self, *, connect_timeout: float) -> None:
        """Initialize without opening a connection.

        Args:
            connect_timeout: Seconds allowed for the TCP/TLS/websocket handshake
        """
        self._connect_timeout = connect_timeout
        self._ws: websocket.WebSocket | None = None

    def connect(self, url: str) -> None:
        self.close()
        try:
            ws = websocket.create_connection(url, timeout=self._connect_timeout)
        except (websocket.WebSocketException, OSError) as e:
            raise StreamError(f"websocket connect failed: {e}") from e
        ws.settimeout(None)
        self._ws = ws

    def receive(self) -> dict[str, Any]:
        if self._ws is None:
            raise StreamError("stream is not connected")
        try:
            payload = self._ws.recv()
        except (websocket.WebSocketException, OSError) as e:
            raise StreamError(f"websocket receive failed: {e}") from e
        if not payload:
            raise StreamError("connection closed by server")
        try:
            frame = json.loads(payload)
        except ValueError as e:
            # JSONDecodeError, or UnicodeDecodeError for a non-UTF-8 binary frame
            raise StreamError(f"invalid frame: {e}") from e
        if not isinstance(frame, dict):
            raise StreamError("invalid frame: not a JSON object")
        return frame

    def close(self) -> None:
        if self._ws is None:
            return
        ws = self._ws
        self._ws = None
        try:
            ws.close()
        except (websocket.WebSocketException, OSError):
            # Already broken; nothing left to release.
            return
