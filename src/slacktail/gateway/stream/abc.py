"""Abstract interface for the real-time event stream."""

from abc import ABC, abstractmethod
from typing import Any


class EventStream(ABC):
    """A single streaming connection delivering JSON frames in arrival order.

    At most one connection is open at a time. Every failure, including the
    server closing the connection, is raised as StreamError.
    """

    @abstractmethod
    def connect(self, url: str) -> None:
        """Open the stream.

        Args:
            url: The websocket URL obtained from rtm.connect

        Raises:
            StreamError: If the connection cannot be established
        """
        ...

    @abstractmethod
    def receive(self) -> dict[str, Any]:
        """Block until the next frame arrives and return it decoded.

        Returns:
            The frame as a JSON object

        Raises:
            StreamError: If the read fails, the stream is closed, or the
                frame is not a JSON object
        """
        ...

    @abstractmethod
    def close(self) -> None:
        """Close the stream if open. Safe to call more than once."""
        ...
