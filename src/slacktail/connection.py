"""Connection manager: authenticate, stream, and reconnect with backoff.

The manager is an explicit state machine:

    CONNECTING --success--> STREAMING --stream error--> BACKOFF
        |                                                 |
        +-------------------failure---------------------->+
    BACKOFF --after sleeping--> CONNECTING

Every failure is treated as transient; the manager never gives up. The
backoff starts at BACKOFF_FLOOR seconds, doubles after each consecutive
failure up to BACKOFF_CEILING, and returns to the floor only when a
connection succeeds.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, NoReturn

from slacktail.errors import SlackApiCallError, StreamError
from slacktail.gateway.api.abc import SlackApi
from slacktail.gateway.stream.abc import EventStream
from slacktail.gateway.time.abc import Time
from slacktail.types import SlackSession

logger = logging.getLogger(__name__)

BACKOFF_FLOOR = 1.0
BACKOFF_CEILING = 15.0


class ConnectionPhase(Enum):
    CONNECTING = "connecting"
    STREAMING = "streaming"
    BACKOFF = "backoff"


class Backoff:
    """Doubling delay with a floor and a ceiling."""

    def __init__(self, floor: float = BACKOFF_FLOOR, ceiling: float = BACKOFF_CEILING) -> None:
        self._floor = floor
        self._ceiling = ceiling
        self._current = floor

    @property
    def current(self) -> float:
        return self._current

    def next_delay(self) -> float:
        """Return the delay to wait now and double the following one."""
        delay = self._current
        self._current = min(self._current * 2, self._ceiling)
        return delay

    def reset(self) -> None:
        self._current = self._floor


def error_equals(a: BaseException | None, b: BaseException | None) -> bool:
    """Compare errors by message; None only equals None."""
    if a is not None and b is not None:
        return str(a) == str(b)
    return a is b


@dataclass
class ConnectionState:
    """Mutable state of the reconnect loop.

    Attributes:
        phase: The phase step() will execute next
        backoff: Delay applied before the next reconnect attempt
        last_error: Most recently reported failure, used to collapse
            repeated identical failures into a single log line
        pending_error: Failure that moved the machine into BACKOFF
    """

    phase: ConnectionPhase
    backoff: Backoff
    last_error: BaseException | None = None
    pending_error: BaseException | None = None


class ConnectionManager:
    """Owns the single stream connection and its reconnect policy.

    Frames are handed to ``on_frame`` one at a time, in arrival order, and
    each is fully handled before the next receive.
    """

    def __init__(
        self,
        *,
        api: SlackApi,
        stream: EventStream,
        time: Time,
        on_connected: Callable[[SlackSession], None],
        on_frame: Callable[[dict[str, Any]], None],
    ) -> None:
        """Initialize the manager in the CONNECTING phase.

        Args:
            api: SlackApi used to authenticate
            stream: EventStream to open on the authenticated URL
            time: Time abstraction used for backoff sleeps
            on_connected: Called after each successful connection, before any
                frame is read; may raise SlackApiCallError to abort it
            on_frame: Called with every received frame
        """
        self._api = api
        self._stream = stream
        self._time = time
        self._on_connected = on_connected
        self._on_frame = on_frame
        self._state = ConnectionState(phase=ConnectionPhase.CONNECTING, backoff=Backoff())

    @property
    def state(self) -> ConnectionState:
        return self._state

    def run(self) -> NoReturn:
        """Connect and stream forever, reconnecting after every failure."""
        while True:
            self.step()

    def step(self) -> ConnectionPhase:
        """Execute the current phase.

        Returns:
            The phase the machine moved to
        """
        phase = self._state.phase
        if phase == ConnectionPhase.CONNECTING:
            self._connect()
        elif phase == ConnectionPhase.STREAMING:
            self._stream_frames()
        else:
            self._back_off()
        return self._state.phase

    def _connect(self) -> None:
        try:
            session = self._api.connect()
            self._stream.connect(session.url)
        except (SlackApiCallError, StreamError) as e:
            self._fail(e)
            return

        self._state.backoff.reset()
        self._state.last_error = None

        try:
            self._on_connected(session)
        except SlackApiCallError as e:
            self._stream.close()
            self._fail(e)
            return
        self._state.phase = ConnectionPhase.STREAMING

    def _stream_frames(self) -> None:
        try:
            while True:
                frame = self._stream.receive()
                self._on_frame(frame)
        except StreamError as e:
            self._stream.close()
            self._fail(e)

    def _back_off(self) -> None:
        error = self._state.pending_error
        if not error_equals(error, self._state.last_error):
            logger.warning("%s", error)
            logger.info("Connecting...")
            self._state.last_error = error
        else:
            logger.info(".")

        self._time.sleep(self._state.backoff.next_delay())
        self._state.pending_error = None
        self._state.phase = ConnectionPhase.CONNECTING

    def _fail(self, error: BaseException) -> None:
        self._state.pending_error = error
        self._state.phase = ConnectionPhase.BACKOFF
