"""Real Time implementation using the time module."""

import time

from slacktail.gateway.time.abc import Time


class RealTime(Time):
    """Production implementation that actually sleeps."""

    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)
