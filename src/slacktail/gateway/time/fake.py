"""Fake Time implementation for testing."""

from slacktail.gateway.time.abc import Time


class FakeTime(Time):
    """In-memory fake that records sleeps instead of blocking.

    Example:
        >>> time = FakeTime()
        >>> time.sleep(2.0)
        >>> assert time.sleep_calls == [2.0]
    """

    def __init__(self) -> None:
        self._sleep_calls: list[float] = []

    def sleep(self, seconds: float) -> None:
        self._sleep_calls.append(seconds)

    @property
    def sleep_calls(self) -> list[float]:
        """Read-only access to recorded sleep durations.

        Returns:
            Copy of the sleep durations in call order
        """
        return list(self._sleep_calls)
