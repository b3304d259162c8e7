"""Time operations abstraction for testing.

Lets the reconnect backoff be exercised without actually sleeping.
"""

from abc import ABC, abstractmethod


class Time(ABC):
    """Abstract time operations for dependency injection."""

    @abstractmethod
    def sleep(self, seconds: float) -> None:
        """Block the current thread for the given number of seconds.

        Args:
            seconds: Duration to sleep
        """
        ...
