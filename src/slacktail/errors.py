"""Exception hierarchy for slacktail.

Gateways translate library exceptions into these types so the connection
manager and identity cache can decide what is retryable without knowing
about slack_sdk or websocket-client.
"""


class SlackTailError(Exception):
    """Base class for all slacktail errors."""


class SlackApiCallError(SlackTailError):
    """A Slack Web API call failed.

    Covers service-reported errors (``ok: false``), transport failures and
    timeouts alike. All of them are treated as transient.
    """

    def __init__(self, *, method: str, message: str) -> None:
        super().__init__(f"{method} failed: {message}")
        self.method = method


class StreamError(SlackTailError):
    """The real-time event stream could not be opened or read."""


class ConfigError(SlackTailError):
    """The configuration file could not be parsed."""
