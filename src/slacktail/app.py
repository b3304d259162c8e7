"""Entry point wiring real gateways into the service."""

from typing import NoReturn

from slacktail.config import Config
from slacktail.gateway.api.real import RealSlackApi
from slacktail.gateway.console.real import RealConsole
from slacktail.gateway.stream.real import RealEventStream
from slacktail.gateway.time.real import RealTime
from slacktail.service import SlackTailService


def run_app(config: Config) -> NoReturn:
    """Run slacktail until the process is stopped.

    Args:
        config: Loaded configuration with a non-empty token
    """
    service = SlackTailService(
        config=config,
        api=RealSlackApi(token=config.general.token, timeout=config.general.timeout),
        stream=RealEventStream(connect_timeout=config.general.timeout),
        time=RealTime(),
        console=RealConsole(),
    )
    service.run()
