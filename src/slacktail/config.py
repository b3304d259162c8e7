import logging
import re
import tomllib
from dataclasses import dataclass
from pathlib import Path

from slacktail.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = "config.toml"
DEFAULT_TIMEOUT = 30


@dataclass(frozen=True)
class GeneralConfig:
    """Connection settings.

    Attributes:
        token: Slack token authorized for rtm.connect (empty if unset)
        timeout: Seconds allowed for each Web API call and stream handshake
    """

    token: str
    timeout: int


@dataclass(frozen=True)
class NotificationConfig:
    """Highlight and mute rules, fixed for the lifetime of the process.

    Attributes:
        patterns: Compiled highlight regexes; a body matching any is highlighted
        mute_channels: Channel names whose messages are never shown
        mute_users: Sender display names whose messages are never shown
    """

    patterns: tuple[re.Pattern[str], ...]
    mute_channels: frozenset[str]
    mute_users: frozenset[str]


@dataclass(frozen=True)
class Config:
    """In-memory representation of config.toml.

    Example config.toml:
      [general]
      token = "xoxp-..."
      # Optional: seconds before a Web API call is abandoned
      timeout = 30

      [notification]
      patterns = ["\\\\bdeploy\\\\b", "(?i)urgent"]
      mute-channels = ["random"]
      mute-users = ["noisy-bot"]
    """

    general: GeneralConfig
    notification: NotificationConfig


def compile_patterns(patterns: list[str]) -> tuple[re.Pattern[str], ...]:
    """Compile highlight patterns, skipping (and logging) invalid ones."""
    compiled: list[re.Pattern[str]] = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error as e:
            logger.warning("Ignoring invalid highlight pattern %r: %s", pattern, e)
    return tuple(compiled)


def parse_config(data: dict) -> Config:
    """Build a Config from a parsed TOML document, filling in defaults."""
    general = data.get("general", {})
    notification = data.get("notification", {})

    timeout = general.get("timeout", DEFAULT_TIMEOUT)
    if not isinstance(timeout, int) or isinstance(timeout, bool) or timeout <= 0:
        msg = f"general.timeout must be a positive integer, got {timeout!r}"
        raise ConfigError(msg)

    return Config(
        general=GeneralConfig(token=str(general.get("token", "")), timeout=timeout),
        notification=NotificationConfig(
            patterns=compile_patterns([str(x) for x in notification.get("patterns", [])]),
            mute_channels=frozenset(str(x) for x in notification.get("mute-channels", [])),
            mute_users=frozenset(str(x) for x in notification.get("mute-users", [])),
        ),
    )


def load_config(cfg_path: Path) -> Config:
    """Load the config file if present; otherwise return defaults.

    Args:
        cfg_path: Path to the TOML file

    Returns:
        Parsed Config

    Raises:
        ConfigError: If the file is not valid TOML or has invalid values
    """
    if not cfg_path.exists():
        logger.debug("No config file at %s, using defaults", cfg_path)
        return parse_config({})

    try:
        data = tomllib.loads(cfg_path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid config file {cfg_path}: {e}"
        raise ConfigError(msg) from e
    return parse_config(data)
