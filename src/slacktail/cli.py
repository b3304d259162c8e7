"""Standalone CLI for slacktail."""

import dataclasses
import logging
from pathlib import Path

import click

from slacktail.config import DEFAULT_CONFIG_FILENAME, load_config
from slacktail.errors import ConfigError

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])


@click.command(context_settings=CONTEXT_SETTINGS)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    help="Path to the TOML config file",
)
@click.option(
    "--token",
    envvar="SLACK_TOKEN",
    help="Slack token; overrides general.token from the config file",
)
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(config_path: Path, token: str | None, debug: bool) -> None:
    """Stream a Slack workspace's messages to the terminal.

    Connects to the real-time messaging API and prints every message as a
    continuous transcript, reconnecting automatically on failure.
    """
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s - %(levelname)s - %(message)s")
    else:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(message)s")

    try:
        config = load_config(config_path)
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1) from e

    if token:
        config = dataclasses.replace(
            config, general=dataclasses.replace(config.general, token=token)
        )
    if not config.general.token:
        click.echo(
            f"Error: no Slack token; set general.token in {config_path} or SLACK_TOKEN",
            err=True,
        )
        raise SystemExit(1)

    # Inline import to keep --help free of network library imports
    from slacktail.app import run_app

    click.echo("Connecting...")
    try:
        run_app(config)
    except KeyboardInterrupt:
        raise SystemExit(0) from None


if __name__ == "__main__":
    main()
