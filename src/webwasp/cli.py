"""CLI entry point for webwasp. Uses Click for argument parsing."""

from __future__ import annotations

import logging
import sys

import click

from webwasp.config import load_config
from webwasp.errors import ConfigError, TerminalError

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _configure_logging(log_file: str | None, log_level: str) -> None:
    # Records written to the terminal while it is raw would garble the
    # line, so without a log file only warnings reach stderr.
    level = getattr(logging, log_level.upper())
    if log_file:
        logging.basicConfig(filename=log_file, level=level, format=LOG_FORMAT)
    else:
        logging.basicConfig(level=max(level, logging.WARNING), format=LOG_FORMAT)


@click.command()
@click.option("--history-max", type=int, default=None, help="Number of commands to remember")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Config file (default: ~/.webwasp/config.json)",
)
@click.option("--no-banner", is_flag=True, default=False, help="Skip the startup banner")
@click.option("--log-file", type=click.Path(dir_okay=False), default=None, help="Write logs to this file")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"]),
    default="info",
    help="Log level (default: info)",
)
def main(history_max, config_path, no_banner, log_file, log_level):
    """Interactive HTTP header inspection console."""
    _configure_logging(log_file, log_level)

    from webwasp.console import ConsoleSession
    from webwasp.terminal import ProcessTerminal

    try:
        config = load_config(config_path).with_overrides(
            history_max=history_max,
            show_banner=False if no_banner else None,
        )
    except ConfigError as e:
        click.echo(f"Invalid configuration: {e}", err=True)
        sys.exit(1)

    session = ConsoleSession(ProcessTerminal(), config=config)
    try:
        status = session.run()
    except TerminalError as e:
        logging.getLogger(__name__).error("terminal error: %s", e)
        click.echo(f"Terminal error: {e}", err=True)
        sys.exit(1)
    sys.exit(status)


if __name__ == "__main__":
    main()
