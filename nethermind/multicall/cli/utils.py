import logging
import os
from logging import Logger

import click
from rich.console import Console
from rich.logging import RichHandler

from nethermind.multicall.types.networks import SupportedNetwork


def cli_logger_config(instrument_logger: Logger, verbose: bool = False) -> Console:
    """Routes log output through a RichHandler.  Logs at DEBUG if verbose, otherwise WARNING"""
    rich_console = Console(stderr=True)
    instrument_logger.handlers.clear()

    instrument_logger.addHandler(RichHandler(show_path=False, console=rich_console))
    instrument_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    return rich_console


def group_options(*options):
    """Decorator to group multiple click options together"""

    def wrapper(function):
        for option in reversed(options):
            function = option(function)
        return function

    return wrapper


# -------------------------------------------------------
#    CLI Secrets, Connections, and Configurations
# -------------------------------------------------------
api_key_option = click.option(
    "--api-key",
    "-k",
    "api_key",
    default=lambda: os.environ.get("ETHERSCAN_API_KEY"),
    help="Etherscan API key.  If not provided, will use the ETHERSCAN_API_KEY environment variable",
)

network_option = click.option(
    "--network",
    "-n",
    "network",
    type=click.Choice(list(SupportedNetwork.__members__.keys())),
    default="mainnet",
    show_default=True,
    help="Network the transaction was sent on",
)

# -------------------------------------------------------
#    Output Options
# -------------------------------------------------------
verbose_option = click.option(
    "--verbose",
    "-v",
    "verbose",
    is_flag=True,
    default=False,
    help="Enable debug logging",
)

json_option = click.option(
    "--json",
    "-j",
    "json_output",
    is_flag=True,
    default=False,
    help="Output decoded calls as JSON",
)
