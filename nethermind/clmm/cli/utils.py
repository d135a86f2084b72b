import logging
import os
from logging import Logger

import click
from rich.console import Console
from rich.logging import RichHandler

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("clmm").getChild("cli")


def cli_logger_config(instrument_logger: Logger) -> Console:
    rich_console = Console()
    instrument_logger.handlers.clear()

    instrument_logger.addHandler(RichHandler(show_path=False, console=rich_console))
    instrument_logger.setLevel(logging.INFO)
    return rich_console


def group_options(*options):
    """Decorator to group multiple click options together"""

    def wrapper(function):
        for option in reversed(options):
            function = option(function)
        return function

    return wrapper


# -------------------------------------------------------
#    CLI State & Signer Configuration
# -------------------------------------------------------
state_file_option = click.option(
    "--state-file",
    "-f",
    "state_file",
    default=os.environ.get("CLMM_STATE_FILE"),
    required=True,
    type=click.Path(dir_okay=False),
    help="JSON file holding the pool state.  If not provided, will use the CLMM_STATE_FILE environment variable",
)
signer_option = click.option(
    "--signer",
    "-s",
    "signer",
    default=os.environ.get("CLMM_SIGNER"),
    required=True,
    type=str,
    help="Address signing pool operations.  If not provided, will use the CLMM_SIGNER environment variable",
)
pool_id_option = click.option(
    "--pool-id",
    "pool_id",
    default=None,
    type=str,
    help="Address of the pool.  May be omitted if the state file contains a single pool",
)


# -------------------------------------------------------
#    Tick & Liquidity Parameters
# -------------------------------------------------------
tick_lower_option = click.option(
    "--tick-lower",
    "tick_lower",
    type=int,
    required=True,
    help="Lower tick of the position range",
)
tick_upper_option = click.option(
    "--tick-upper",
    "tick_upper",
    type=int,
    required=True,
    help="Upper tick of the position range",
)
liquidity_option = click.option(
    "--liquidity",
    "-l",
    "liquidity",
    type=int,
    default=0,
    show_default=True,
    help="Liquidity of the position",
)
