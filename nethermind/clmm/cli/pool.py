import logging
import os

import click

from .utils import (
    group_options,
    liquidity_option,
    pool_id_option,
    signer_option,
    state_file_option,
    tick_lower_option,
    tick_upper_option,
)

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("clmm").getChild("cli")

# isort: skip_file
# pylint: disable=too-many-arguments,import-outside-toplevel,too-many-locals


@click.group("pool", short_help="Create & inspect CLMM pools stored in a JSON state file")
def pool_group():
    """
    Pool operations against a JSON state file.  Every command loads the state file, applies a single operation,
    and writes the state back.
    """


@pool_group.command()
@group_options(state_file_option, signer_option)
@click.option("--token-0", "token_0_address", type=str, required=True, help="Mint address of token 0")
@click.option("--token-1", "token_1_address", type=str, required=True, help="Mint address of token 1")
@click.option("--symbol-0", "symbol_0", type=str, default="TOKEN0", show_default=True)
@click.option("--symbol-1", "symbol_1", type=str, default="TOKEN1", show_default=True)
@click.option("--decimals-0", "decimals_0", type=int, default=6, show_default=True)
@click.option("--decimals-1", "decimals_1", type=int, default=6, show_default=True)
@click.option("--fee", "trade_fee_rate", type=int, default=None, help="Trade fee rate, denominated in 1_000_000")
@click.option("--tick-spacing", "tick_spacing", type=int, default=None)
@click.option("--config-index", "config_index", type=int, default=0, show_default=True)
@click.option(
    "--sqrt-price",
    "sqrt_price_x64",
    type=int,
    default=2**64,
    show_default=True,
    help="Initial Q64.64 sqrt price of the pool",
)
def create(
    state_file: str,
    signer: str,
    token_0_address: str,
    token_1_address: str,
    symbol_0: str,
    symbol_1: str,
    decimals_0: int,
    decimals_1: int,
    trade_fee_rate: int | None,
    tick_spacing: int | None,
    config_index: int,
    sqrt_price_x64: int,
):
    """Create an AmmConfig (if missing) & a pool, and write them to the state file"""
    from nethermind.clmm import ClmmPool, Token
    from nethermind.clmm.addresses import amm_config_address
    from nethermind.clmm.cli.utils import cli_logger_config
    from nethermind.clmm.exceptions import ClmmRevert, TickMathRevert

    console = cli_logger_config(root_logger)

    store = _load_store(state_file)
    token_0 = Token(symbol_0, symbol_0, decimals_0, token_0_address)
    token_1 = Token(symbol_1, symbol_1, decimals_1, token_1_address)

    try:
        config_id = amm_config_address(config_index)
        if config_id not in store:
            config_id = ClmmPool.create_amm_config(
                store,
                owner=signer,
                index=config_index,
                tick_spacing=tick_spacing,
                trade_fee_rate=trade_fee_rate,
            )
        pool = ClmmPool.create(store, config_id, signer, token_0, token_1, sqrt_price_x64)
    except (ClmmRevert, TickMathRevert) as exc:
        raise click.ClickException(str(exc)) from exc

    _save_store(store, state_file)
    console.print(f"[green]Created Pool {pool.pool_id}")


@pool_group.command()
@group_options(state_file_option, pool_id_option)
def info(state_file: str, pool_id: str | None):
    """Print the current state of a pool"""
    from rich.table import Table

    from nethermind.clmm.cli.utils import cli_logger_config

    console = cli_logger_config(root_logger)
    pool = _load_pool(state_file, pool_id)
    state = pool.state

    pool_table = Table(title=f"[bold]Pool {pool.pool_id}", min_width=80)
    pool_table.add_column("Key")
    pool_table.add_column("Value", justify="right")

    for key, value in [
        ("Token 0", pool.token_0.address),
        ("Token 1", pool.token_1.address),
        ("Price", pool.get_formatted_price_at_sqrt_price(state.sqrt_price_x64)),
        ("Sqrt Price X64", f"{state.sqrt_price_x64:,}"),
        ("Tick", f"{state.tick_current:,}"),
        ("Tick Spacing", f"{state.tick_spacing}"),
        ("Active Liquidity", f"{state.liquidity:,}"),
        ("Fee Growth Global 0", f"{state.fee_growth_global_0_x64:,}"),
        ("Fee Growth Global 1", f"{state.fee_growth_global_1_x64:,}"),
        ("Protocol Fees 0", f"{state.protocol_fees_token_0:,}"),
        ("Protocol Fees 1", f"{state.protocol_fees_token_1:,}"),
        ("Initialized Ticks", f"{len(pool.ticks)}"),
        ("Status", f"{state.status!r}"),
    ]:
        pool_table.add_row(f"[green]{key}", value)

    console.print(pool_table)


@pool_group.command(name="open-position")
@group_options(
    state_file_option,
    signer_option,
    pool_id_option,
    tick_lower_option,
    tick_upper_option,
    liquidity_option,
)
@click.option("--amount-0-max", "amount_0_max", type=int, required=True, help="Maximum token 0 deposit")
@click.option("--amount-1-max", "amount_1_max", type=int, required=True, help="Maximum token 1 deposit")
def open_position(
    state_file: str,
    signer: str,
    pool_id: str | None,
    tick_lower: int,
    tick_upper: int,
    liquidity: int,
    amount_0_max: int,
    amount_1_max: int,
):
    """
    Open a position owned by the signer, and write it to the state file.  If --liquidity is 0, the maximum
    liquidity affordable with the token maximums is added.
    """
    from nethermind.clmm.cli.utils import cli_logger_config
    from nethermind.clmm.exceptions import ClmmRevert, FullMathRevert, TickMathRevert

    console = cli_logger_config(root_logger)
    pool = _load_pool(state_file, pool_id)

    try:
        position = pool.open_position(signer, tick_lower, tick_upper, liquidity, amount_0_max, amount_1_max)
    except (ClmmRevert, FullMathRevert, TickMathRevert) as exc:
        raise click.ClickException(str(exc)) from exc

    deposit = pool.store.events[-1]
    _save_store(pool.store, state_file)

    console.print(f"[green]Opened Position {position.nft_mint}")
    console.print(f"Liquidity: {position.liquidity:,}")
    console.print(f"Deposited: {pool.token_0.human_readable(deposit.deposit_amount_0)}")
    console.print(f"Deposited: {pool.token_1.human_readable(deposit.deposit_amount_1)}")


def _load_store(state_file: str):
    from nethermind.clmm import AccountStore

    if not os.path.exists(state_file):
        logger.info(f"State file {state_file} does not exist.  Starting with an empty store")
        return AccountStore()

    with open(state_file, "r", encoding="utf-8") as file:
        return AccountStore.load_from_file(file)


def _load_pool(state_file: str, pool_id: str | None):
    from nethermind.clmm import ClmmPool
    from nethermind.clmm.exceptions import ClmmRevert

    if not os.path.exists(state_file):
        raise click.ClickException(f"State file {state_file} does not exist")

    with open(state_file, "r", encoding="utf-8") as file:
        try:
            return ClmmPool.load_pool(file, pool_id)
        except ClmmRevert as exc:
            raise click.ClickException(str(exc)) from exc


def _save_store(store, state_file: str):
    with open(state_file, "w", encoding="utf-8") as file:
        store.save(file)
