import click

from .utils import group_options, liquidity_option, tick_lower_option, tick_upper_option

# isort: skip_file
# pylint: disable=too-many-arguments,import-outside-toplevel


@click.group("math", short_help="Fixed point tick & price conversions")
def math_group():
    """
    Q64.64 price math used by CLMM pools.  All prices are raw sqrt prices, not adjusted for token decimals
    """


@math_group.command(name="price-at-tick")
@click.argument("tick", type=int)
def price_at_tick(tick: int):
    """Print the Q64.64 sqrt price at TICK"""
    from nethermind.clmm.exceptions import TickMathRevert
    from nethermind.clmm.math import ClmmMath

    try:
        sqrt_price_x64 = ClmmMath.tick_math.get_sqrt_price_at_tick(tick)
    except TickMathRevert as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(sqrt_price_x64)


@math_group.command(name="tick-at-price")
@click.argument("sqrt_price_x64", type=int)
def tick_at_price(sqrt_price_x64: int):
    """Print the greatest tick whose sqrt price is at or below SQRT_PRICE_X64"""
    from nethermind.clmm.exceptions import TickMathRevert
    from nethermind.clmm.math import ClmmMath

    try:
        tick = ClmmMath.tick_math.get_tick_at_sqrt_price(sqrt_price_x64)
    except TickMathRevert as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(tick)


@math_group.command()
@group_options(tick_lower_option, tick_upper_option, liquidity_option)
@click.option("--tick", "tick", type=int, default=None, help="Current tick of the pool")
@click.option("--sqrt-price", "sqrt_price_x64", type=int, default=None, help="Current Q64.64 sqrt price of the pool")
def amounts(
    tick_lower: int,
    tick_upper: int,
    liquidity: int,
    tick: int | None,
    sqrt_price_x64: int | None,
):
    """
    Print the token amounts required to add liquidity over [tick-lower, tick-upper) at the current pool price.
    Negative liquidity prints the amounts returned by removing it as negative values, since they leave the pool.
    """
    from nethermind.clmm.exceptions import ClmmRevert, FullMathRevert, TickMathRevert
    from nethermind.clmm.math import ClmmMath

    if (tick is None) == (sqrt_price_x64 is None):
        raise click.UsageError("Exactly one of --tick or --sqrt-price is required")

    try:
        if sqrt_price_x64 is None:
            sqrt_price_x64 = ClmmMath.tick_math.get_sqrt_price_at_tick(tick)
        else:
            tick = ClmmMath.tick_math.get_tick_at_sqrt_price(sqrt_price_x64)

        ClmmMath.check_ticks(tick_lower, tick_upper)
        amount_0, amount_1 = ClmmMath.get_delta_amounts_signed(
            tick, sqrt_price_x64, tick_lower, tick_upper, liquidity
        )
    except (ClmmRevert, FullMathRevert, TickMathRevert) as exc:
        raise click.ClickException(str(exc)) from exc

    if liquidity < 0:
        amount_0, amount_1 = -amount_0, -amount_1

    click.echo(f"amount_0: {amount_0}")
    click.echo(f"amount_1: {amount_1}")
