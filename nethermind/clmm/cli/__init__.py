import click

from nethermind.clmm.cli.math import math_group
from nethermind.clmm.cli.pool import pool_group


@click.group()
def clmm_cli():
    """Command Line Interface for Nethermind CLMM"""


# Adding Command Groups
clmm_cli.add_command(math_group, name="math")
clmm_cli.add_command(pool_group, name="pool")
