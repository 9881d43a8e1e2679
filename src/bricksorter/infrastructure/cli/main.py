import logging

import click

from bricksorter.infrastructure.cli.part_commands import part_add
from bricksorter.infrastructure.cli.set_commands import (
    set_add,
    set_list,
    set_show,
    set_update,
)
from bricksorter.infrastructure.config import get_settings


@click.group()
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log debug output.")
def cli(verbose: bool) -> None:
    """Brick Sorter: share loose parts out across your sets."""
    level = logging.DEBUG if verbose else get_settings().log_level
    logging.basicConfig(
        level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )


@cli.group("set")
def set_group() -> None:
    """Manage sets."""


@cli.group()
def part() -> None:
    """Manage parts."""


# Register subcommands
set_group.add_command(set_add)
set_group.add_command(set_list)
set_group.add_command(set_show)
set_group.add_command(set_update)
part.add_command(part_add)
