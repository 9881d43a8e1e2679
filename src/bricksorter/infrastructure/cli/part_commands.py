"""CLI commands for parts."""

from __future__ import annotations

import click

from bricksorter.application.allocate_part import AllocatePartHandler
from bricksorter.domain.exceptions import DomainException
from bricksorter.infrastructure.bootstrap import unit_of_work


@click.command("add")
@click.argument("part_num", required=False)
@click.argument("color_id", required=False)
@click.option(
    "--element",
    "element_id",
    default=None,
    help="Element ID instead of part/color. Only the first element recorded for a part is known.",
)
@click.option("--quantity", type=int, default=1, show_default=True, help="How many parts.")
@click.option("--set", "set_id", default=None, help="Give the parts to this set only.")
def part_add(
    part_num: str | None,
    color_id: str | None,
    element_id: str | None,
    quantity: int,
    set_id: str | None,
) -> None:
    """Add loose parts; they go to the sets that need them, by priority.

    Identify the part as PART_NUM COLOR_ID or with --element.
    """
    handler = AllocatePartHandler(uow=unit_of_work())

    try:
        allocations = handler.handle(
            quantity=quantity,
            part_num=part_num,
            color_id=color_id,
            element_id=element_id,
            set_id=set_id,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    label = element_id or f"{part_num}/{color_id}"
    total = sum(a.allocated for a in allocations)
    click.echo(f"Part {label}: {total} allocated")
    for a in allocations:
        click.echo(f"  [+] {a.set_name} ({a.set_id})  x{a.allocated}")
        if a.became_first_allocated:
            click.echo(f"      first parts for {a.set_id}")
        if a.became_fully_allocated:
            click.echo(f"      {a.set_id} has all its parts!")
    if total < quantity:
        target = f"set {allocations[0].set_id}" if set_id else "any set"
        click.echo(f"{quantity - total} part(s) not needed by {target}.")
