"""CLI commands for sets."""

from __future__ import annotations

import click

from bricksorter.application.add_set import (
    AddSetHandler,
    DecisionNeeded,
    IngestionFailed,
)
from bricksorter.application.show_set_parts import PartSort, ShowSetPartsHandler
from bricksorter.application.show_sets import ListSetsHandler
from bricksorter.application.update_set import UpdateSetHandler
from bricksorter.domain.exceptions import DomainException
from bricksorter.infrastructure.bootstrap import catalog_client, unit_of_work
from bricksorter.infrastructure.cli.formatting import format_percentage, progress_bar


def _ask_for_element(decision: DecisionNeeded) -> bool:
    """Prompt for one unresolved part; False means the user cancelled."""
    choice = decision.choice
    part = choice.part
    click.echo()
    click.echo(
        f"Part {part.part_num} ({part.name}), color {part.color_id}, "
        f"x{part.quantity} in set {choice.lego_set.set_num}"
    )

    if choice.candidates:
        click.echo("Which element is it?")
        for index, element_id in enumerate(choice.candidates, start=1):
            note = " (available during set year)" if element_id in choice.timely else ""
            click.echo(f"  {index:>3}. {element_id}{note}")
    else:
        click.echo("No elements found for this part.")

    while True:
        answer = click.prompt(
            "Element number or ID, 's' to skip, 'c' to cancel",
            default=choice.default or "s",
        ).strip()
        if answer.lower() == "c":
            return False
        if answer.lower() == "s":
            decision.session.skip(part.key)
            return True
        if answer in choice.candidates:
            decision.session.choose(part.key, answer)
            return True
        if answer.isdigit() and 1 <= int(answer) <= len(choice.candidates):
            decision.session.choose(part.key, choice.candidates[int(answer) - 1])
            return True
        click.echo(f"Invalid choice '{answer}'.")


@click.command("add")
@click.argument("set_number")
@click.option("--priority", type=int, default=None, help="Rank (1 = served first).")
def set_add(set_number: str, priority: int | None) -> None:
    """Add a set and all of its parts from the catalog."""
    handler = AddSetHandler(uow=unit_of_work(), catalog=catalog_client())

    try:
        session = handler.start(set_number, priority)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    result = handler.handle(session)
    while isinstance(result, DecisionNeeded):
        if not _ask_for_element(result):
            click.echo("Set addition cancelled.")
            return
        result = handler.handle(session)

    if isinstance(result, IngestionFailed):
        raise click.ClickException(str(result.error))

    dto = result.lego_set
    click.echo(f"Set {dto.id} '{dto.name}' added at priority {dto.priority}")
    if result.skipped:
        click.echo(f"{len(result.skipped)} part(s) skipped:")
        for key in result.skipped:
            click.echo(f"  {key}")


@click.command("list")
@click.option("--search", default="", help="Filter by set number or name.")
def set_list(search: str) -> None:
    """List sets, most complete first."""
    sets = ListSetsHandler(uow=unit_of_work()).handle(search)

    if not sets:
        click.echo("No sets found.")
        return

    click.echo(f"{'Set':<12} {'Name':<32} {'Prio':>5} {'Done':>8}")
    click.echo("-" * 60)
    for s in sets:
        done = "marked" if s.soft_completed else format_percentage(s.completion)
        click.echo(f"{s.id:<12} {s.name[:32]:<32} {s.priority:>5} {done:>8}")


@click.command("show")
@click.argument("set_id")
@click.option(
    "--sort",
    type=click.Choice([s.value for s in PartSort]),
    default=PartSort.COLOR.value,
    help="Order of the part list.",
)
@click.option("--desc", is_flag=True, default=False, help="Reverse the order.")
@click.option("--color", "color_id", type=int, default=None, help="Only this color ID.")
@click.option("--color-names", is_flag=True, default=False, help="Look up color names.")
def set_show(
    set_id: str, sort: str, desc: bool, color_id: int | None, color_names: bool
) -> None:
    """Show a set and the parts it still needs."""
    handler = ShowSetPartsHandler(uow=unit_of_work())

    try:
        dto, parts = handler.handle(
            set_id, sort=PartSort(sort), descending=desc, color_id=color_id
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    done = dto.display_completion
    click.echo(f"Set {dto.id}  '{dto.name}'  (priority {dto.priority})")
    click.echo(
        f"[{progress_bar(done)}] {format_percentage(done)}"
        + ("  marked complete" if dto.soft_completed else "")
    )
    click.echo("Colors: " + ", ".join(str(c) for c in handler.colors(dto.id)))
    click.echo()

    names: dict[int, str] = {}
    if color_names:
        catalog = catalog_client()
        try:
            names = {c: catalog.color_name(c) for c in {p.color_id for p in parts}}
        except DomainException as exc:
            click.echo(f"Color names unavailable: {exc}", err=True)

    click.echo(f"  {'Part':<14} {'Color':<20} {'Name':<30} {'Have':>5} {'Need':>5}")
    click.echo(f"  {'-' * 78}")
    for p in parts:
        color = names.get(p.color_id, str(p.color_id))
        click.echo(
            f"  {p.part_num:<14} {color[:20]:<20} {p.name[:30]:<30} "
            f"{p.quantity_allocated:>5} {p.quantity_needed:>5}"
        )


@click.command("update")
@click.argument("set_id")
@click.option("--priority", type=int, default=None, help="New rank.")
@click.option(
    "--complete/--incomplete",
    "soft_completed",
    default=None,
    help="Mark the set done by hand, or clear the mark.",
)
def set_update(set_id: str, priority: int | None, soft_completed: bool | None) -> None:
    """Change a set's priority or completion mark."""
    if priority is None and soft_completed is None:
        raise click.ClickException("Nothing to update; give --priority or --complete/--incomplete")

    handler = UpdateSetHandler(uow=unit_of_work())

    try:
        dto = handler.handle(set_id, priority=priority, soft_completed=soft_completed)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    state = "marked complete" if dto.soft_completed else format_percentage(dto.completion)
    click.echo(f"Set {dto.id} now at priority {dto.priority} ({state})")
