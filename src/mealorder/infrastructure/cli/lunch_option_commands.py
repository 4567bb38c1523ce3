"""CLI commands for the menu (lunch options)."""

from __future__ import annotations

import click

from mealorder.application.manage_lunch_options import (
    AddLunchOptionHandler,
    ListLunchOptionsHandler,
    UpdateLunchOptionHandler,
)
from mealorder.domain.exceptions import DomainException
from mealorder.infrastructure.bootstrap import lunch_option_repository


@click.command("add")
@click.option("--name", required=True, help="Meal name.")
@click.option("--price", required=True, help="List price (e.g. 12.00).")
@click.option("--provider", "provider_id", default=None, help="Provider offering the meal.")
def menu_add(name: str, price: str, provider_id: str | None) -> None:
    """Add a lunch option to the menu."""
    handler = AddLunchOptionHandler(lunch_option_repo=lunch_option_repository())

    try:
        option = handler.handle(name=name, price=price, provider_id=provider_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Lunch option #{option.id} '{option.name}' added at {option.price}")


@click.command("list")
@click.option("--available", "available_only", is_flag=True, default=False,
              help="Only show options that can be ordered.")
def menu_list(available_only: bool) -> None:
    """List the menu."""
    handler = ListLunchOptionsHandler(lunch_option_repo=lunch_option_repository())
    options = handler.handle(available_only=available_only)

    if not options:
        click.echo("No lunch options found.")
        return

    click.echo(f"{'ID':<6} {'Name':<24} {'Price':>10}  {'Available':<9}")
    click.echo("-" * 52)
    for o in options:
        click.echo(f"{o.id:<6} {o.name:<24} {o.price:>10}  {'yes' if o.available else 'no':<9}")


@click.command("update")
@click.option("--id", "option_id", required=True, help="Lunch option ID.")
@click.option("--price", default=None, help="New price (e.g. 13.50).")
@click.option("--available/--unavailable", default=None, help="Toggle availability.")
def menu_update(option_id: str, price: str | None, available: bool | None) -> None:
    """Change a lunch option's price or availability."""
    if price is None and available is None:
        raise click.UsageError("Nothing to update: pass --price and/or --available/--unavailable")

    handler = UpdateLunchOptionHandler(lunch_option_repo=lunch_option_repository())

    try:
        option = handler.handle(option_id=option_id, new_price=price, available=available)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    state = "available" if option.available else "unavailable"
    click.echo(f"Lunch option #{option.id} now {option.price}, {state}")
