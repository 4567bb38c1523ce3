"""CLI commands for the Order aggregate."""

from __future__ import annotations

from datetime import date, datetime

import click

from mealorder.application.create_order import CreateOrderHandler
from mealorder.application.dto import OrderDTO
from mealorder.application.show_order import ListOrdersHandler, ShowOrderHandler
from mealorder.application.transition_order import TransitionOrderHandler
from mealorder.domain.exceptions import DomainException
from mealorder.domain.model.order_status import OrderStatus
from mealorder.domain.model.role import Role
from mealorder.infrastructure.bootstrap import (
    company_repository,
    lunch_option_repository,
    order_repository,
)

_ROLE_CHOICE = click.Choice([r.value for r in Role], case_sensitive=False)
_STATUS_CHOICE = click.Choice([s.value for s in OrderStatus], case_sensitive=False)


def _order_date(value: datetime | None) -> date:
    return value.date() if value is not None else date.today()


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.id}  (status={dto.status})")
    click.echo(f"User:     {dto.user_id}")
    click.echo(f"Company:  {dto.company_id}")
    click.echo(f"Date:     {dto.date}")
    click.echo(f"Meal:     {dto.lunch_option_name}")
    click.echo(f"Price:    {dto.unit_price}  (employee pays {dto.subsidized_price})")
    click.echo(f"Subsidy:  {dto.subsidy}")
    if dto.approved_by:
        click.echo(f"Approved: {dto.approved_by}")
    click.echo(f"Created:  {dto.created_at}")
    click.echo(f"Updated:  {dto.updated_at}")


def _transition(order_id: str, status: OrderStatus | str, user: str, role: str) -> OrderDTO:
    handler = TransitionOrderHandler(
        order_repo=order_repository(),
        lunch_option_repo=lunch_option_repository(),
    )
    try:
        return handler.handle(
            order_id=order_id,
            requested_status=status,
            acting_user_id=user,
            acting_role=role,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))


def _actor_options(func):
    func = click.option("--role", required=True, type=_ROLE_CHOICE, help="Acting role.")(func)
    func = click.option("--user", required=True, help="Acting user id.")(func)
    func = click.option("--id", "order_id", required=True, help="Order ID.")(func)
    return func


@click.command("create")
@click.option("--user", required=True, help="Employee user id.")
@click.option("--company", "company_id", required=True, help="Company ID.")
@click.option("--option", "option_id", required=True, help="Lunch option ID.")
@click.option("--date", "order_date", type=click.DateTime(formats=["%Y-%m-%d"]),
              default=None, help="Order day (YYYY-MM-DD), defaults to today.")
def order_create(user: str, company_id: str, option_id: str, order_date: datetime | None) -> None:
    """Place, or change, an employee's meal for the day."""
    handler = CreateOrderHandler(
        order_repo=order_repository(),
        lunch_option_repo=lunch_option_repository(),
        company_repo=company_repository(),
    )

    try:
        dto = handler.handle(
            user_id=user,
            company_id=company_id,
            lunch_option_id=option_id,
            order_date=_order_date(order_date),
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{dto.id} saved  (status={dto.status})")
    click.echo(f"{dto.lunch_option_name}: {dto.unit_price}, employee pays {dto.subsidized_price}")


@click.command("show")
@click.option("--id", "order_id", required=True, help="Order ID to display.")
def order_show(order_id: str) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(
        order_repo=order_repository(),
        lunch_option_repo=lunch_option_repository(),
    )

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("list")
@click.option("--company", "company_id", required=True, help="Company ID.")
@click.option("--date", "order_date", type=click.DateTime(formats=["%Y-%m-%d"]),
              default=None, help="Day (YYYY-MM-DD), defaults to today.")
def order_list(company_id: str, order_date: datetime | None) -> None:
    """List a company's orders for a day."""
    handler = ListOrdersHandler(
        order_repo=order_repository(),
        lunch_option_repo=lunch_option_repository(),
    )
    orders = handler.handle(company_id, _order_date(order_date))

    if not orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'ID':<34} {'User':<14} {'Meal':<20} {'Status':<10} {'Pays':>8}")
    click.echo("-" * 90)
    for o in orders:
        click.echo(
            f"{o.id:<34} {o.user_id:<14} {o.lunch_option_name:<20} {o.status:<10} {o.subsidized_price:>8}"
        )


@click.command("approve")
@_actor_options
def order_approve(order_id: str, user: str, role: str) -> None:
    """Approve a pending order."""
    dto = _transition(order_id, OrderStatus.APPROVED, user, role)
    click.echo(f"Order #{dto.id} is {dto.status}.")


@click.command("reject")
@_actor_options
def order_reject(order_id: str, user: str, role: str) -> None:
    """Reject a pending order."""
    dto = _transition(order_id, OrderStatus.REJECTED, user, role)
    click.echo(f"Order #{dto.id} is {dto.status}.")


@click.command("prepare")
@_actor_options
def order_prepare(order_id: str, user: str, role: str) -> None:
    """Mark an approved order as prepared."""
    dto = _transition(order_id, OrderStatus.PREPARED, user, role)
    click.echo(f"Order #{dto.id} is {dto.status}.")


@click.command("deliver")
@_actor_options
def order_deliver(order_id: str, user: str, role: str) -> None:
    """Mark a prepared order as delivered."""
    dto = _transition(order_id, OrderStatus.DELIVERED, user, role)
    click.echo(f"Order #{dto.id} is {dto.status}.")


@click.command("revert")
@_actor_options
def order_revert(order_id: str, user: str, role: str) -> None:
    """Send a prepared order back to approved."""
    current = order_repository().get_by_id(order_id)
    if current is not None and current.status is not OrderStatus.PREPARED:
        raise click.ClickException(
            f"Only prepared orders can be reverted (order #{order_id} is {current.status.value})"
        )
    dto = _transition(order_id, OrderStatus.APPROVED, user, role)
    click.echo(f"Order #{dto.id} is {dto.status}.")


@click.command("transition")
@_actor_options
@click.option("--to", "target", required=True, type=_STATUS_CHOICE, help="Requested status.")
def order_transition(order_id: str, user: str, role: str, target: str) -> None:
    """Request any status change by name."""
    dto = _transition(order_id, target, user, role)
    click.echo(f"Order #{dto.id} is {dto.status}.")
