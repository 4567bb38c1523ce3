"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass

from mealorder.domain.model.order import Order


@dataclass(frozen=True)
class OrderDTO:
    """Output: a daily meal order as displayed to the user."""

    id: str
    user_id: str
    company_id: str
    lunch_option_id: str
    lunch_option_name: str
    date: str  # ISO, e.g. "2024-05-01"
    status: str
    unit_price: str  # formatted, e.g. "$12.00"
    subsidized_price: str
    subsidy: str  # what the company covers
    approved_by: str | None
    created_at: str
    updated_at: str


@dataclass(frozen=True)
class LunchOptionDTO:
    id: str
    name: str
    price: str
    available: bool
    provider_id: str | None


@dataclass(frozen=True)
class CompanyDTO:
    id: str
    name: str
    provider_id: str | None
    subsidy: str  # e.g. "30%", "$5.00 off", "none"
    overrides: dict[str, str]


def order_to_dto(order: Order, lunch_option_name: str | None = None) -> OrderDTO:
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        user_id=order.user_id,
        company_id=order.company_id,
        lunch_option_id=order.lunch_option_id,
        lunch_option_name=lunch_option_name or order.lunch_option_id,
        date=order.date.isoformat(),
        status=order.status.value,
        unit_price=str(order.unit_price),
        subsidized_price=str(order.subsidized_price),
        subsidy=str(order.subsidy_amount),
        approved_by=order.approved_by,
        created_at=order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
        updated_at=order.updated_at.strftime("%Y-%m-%d %H:%M UTC"),
    )
