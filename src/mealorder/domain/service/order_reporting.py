"""Domain service: read-only order reporting.

Pure folds over an already-loaded collection of orders, used by the
supervisor and provider dashboards. Every fold accepts an empty
collection and every average is zero rather than undefined.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable, Mapping

from mealorder.domain.model.company import Company
from mealorder.domain.model.lunch_option import LunchOption
from mealorder.domain.model.order import Order
from mealorder.domain.model.order_status import (
    ACTIVE_STATUSES,
    DISPATCHED_STATUSES,
    OrderStatus,
)
from mealorder.domain.model.value_objects import Money

UNKNOWN_MEAL = "Unknown meal"


@dataclass(frozen=True)
class MealCount:
    lunch_option_id: str
    name: str
    count: int


@dataclass(frozen=True)
class OrderReport:
    """Breakdown of one company's orders for one day."""

    status_counts: dict[OrderStatus, int]
    meal_counts: list[MealCount]
    distinct_user_count: int
    total_orders: int
    total_subsidized: Money

    @property
    def average_subsidized_price(self) -> Money:
        if self.total_orders == 0:
            return Money.zero()
        return Money(
            self.total_subsidized.amount / self.total_orders,
            self.total_subsidized.currency,
        ).rounded()

    @property
    def top_meal(self) -> MealCount | None:
        return self.meal_counts[0] if self.meal_counts else None

    @property
    def approval_rate(self) -> Decimal:
        return approval_rate(self.status_counts)


@dataclass(frozen=True)
class ProviderStats:
    """Headline numbers for a provider's dashboard."""

    orders_today: int
    pending_today: int
    companies_with_orders_today: int
    top_meal_today: MealCount | None
    monthly_orders: int
    monthly_revenue: Money


@dataclass(frozen=True)
class CompanyOrderSummary:
    company_id: str
    name: str
    orders: int
    users: int
    dispatched: int
    pending: int


def count_by_status(orders: Iterable[Order]) -> dict[OrderStatus, int]:
    """Count per status; every status is present, zero-filled."""
    counts = {status: 0 for status in OrderStatus}
    for order in orders:
        counts[order.status] += 1
    return counts


def count_by_meal(
    orders: Iterable[Order],
    lunch_options: Mapping[str, LunchOption],
) -> list[MealCount]:
    """Count per lunch option, most ordered first (ties broken by name)."""
    tally = Counter(order.lunch_option_id for order in orders)
    meals = [
        MealCount(
            lunch_option_id=option_id,
            name=lunch_options[option_id].name if option_id in lunch_options else UNKNOWN_MEAL,
            count=count,
        )
        for option_id, count in tally.items()
    ]
    meals.sort(key=lambda m: (-m.count, m.name, m.lunch_option_id))
    return meals


def count_distinct_users(orders: Iterable[Order]) -> int:
    return len({order.user_id for order in orders})


def build_order_report(
    orders: Iterable[Order],
    lunch_options: Mapping[str, LunchOption],
) -> OrderReport:
    orders = list(orders)
    total = Money.zero()
    for order in orders:
        total = total + order.subsidized_price
    return OrderReport(
        status_counts=count_by_status(orders),
        meal_counts=count_by_meal(orders, lunch_options),
        distinct_user_count=count_distinct_users(orders),
        total_orders=len(orders),
        total_subsidized=total,
    )


def build_provider_stats(
    orders: Iterable[Order],
    lunch_options: Mapping[str, LunchOption],
    today: date,
) -> ProviderStats:
    """Dashboard figures for *today* and the calendar month containing it.

    Only approved, prepared and delivered orders count as orders and as
    revenue; revenue is the list price the provider bills.
    """
    orders = list(orders)
    todays = [o for o in orders if o.date == today]
    active_today = [o for o in todays if o.status in ACTIVE_STATUSES]
    active_month = [
        o for o in orders
        if o.status in ACTIVE_STATUSES
        and (o.date.year, o.date.month) == (today.year, today.month)
    ]

    revenue = Money.zero()
    for order in active_month:
        revenue = revenue + order.unit_price

    meals = count_by_meal(active_today, lunch_options)
    return ProviderStats(
        orders_today=len(active_today),
        pending_today=sum(1 for o in todays if o.status is OrderStatus.PENDING),
        companies_with_orders_today=len({o.company_id for o in active_today}),
        top_meal_today=meals[0] if meals else None,
        monthly_orders=len(active_month),
        monthly_revenue=revenue,
    )


def summarize_companies(
    orders: Iterable[Order],
    companies: Iterable[Company],
) -> list[CompanyOrderSummary]:
    """Per-company order counts. Companies without orders are omitted."""
    by_company: dict[str, list[Order]] = {}
    for order in orders:
        by_company.setdefault(order.company_id, []).append(order)

    summaries: list[CompanyOrderSummary] = []
    for company in companies:
        company_orders = by_company.get(company.id)
        if not company_orders:
            continue
        dispatched = sum(1 for o in company_orders if o.status in DISPATCHED_STATUSES)
        summaries.append(
            CompanyOrderSummary(
                company_id=company.id,
                name=company.name,
                orders=len(company_orders),
                users=count_distinct_users(company_orders),
                dispatched=dispatched,
                pending=len(company_orders) - dispatched,
            )
        )
    return summaries


def approval_rate(status_counts: Mapping[OrderStatus, int]) -> Decimal:
    """Share of reviewed orders that were not rejected, 0 when none reviewed."""
    reviewed = sum(
        count for status, count in status_counts.items() if status is not OrderStatus.PENDING
    )
    if reviewed == 0:
        return Decimal("0")
    rejected = status_counts.get(OrderStatus.REJECTED, 0)
    return Decimal(reviewed - rejected) / Decimal(reviewed)
