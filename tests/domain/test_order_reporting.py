"""Unit tests for the reporting folds."""

from datetime import date
from decimal import Decimal

from mealorder.domain.model.company import Company
from mealorder.domain.model.lunch_option import LunchOption
from mealorder.domain.model.order import Order
from mealorder.domain.model.order_status import OrderStatus
from mealorder.domain.model.value_objects import Money
from mealorder.domain.service.order_reporting import (
    UNKNOWN_MEAL,
    approval_rate,
    build_order_report,
    build_provider_stats,
    count_by_meal,
    count_by_status,
    count_distinct_users,
    summarize_companies,
)

TODAY = date(2024, 5, 15)

OPTIONS = {
    "1": LunchOption(id="1", name="Pasta", price=Money.of("12.00")),
    "2": LunchOption(id="2", name="Salad", price=Money.of("9.00")),
}


def _order(
    user: str,
    option: str = "1",
    status: OrderStatus = OrderStatus.PENDING,
    company: str = "c1",
    day: date = TODAY,
    price: str = "12.00",
    paid: str = "8.40",
) -> Order:
    order = Order.create(user, company, option, day, Money.of(price), Money.of(paid))
    order.id = f"{user}-{day.isoformat()}"
    order.status = status
    return order


class TestEmptyInput:

    def test_status_counts_zero_filled(self):
        counts = count_by_status([])
        assert set(counts) == set(OrderStatus)
        assert all(v == 0 for v in counts.values())

    def test_report_on_nothing(self):
        report = build_order_report([], OPTIONS)
        assert report.meal_counts == []
        assert report.distinct_user_count == 0
        assert report.total_orders == 0
        assert report.average_subsidized_price == Money.zero()
        assert report.top_meal is None
        assert report.approval_rate == Decimal("0")

    def test_provider_stats_on_nothing(self):
        stats = build_provider_stats([], OPTIONS, TODAY)
        assert stats.orders_today == 0
        assert stats.top_meal_today is None
        assert stats.monthly_revenue == Money.zero()

    def test_summaries_on_nothing(self):
        assert summarize_companies([], [Company(id="c1", name="Acme")]) == []


class TestDailyReport:

    def test_counts(self):
        orders = [
            _order("a", "1", OrderStatus.APPROVED),
            _order("b", "1", OrderStatus.PENDING),
            _order("c", "2", OrderStatus.REJECTED, price="9.00", paid="6.30"),
        ]
        report = build_order_report(orders, OPTIONS)
        assert report.status_counts[OrderStatus.APPROVED] == 1
        assert report.status_counts[OrderStatus.PENDING] == 1
        assert report.status_counts[OrderStatus.REJECTED] == 1
        assert report.status_counts[OrderStatus.DELIVERED] == 0
        assert report.distinct_user_count == 3
        assert report.total_subsidized == Money.of("23.10")
        assert report.average_subsidized_price == Money.of("7.70")
        assert report.top_meal.name == "Pasta"
        assert report.top_meal.count == 2

    def test_meal_ordering_breaks_ties_by_name(self):
        orders = [_order("a", "2"), _order("b", "1")]
        assert [m.name for m in count_by_meal(orders, OPTIONS)] == ["Pasta", "Salad"]

    def test_unknown_meal_is_labelled(self):
        meals = count_by_meal([_order("a", "99")], OPTIONS)
        assert meals[0].name == UNKNOWN_MEAL
        assert meals[0].lunch_option_id == "99"

    def test_distinct_users(self):
        orders = [_order("a"), _order("a", day=date(2024, 5, 16)), _order("b")]
        assert count_distinct_users(orders) == 2

    def test_approval_rate_ignores_pending(self):
        counts = count_by_status([
            _order("a", status=OrderStatus.APPROVED),
            _order("b", status=OrderStatus.DELIVERED),
            _order("c", status=OrderStatus.REJECTED),
            _order("d", status=OrderStatus.REJECTED),
            _order("e", status=OrderStatus.PENDING),
        ])
        assert approval_rate(counts) == Decimal("0.5")


class TestProviderStats:

    def test_only_active_orders_count(self):
        orders = [
            _order("a", "1", OrderStatus.APPROVED),
            _order("b", "2", OrderStatus.PREPARED, company="c2", price="9.00", paid="9.00"),
            _order("c", "1", OrderStatus.PENDING),
            _order("d", "1", OrderStatus.REJECTED),
            _order("e", "1", OrderStatus.DELIVERED, day=date(2024, 5, 2)),
            _order("f", "1", OrderStatus.DELIVERED, day=date(2024, 4, 30)),
        ]
        stats = build_provider_stats(orders, OPTIONS, TODAY)
        assert stats.orders_today == 2
        assert stats.pending_today == 1
        assert stats.companies_with_orders_today == 2
        assert stats.monthly_orders == 3
        # list price, not what the employee paid
        assert stats.monthly_revenue == Money.of("33.00")

    def test_top_meal_today(self):
        orders = [
            _order("a", "2", OrderStatus.APPROVED),
            _order("b", "2", OrderStatus.APPROVED),
            _order("c", "1", OrderStatus.APPROVED),
        ]
        assert build_provider_stats(orders, OPTIONS, TODAY).top_meal_today.name == "Salad"


class TestCompanySummaries:

    def test_dispatched_and_pending(self):
        companies = [Company(id="c1", name="Acme"), Company(id="c2", name="Globex")]
        orders = [
            _order("a", status=OrderStatus.PREPARED),
            _order("b", status=OrderStatus.DELIVERED),
            _order("c", status=OrderStatus.APPROVED),
            _order("a", status=OrderStatus.PENDING, day=date(2024, 5, 16)),
        ]
        [acme] = summarize_companies(orders, companies)
        assert acme.name == "Acme"
        assert acme.orders == 4
        assert acme.users == 3
        assert acme.dispatched == 2
        assert acme.pending == 2
