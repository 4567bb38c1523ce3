"""CLI commands for dashboard reports."""

from __future__ import annotations

from datetime import date, datetime

import click

from mealorder.application.order_reports import (
    CompanySummaryHandler,
    DailyReportHandler,
    ProviderStatsHandler,
)
from mealorder.domain.exceptions import DomainException
from mealorder.infrastructure.bootstrap import (
    company_repository,
    lunch_option_repository,
    order_repository,
)

_DATE = click.DateTime(formats=["%Y-%m-%d"])


def _day(value: datetime | None) -> date:
    return value.date() if value is not None else date.today()


@click.command("daily")
@click.option("--company", "company_id", required=True, help="Company ID.")
@click.option("--date", "report_date", type=_DATE, default=None,
              help="Day (YYYY-MM-DD), defaults to today.")
def report_daily(company_id: str, report_date: datetime | None) -> None:
    """One company's orders for one day."""
    handler = DailyReportHandler(
        order_repo=order_repository(),
        lunch_option_repo=lunch_option_repository(),
    )
    report = handler.handle(company_id, _day(report_date))

    click.echo(f"Orders:        {report.total_orders}")
    click.echo(f"Employees:     {report.distinct_user_count}")
    click.echo(f"Total paid:    {report.total_subsidized}")
    click.echo(f"Average paid:  {report.average_subsidized_price}")
    click.echo(f"Approval rate: {report.approval_rate:.0%}")
    click.echo()
    for status, count in report.status_counts.items():
        click.echo(f"  {status.value:<10} {count:>5}")
    if report.meal_counts:
        click.echo()
        click.echo(f"  {'Meal':<24} {'Orders':>6}")
        click.echo(f"  {'-'*31}")
        for meal in report.meal_counts:
            click.echo(f"  {meal.name:<24} {meal.count:>6}")


@click.command("provider")
@click.option("--provider", "provider_id", required=True, help="Provider ID.")
@click.option("--date", "today", type=_DATE, default=None,
              help="Reference day (YYYY-MM-DD), defaults to today.")
def report_provider(provider_id: str, today: datetime | None) -> None:
    """Headline figures for a provider's dashboard."""
    handler = ProviderStatsHandler(
        order_repo=order_repository(),
        lunch_option_repo=lunch_option_repository(),
        company_repo=company_repository(),
    )
    stats = handler.handle(provider_id, _day(today))

    top = stats.top_meal_today.name if stats.top_meal_today else "-"
    click.echo(f"Orders today:     {stats.orders_today}")
    click.echo(f"Pending today:    {stats.pending_today}")
    click.echo(f"Companies today:  {stats.companies_with_orders_today}")
    click.echo(f"Top meal today:   {top}")
    click.echo(f"Orders this month:  {stats.monthly_orders}")
    click.echo(f"Revenue this month: {stats.monthly_revenue}")


@click.command("companies")
@click.option("--provider", "provider_id", default=None, help="Only this provider's companies.")
@click.option("--company", "company_id", default=None, help="A single company.")
def report_companies(provider_id: str | None, company_id: str | None) -> None:
    """Order counts per company."""
    handler = CompanySummaryHandler(
        order_repo=order_repository(),
        company_repo=company_repository(),
    )

    try:
        summaries = handler.handle(provider_id=provider_id, company_id=company_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not summaries:
        click.echo("No orders found.")
        return

    click.echo(f"{'Company':<24} {'Orders':>7} {'Users':>6} {'Dispatched':>11} {'Pending':>8}")
    click.echo("-" * 60)
    for s in summaries:
        click.echo(f"{s.name:<24} {s.orders:>7} {s.users:>6} {s.dispatched:>11} {s.pending:>8}")
