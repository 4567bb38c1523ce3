"""Application services: dashboard reports (queries).

Loads the relevant orders and menu items, then hands them to the pure
reporting folds in the domain layer.
"""

from __future__ import annotations

from datetime import date

from mealorder.domain.exceptions import EntityNotFoundError
from mealorder.domain.repository.company_repository import CompanyRepository
from mealorder.domain.repository.lunch_option_repository import LunchOptionRepository
from mealorder.domain.repository.order_repository import OrderRepository
from mealorder.domain.service.order_reporting import (
    CompanyOrderSummary,
    OrderReport,
    ProviderStats,
    build_order_report,
    build_provider_stats,
    summarize_companies,
)


class DailyReportHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        lunch_option_repo: LunchOptionRepository,
    ) -> None:
        self._order_repo = order_repo
        self._lunch_option_repo = lunch_option_repo

    def handle(self, company_id: str, report_date: date) -> OrderReport:
        orders = self._order_repo.list_by_company_and_date(company_id, report_date)
        options = {o.id: o for o in self._lunch_option_repo.list_all()}
        return build_order_report(orders, options)


class ProviderStatsHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        lunch_option_repo: LunchOptionRepository,
        company_repo: CompanyRepository,
    ) -> None:
        self._order_repo = order_repo
        self._lunch_option_repo = lunch_option_repo
        self._company_repo = company_repo

    def handle(self, provider_id: str, today: date) -> ProviderStats:
        company_ids = {c.id for c in self._company_repo.list_by_provider(provider_id)}
        orders = [o for o in self._order_repo.list_all() if o.company_id in company_ids]
        options = {o.id: o for o in self._lunch_option_repo.list_all()}
        return build_provider_stats(orders, options, today)


class CompanySummaryHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        company_repo: CompanyRepository,
    ) -> None:
        self._order_repo = order_repo
        self._company_repo = company_repo

    def handle(
        self,
        provider_id: str | None = None,
        company_id: str | None = None,
    ) -> list[CompanyOrderSummary]:
        """Order summaries for a provider's companies, or a single company."""
        if company_id is not None:
            company = self._company_repo.get_by_id(company_id)
            if company is None:
                raise EntityNotFoundError(f"Company not found: '{company_id}'")
            companies = [company]
        elif provider_id is not None:
            companies = self._company_repo.list_by_provider(provider_id)
        else:
            companies = self._company_repo.list_all()
        return summarize_companies(self._order_repo.list_all(), companies)
