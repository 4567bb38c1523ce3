"""Application service: Create Order use case.

Orchestrates the flow between repositories and the domain model.
This is the only place that coordinates multiple aggregates (menu item
lookup + company subsidy snapshot + Order creation).
"""

from __future__ import annotations

import logging
from datetime import date

from mealorder.application.dto import OrderDTO, order_to_dto
from mealorder.domain.exceptions import EntityNotFoundError, ValidationError
from mealorder.domain.model.order import Order
from mealorder.domain.repository.company_repository import CompanyRepository
from mealorder.domain.repository.lunch_option_repository import LunchOptionRepository
from mealorder.domain.repository.order_repository import OrderRepository
from mealorder.domain.service.pricing import compute_subsidized_price

logger = logging.getLogger(__name__)


class CreateOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        lunch_option_repo: LunchOptionRepository,
        company_repo: CompanyRepository,
    ) -> None:
        self._order_repo = order_repo
        self._lunch_option_repo = lunch_option_repo
        self._company_repo = company_repo

    def handle(
        self,
        user_id: str,
        company_id: str,
        lunch_option_id: str,
        order_date: date,
    ) -> OrderDTO:
        """Place (or replace) an employee's meal order for a day.

        Steps:
        1. Resolve the menu item and make sure it can be ordered.
        2. Read the company's subsidy rule for this user once (snapshot).
        3. Price the order: list price + subsidized price, both locked.
        4. Let the repository insert it, or update the day's existing order.
        """
        option = self._lunch_option_repo.get_by_id(lunch_option_id)
        if option is None:
            raise EntityNotFoundError(f"Lunch option not found: '{lunch_option_id}'")
        option.ensure_orderable()

        company = self._company_repo.get_by_id(company_id)
        if company is None:
            raise EntityNotFoundError(f"Company not found: '{company_id}'")
        if (
            option.provider_id is not None
            and company.provider_id is not None
            and option.provider_id != company.provider_id
        ):
            raise ValidationError(
                f"Lunch option '{option.name}' is not offered to company '{company.name}'"
            )

        subsidy = company.subsidy_for(user_id)
        subsidized = compute_subsidized_price(option.price, subsidy)
        logger.debug(
            "Pricing %s for user %s: %s with subsidy %s -> %s",
            option.id, user_id, option.price, subsidy or "none", subsidized,
        )

        order = Order.create(
            user_id=user_id,
            company_id=company_id,
            lunch_option_id=option.id,
            order_date=order_date,
            unit_price=option.price,  # <-- price snapshot
            subsidized_price=subsidized,
        )
        saved = self._order_repo.create(order)
        return order_to_dto(saved, option.name)
