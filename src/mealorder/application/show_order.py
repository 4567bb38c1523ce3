"""Application service: Show / List Orders use cases (queries)."""

from __future__ import annotations

from datetime import date

from mealorder.application.dto import OrderDTO, order_to_dto
from mealorder.domain.exceptions import EntityNotFoundError
from mealorder.domain.repository.lunch_option_repository import LunchOptionRepository
from mealorder.domain.repository.order_repository import OrderRepository


class ShowOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        lunch_option_repo: LunchOptionRepository,
    ) -> None:
        self._order_repo = order_repo
        self._lunch_option_repo = lunch_option_repo

    def handle(self, order_id: str) -> OrderDTO:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")
        option = self._lunch_option_repo.get_by_id(order.lunch_option_id)
        return order_to_dto(order, option.name if option else None)


class ListOrdersHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        lunch_option_repo: LunchOptionRepository,
    ) -> None:
        self._order_repo = order_repo
        self._lunch_option_repo = lunch_option_repo

    def handle(self, company_id: str, order_date: date) -> list[OrderDTO]:
        """Orders of one company for one day, oldest first."""
        names = {o.id: o.name for o in self._lunch_option_repo.list_all()}
        orders = self._order_repo.list_by_company_and_date(company_id, order_date)
        orders.sort(key=lambda o: o.created_at)
        return [order_to_dto(o, names.get(o.lunch_option_id)) for o in orders]
