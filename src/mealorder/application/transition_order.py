"""Application service: Transition Order use case.

Every status change goes through this one handler, including the
prepared -> approved revert. The repository owns atomicity and the
Order aggregate owns the rules.
"""

from __future__ import annotations

from mealorder.application.dto import OrderDTO, order_to_dto
from mealorder.domain.exceptions import ValidationError
from mealorder.domain.model.order_status import OrderStatus
from mealorder.domain.model.role import Role
from mealorder.domain.repository.lunch_option_repository import LunchOptionRepository
from mealorder.domain.repository.order_repository import OrderRepository


class TransitionOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        lunch_option_repo: LunchOptionRepository | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._lunch_option_repo = lunch_option_repo

    def handle(
        self,
        order_id: str,
        requested_status: str | OrderStatus,
        acting_user_id: str,
        acting_role: str | Role,
    ) -> OrderDTO:
        """Move an order to *requested_status* on behalf of a user.

        Raises EntityNotFoundError, InvalidTransitionError,
        UnauthorizedError or ConflictError. Only ConflictError is worth
        retrying, after re-reading the order.
        """
        if not acting_user_id or not acting_user_id.strip():
            raise ValidationError("Acting user id is required")

        status = OrderStatus.parse(requested_status)
        role = Role.parse(acting_role)

        order = self._order_repo.transition(order_id, status, acting_user_id.strip(), role)

        name = None
        if self._lunch_option_repo is not None:
            option = self._lunch_option_repo.get_by_id(order.lunch_option_id)
            name = option.name if option is not None else None
        return order_to_dto(order, name)
