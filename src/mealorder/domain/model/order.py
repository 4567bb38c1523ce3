"""Order aggregate — the core of the domain.

One order per employee, company and day. The order captures the list
price and the subsidized price at the moment the meal is chosen, then
moves through its lifecycle by status transitions only.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import date, datetime, timezone

from mealorder.domain.exceptions import ValidationError
from mealorder.domain.model.order_status import (
    INITIAL_STATUS,
    OrderStatus,
    is_terminal,
)
from mealorder.domain.model.role import Role
from mealorder.domain.model.value_objects import Money
from mealorder.domain.service.authorization import Denied, authorize

# Statuses in which the employee may still swap their meal for the day.
RESELECTABLE_STATUSES = frozenset({OrderStatus.PENDING, OrderStatus.REJECTED})


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Order:
    """Aggregate root for daily meal orders.

    Use the ``Order.create()`` factory for new orders; it enforces all
    business rules. The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted orders without re-validating.
    """

    id: str | None
    user_id: str
    company_id: str
    lunch_option_id: str
    date: date
    unit_price: Money  # locked at order time
    subsidized_price: Money  # locked at order time
    status: OrderStatus = INITIAL_STATUS
    approved_by: str | None = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        user_id: str,
        company_id: str,
        lunch_option_id: str,
        order_date: date,
        unit_price: Money,
        subsidized_price: Money,
    ) -> Order:
        """Create a new order, enforcing all invariants.

        New orders always start ``pending``, whoever places them.
        """
        for label, value in (
            ("User id", user_id),
            ("Company id", company_id),
            ("Lunch option id", lunch_option_id),
        ):
            if not value or not value.strip():
                raise ValidationError(f"{label} is required")

        if not isinstance(order_date, date) or isinstance(order_date, datetime):
            raise ValidationError("Order date must be a calendar date")

        if subsidized_price > unit_price:
            raise ValidationError(
                f"Subsidized price {subsidized_price} exceeds list price {unit_price}"
            )

        now = _utcnow()
        return Order(
            id=None,
            user_id=user_id.strip(),
            company_id=company_id.strip(),
            lunch_option_id=lunch_option_id.strip(),
            date=order_date,
            unit_price=unit_price,
            subsidized_price=subsidized_price,
            status=INITIAL_STATUS,
            created_at=now,
            updated_at=now,
        )

    # --- State transitions ----------------------------------------------------

    def transition_to(
        self,
        requested: OrderStatus,
        actor_id: str,
        acting_role: Role,
    ) -> bool:
        """Move the order to *requested* on behalf of *actor_id*.

        Returns True if the status changed, False for an idempotent repeat
        of the current status. Raises ``InvalidTransitionError`` or
        ``UnauthorizedError`` otherwise.

        Terminal statuses are final: even a repeat of the same terminal
        status is an invalid transition.
        """
        current = self.status
        if not is_terminal(current) and requested == current:
            return False

        decision = authorize(acting_role, current, requested)
        if isinstance(decision, Denied):
            raise decision.to_exception()

        if current is OrderStatus.PENDING:
            self.approved_by = actor_id
        self.status = requested
        self.updated_at = _utcnow()
        return True

    def reselect(
        self,
        lunch_option_id: str,
        unit_price: Money,
        subsidized_price: Money,
    ) -> None:
        """Replace today's meal choice on an order that is not yet accepted.

        The order keeps its id and ``created_at`` and goes back to
        ``pending`` with a fresh price snapshot for the new choice.
        """
        if self.status not in RESELECTABLE_STATUSES:
            raise ValidationError(
                f"Cannot change the meal for order #{self.id}: "
                f"current status is {self.status.value}"
            )
        if subsidized_price > unit_price:
            raise ValidationError(
                f"Subsidized price {subsidized_price} exceeds list price {unit_price}"
            )
        self.lunch_option_id = lunch_option_id
        self.unit_price = unit_price
        self.subsidized_price = subsidized_price
        self.status = INITIAL_STATUS
        self.approved_by = None
        self.updated_at = _utcnow()

    # --- Computed properties --------------------------------------------------

    @property
    def subsidy_amount(self) -> Money:
        return Money(
            self.unit_price.amount - self.subsidized_price.amount,
            self.unit_price.currency,
        )

    def snapshot(self) -> Order:
        """Detached copy, so callers can mutate without touching the store."""
        return copy.deepcopy(self)
