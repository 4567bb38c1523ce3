"""Order lifecycle: statuses and the transition table.

The table is the single source of truth for which status changes exist
and which roles may fire each one. Adding a role or a status means
editing data here, not branching code elsewhere.
"""

from __future__ import annotations

from enum import Enum

from mealorder.domain.exceptions import ValidationError
from mealorder.domain.model.role import Role


class OrderStatus(Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    PREPARED = "prepared"
    DELIVERED = "delivered"

    @staticmethod
    def parse(raw: str | OrderStatus) -> OrderStatus:
        if isinstance(raw, OrderStatus):
            return raw
        try:
            return OrderStatus(raw.strip().lower())
        except (ValueError, AttributeError) as exc:
            raise ValidationError(f"Unknown order status: {raw!r}") from exc


INITIAL_STATUS = OrderStatus.PENDING

TERMINAL_STATUSES: frozenset[OrderStatus] = frozenset(
    {OrderStatus.REJECTED, OrderStatus.DELIVERED}
)

# Statuses counted as "going ahead" on dashboards and in revenue.
ACTIVE_STATUSES: frozenset[OrderStatus] = frozenset(
    {OrderStatus.APPROVED, OrderStatus.PREPARED, OrderStatus.DELIVERED}
)

# Statuses in which the meal has left the kitchen.
DISPATCHED_STATUSES: frozenset[OrderStatus] = frozenset(
    {OrderStatus.PREPARED, OrderStatus.DELIVERED}
)

_REVIEWERS = frozenset({Role.SUPERVISOR, Role.PROVIDER})
_KITCHEN = frozenset({Role.PROVIDER})

# (from, to) -> roles allowed to fire it. Admin is handled by the guard.
TRANSITIONS: dict[tuple[OrderStatus, OrderStatus], frozenset[Role]] = {
    (OrderStatus.PENDING, OrderStatus.APPROVED): _REVIEWERS,
    (OrderStatus.PENDING, OrderStatus.REJECTED): _REVIEWERS,
    (OrderStatus.APPROVED, OrderStatus.PREPARED): _KITCHEN,
    (OrderStatus.PREPARED, OrderStatus.DELIVERED): _KITCHEN,
    (OrderStatus.PREPARED, OrderStatus.APPROVED): _KITCHEN,
}


def is_terminal(status: OrderStatus) -> bool:
    return status in TERMINAL_STATUSES


def allowed_targets(status: OrderStatus) -> frozenset[OrderStatus]:
    """Statuses reachable from *status* in one step, for any role."""
    return frozenset(to for (frm, to) in TRANSITIONS if frm == status)


def required_roles(
    from_status: OrderStatus, to_status: OrderStatus
) -> frozenset[Role] | None:
    """Roles allowed to fire the transition, or None if it does not exist."""
    return TRANSITIONS.get((from_status, to_status))
