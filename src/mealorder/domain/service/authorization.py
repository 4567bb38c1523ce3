"""Authorization guard for order status transitions.

A pure predicate over (role, current status, requested status). It does
not know where the role or the status came from.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from mealorder.domain.exceptions import (
    InvalidTransitionError,
    TransitionDeniedError,
    UnauthorizedError,
)
from mealorder.domain.model.order_status import OrderStatus, required_roles
from mealorder.domain.model.role import Role


class DenialReason(Enum):
    INVALID_TRANSITION = "invalid_transition"
    UNAUTHORIZED = "unauthorized"


@dataclass(frozen=True)
class Allowed:
    role: Role
    from_status: OrderStatus
    to_status: OrderStatus

    @property
    def allowed(self) -> bool:
        return True


@dataclass(frozen=True)
class Denied:
    reason: DenialReason
    role: Role
    from_status: OrderStatus
    to_status: OrderStatus

    @property
    def allowed(self) -> bool:
        return False

    def to_exception(self) -> TransitionDeniedError:
        if self.reason is DenialReason.INVALID_TRANSITION:
            return InvalidTransitionError(self.from_status, self.to_status)
        return UnauthorizedError(self.role, self.from_status, self.to_status)


Decision = Allowed | Denied


def authorize(
    acting_role: Role,
    current_status: OrderStatus,
    requested_status: OrderStatus,
) -> Decision:
    """Decide whether *acting_role* may move an order between two statuses.

    The transition table is consulted first, so a structurally illegal
    pair (including anything leaving a terminal status) is always
    ``INVALID_TRANSITION``, even for admins. Admins hold every capability
    for pairs that do exist.
    """
    roles = required_roles(current_status, requested_status)
    if roles is None:
        return Denied(
            DenialReason.INVALID_TRANSITION, acting_role, current_status, requested_status
        )
    if acting_role is Role.ADMIN or acting_role in roles:
        return Allowed(acting_role, current_status, requested_status)
    return Denied(DenialReason.UNAUTHORIZED, acting_role, current_status, requested_status)
