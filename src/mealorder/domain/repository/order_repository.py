"""Abstract repository for Order aggregate.

Concrete stores implement the storage primitives. The two write paths
the engine uses, ``create`` and ``transition``, are implemented once here
so every store shares the same concurrency contract:

- writes to one order are serialized behind that order's lock, acquired
  within a bounded wait;
- the commit is a compare-and-save against the status that was read, so
  a stale read can never overwrite a newer transition.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import date
from typing import Hashable, Iterator, Protocol

from mealorder.domain.exceptions import ConflictError, EntityNotFoundError
from mealorder.domain.model.order import Order
from mealorder.domain.model.order_status import OrderStatus
from mealorder.domain.model.role import Role

logger = logging.getLogger(__name__)

DEFAULT_LOCK_TIMEOUT = 2.0


class KeyedLockRegistry(Protocol):
    def acquire(self, key: Hashable, timeout: float = -1) -> bool: ...

    def release(self, key: Hashable) -> None: ...


class OrderRepository(ABC):

    lock_timeout: float = DEFAULT_LOCK_TIMEOUT

    # --- Storage primitives ---------------------------------------------------

    @abstractmethod
    def next_id(self) -> str:
        """Generate a new unique, opaque order ID."""

    @abstractmethod
    def get_by_id(self, order_id: str) -> Order | None:
        """Return a detached copy of an order, or None if not found."""

    @abstractmethod
    def find_by_user_and_date(
        self,
        user_id: str,
        order_date: date,
        company_id: str | None = None,
    ) -> Order | None:
        """Return the user's order for that day, or None."""

    @abstractmethod
    def list_by_company_and_date(self, company_id: str, order_date: date) -> list[Order]:
        """Return every order placed for a company on a given day."""

    @abstractmethod
    def list_all(self) -> list[Order]:
        """Return every order."""

    @abstractmethod
    def insert(self, order: Order) -> None:
        """Persist a brand-new order. ``order.id`` is already assigned."""

    @abstractmethod
    def compare_and_save(self, order: Order, expected_status: OrderStatus) -> bool:
        """Persist *order* only if the stored copy still has *expected_status*.

        Returns False, without writing, if the stored status differs or
        the order no longer exists.
        """

    @property
    @abstractmethod
    def locks(self) -> KeyedLockRegistry:
        """Per-key locks guarding the write paths."""

    # --- Engine write paths ---------------------------------------------------

    def create(self, order: Order) -> Order:
        """Insert a new order, or update the user's existing order for that day.

        At most one order exists per (user, company, date).
        """
        day_key = ("user-day", order.user_id, order.company_id, order.date)
        with self._locked(day_key, order_id=None):
            existing = self.find_by_user_and_date(
                order.user_id, order.date, order.company_id
            )
            if existing is None:
                order.id = self.next_id()
                order.status = OrderStatus.PENDING
                self.insert(order)
                logger.info(
                    "Order %s created for user %s on %s (%s -> %s)",
                    order.id, order.user_id, order.date,
                    order.unit_price, order.subsidized_price,
                )
                return order

            with self._locked(("order", existing.id), order_id=existing.id):
                current = self.get_by_id(existing.id)  # type: ignore[arg-type]
                if current is None:
                    raise ConflictError(
                        existing.id, message=f"Order #{existing.id} vanished during update"
                    )
                expected = current.status
                current.reselect(
                    order.lunch_option_id, order.unit_price, order.subsidized_price
                )
                self._commit(current, expected)
                logger.info(
                    "Order %s re-selected by user %s on %s", current.id, current.user_id, current.date
                )
                return current

    def transition(
        self,
        order_id: str,
        requested_status: OrderStatus,
        actor_id: str,
        acting_role: Role,
    ) -> Order:
        """Authorize and apply one status transition atomically.

        Raises ``EntityNotFoundError``, ``InvalidTransitionError``,
        ``UnauthorizedError`` or ``ConflictError``.
        """
        with self._locked(("order", order_id), order_id=order_id):
            order = self.get_by_id(order_id)
            if order is None:
                raise EntityNotFoundError(f"Order #{order_id} not found")

            expected = order.status
            changed = order.transition_to(requested_status, actor_id, acting_role)
            if not changed:
                logger.debug(
                    "Order %s already %s; nothing to do", order_id, expected.value
                )
                return order

            self._commit(order, expected)
            logger.info(
                "Order %s: %s -> %s by %s (%s)",
                order_id, expected.value, order.status.value, actor_id, acting_role.value,
            )
            return order

    # --- Internal helpers -----------------------------------------------------

    def _commit(self, order: Order, expected: OrderStatus) -> None:
        if not self.compare_and_save(order, expected):
            stored = self.get_by_id(order.id)  # type: ignore[arg-type]
            actual = stored.status if stored is not None else None
            logger.warning(
                "Order %s commit lost the race (expected %s, found %s)",
                order.id, expected.value, getattr(actual, "value", actual),
            )
            raise ConflictError(order.id, expected, actual)

    @contextmanager
    def _locked(self, key: Hashable, order_id: str | None) -> Iterator[None]:
        if not self.locks.acquire(key, timeout=self.lock_timeout):
            logger.warning("Timed out after %.1fs waiting for %r", self.lock_timeout, key)
            raise ConflictError(
                order_id,
                message=f"Timed out waiting for exclusive access to {_describe(key)}",
            )
        try:
            yield
        finally:
            self.locks.release(key)


def _describe(key: Hashable) -> str:
    if isinstance(key, tuple) and key and key[0] == "order":
        return f"order #{key[1]}"
    return repr(key)
