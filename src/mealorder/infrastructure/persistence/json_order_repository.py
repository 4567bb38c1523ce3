"""JSON-file-backed implementation of OrderRepository."""

from __future__ import annotations

import json
import logging
import threading
import uuid
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path

from mealorder.domain.model.order import Order
from mealorder.domain.model.order_status import OrderStatus
from mealorder.domain.model.value_objects import Money
from mealorder.domain.repository.order_repository import (
    DEFAULT_LOCK_TIMEOUT,
    OrderRepository,
)
from mealorder.infrastructure.persistence.locks import KeyedLocks

logger = logging.getLogger(__name__)


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path, lock_timeout: float = DEFAULT_LOCK_TIMEOUT) -> None:
        self._file_path = file_path
        self._file_lock = threading.RLock()
        self._locks = KeyedLocks()
        self.lock_timeout = lock_timeout
        self._ensure_file()

    # --- OrderRepository interface --------------------------------------------

    def next_id(self) -> str:
        return uuid.uuid4().hex

    def get_by_id(self, order_id: str) -> Order | None:
        for raw in self._load_raw():
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def find_by_user_and_date(
        self,
        user_id: str,
        order_date: date,
        company_id: str | None = None,
    ) -> Order | None:
        day = order_date.isoformat()
        for raw in self._load_raw():
            if raw["user_id"] != user_id or raw["date"] != day:
                continue
            if company_id is not None and raw["company_id"] != company_id:
                continue
            return self._to_domain(raw)
        return None

    def list_by_company_and_date(self, company_id: str, order_date: date) -> list[Order]:
        day = order_date.isoformat()
        return [
            self._to_domain(raw)
            for raw in self._load_raw()
            if raw["company_id"] == company_id and raw["date"] == day
        ]

    def list_all(self) -> list[Order]:
        return [self._to_domain(raw) for raw in self._load_raw()]

    def insert(self, order: Order) -> None:
        with self._file_lock:
            orders = self._load_raw()
            orders.append(self._to_raw(order))
            self._persist_raw(orders)

    def compare_and_save(self, order: Order, expected_status: OrderStatus) -> bool:
        # Re-read inside the file lock: the status check and the write
        # must see the same file contents.
        with self._file_lock:
            orders = self._load_raw()
            for i, raw in enumerate(orders):
                if raw["id"] != order.id:
                    continue
                if raw["status"] != expected_status.value:
                    return False
                orders[i] = self._to_raw(order)
                self._persist_raw(orders)
                return True
        return False

    @property
    def locks(self) -> KeyedLocks:
        return self._locks

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        return {
            "id": order.id,
            "user_id": order.user_id,
            "company_id": order.company_id,
            "lunch_option_id": order.lunch_option_id,
            "date": order.date.isoformat(),
            "status": order.status.value,
            "unit_price": str(order.unit_price.amount),
            "subsidized_price": str(order.subsidized_price.amount),
            "currency": order.unit_price.currency,
            "approved_by": order.approved_by,
            "created_at": order.created_at.isoformat(),
            "updated_at": order.updated_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        currency = raw.get("currency", "USD")
        created_at = datetime.fromisoformat(raw["created_at"])
        return Order(
            id=raw["id"],
            user_id=raw["user_id"],
            company_id=raw["company_id"],
            lunch_option_id=raw["lunch_option_id"],
            date=date.fromisoformat(raw["date"]),
            unit_price=Money(Decimal(raw["unit_price"]), currency),
            subsidized_price=Money(Decimal(raw["subsidized_price"]), currency),
            status=OrderStatus(raw["status"]),
            approved_by=raw.get("approved_by"),
            created_at=created_at,
            updated_at=datetime.fromisoformat(raw.get("updated_at") or raw["created_at"]),
        )

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        with self._file_lock:
            return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, orders: list[dict]) -> None:
        self._file_path.write_text(
            json.dumps(orders, indent=2) + "\n", encoding="utf-8"
        )
        logger.debug("Wrote %d orders to %s", len(orders), self._file_path)

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
