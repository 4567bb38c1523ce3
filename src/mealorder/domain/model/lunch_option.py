"""LunchOption aggregate — a menu item offered by a food provider.

Menu items live independently of orders. Their price may change at any
time; orders keep the price snapshot they captured when they were placed.
"""

from __future__ import annotations

from dataclasses import dataclass

from mealorder.domain.exceptions import ValidationError
from mealorder.domain.model.value_objects import Money


@dataclass
class LunchOption:

    id: str
    name: str
    price: Money
    available: bool = True
    provider_id: str | None = None

    def update_price(self, new_price: Money) -> None:
        """Change the list price.

        This does NOT affect any existing orders because orders
        capture a price snapshot at creation time.
        """
        self.price = new_price

    def set_available(self, available: bool) -> None:
        self.available = available

    def ensure_orderable(self) -> None:
        if not self.available:
            raise ValidationError(f"Lunch option '{self.name}' is not available")
