"""Abstract repository for LunchOption aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (JSON, SQL, in-memory)
live in the infrastructure layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from mealorder.domain.model.lunch_option import LunchOption


class LunchOptionRepository(ABC):

    @abstractmethod
    def get_by_id(self, option_id: str) -> LunchOption | None:
        """Return a menu item by its ID, or None if not found."""

    @abstractmethod
    def get_by_name(self, name: str) -> LunchOption | None:
        """Return a menu item by its name (case-insensitive), or None."""

    @abstractmethod
    def list_all(self) -> list[LunchOption]:
        """Return every menu item, available or not."""

    @abstractmethod
    def save(self, option: LunchOption) -> None:
        """Persist a new or updated menu item."""
