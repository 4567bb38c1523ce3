"""Application services: menu management (add / update / list lunch options)."""

from __future__ import annotations

import logging

from mealorder.application.dto import LunchOptionDTO
from mealorder.domain.exceptions import EntityNotFoundError, ValidationError
from mealorder.domain.model.lunch_option import LunchOption
from mealorder.domain.model.value_objects import Money
from mealorder.domain.repository.lunch_option_repository import LunchOptionRepository

logger = logging.getLogger(__name__)


def _to_dto(option: LunchOption) -> LunchOptionDTO:
    return LunchOptionDTO(
        id=option.id,
        name=option.name,
        price=str(option.price),
        available=option.available,
        provider_id=option.provider_id,
    )


class AddLunchOptionHandler:

    def __init__(self, lunch_option_repo: LunchOptionRepository) -> None:
        self._lunch_option_repo = lunch_option_repo

    def handle(
        self,
        name: str,
        price: str,
        provider_id: str | None = None,
        available: bool = True,
    ) -> LunchOptionDTO:
        """Add a new menu item."""
        if not name or not name.strip():
            raise ValidationError("Lunch option name is required")

        existing = self._lunch_option_repo.get_by_name(name.strip())
        if existing is not None:
            raise ValidationError(f"Lunch option '{name}' already exists")

        # Auto-assign ID based on existing options
        all_options = self._lunch_option_repo.list_all()
        next_id = str(
            max((int(o.id) for o in all_options if o.id.isdigit()), default=0) + 1
        )

        option = LunchOption(
            id=next_id,
            name=name.strip(),
            price=Money.of(price),
            available=available,
            provider_id=provider_id,
        )
        self._lunch_option_repo.save(option)
        logger.info("Lunch option %s '%s' added at %s", option.id, option.name, option.price)
        return _to_dto(option)


class UpdateLunchOptionHandler:

    def __init__(self, lunch_option_repo: LunchOptionRepository) -> None:
        self._lunch_option_repo = lunch_option_repo

    def handle(
        self,
        option_id: str,
        new_price: str | None = None,
        available: bool | None = None,
    ) -> LunchOptionDTO:
        """Update a menu item's price and/or availability.

        This does NOT affect any existing orders; they captured a
        price snapshot at creation time.
        """
        option = self._lunch_option_repo.get_by_id(option_id)
        if option is None:
            raise EntityNotFoundError(f"Lunch option with ID '{option_id}' not found")

        if new_price is not None:
            option.update_price(Money.of(new_price))
        if available is not None:
            option.set_available(available)
        self._lunch_option_repo.save(option)
        logger.info("Lunch option %s updated", option.id)
        return _to_dto(option)


class ListLunchOptionsHandler:

    def __init__(self, lunch_option_repo: LunchOptionRepository) -> None:
        self._lunch_option_repo = lunch_option_repo

    def handle(self, available_only: bool = False) -> list[LunchOptionDTO]:
        options = self._lunch_option_repo.list_all()
        if available_only:
            options = [o for o in options if o.available]
        return [_to_dto(o) for o in options]
