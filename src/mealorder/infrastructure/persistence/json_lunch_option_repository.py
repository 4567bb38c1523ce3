"""JSON-file-backed implementation of LunchOptionRepository."""

from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path

from mealorder.domain.model.lunch_option import LunchOption
from mealorder.domain.model.value_objects import Money
from mealorder.domain.repository.lunch_option_repository import LunchOptionRepository


class JsonLunchOptionRepository(LunchOptionRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    # --- LunchOptionRepository interface --------------------------------------

    def get_by_id(self, option_id: str) -> LunchOption | None:
        return self._load().get(option_id)

    def get_by_name(self, name: str) -> LunchOption | None:
        for option in self._load().values():
            if option.name.lower() == name.lower():
                return option
        return None

    def list_all(self) -> list[LunchOption]:
        return list(self._load().values())

    def save(self, option: LunchOption) -> None:
        options = self._load()
        options[option.id] = option
        self._persist(options)

    # --- Serialization helpers ------------------------------------------------

    def _load(self) -> dict[str, LunchOption]:
        raw = json.loads(self._file_path.read_text(encoding="utf-8"))
        return {
            item["id"]: LunchOption(
                id=item["id"],
                name=item["name"],
                price=Money(Decimal(item["price"]), item.get("currency", "USD")),
                available=item.get("available", True),
                provider_id=item.get("provider_id"),
            )
            for item in raw
        }

    def _persist(self, options: dict[str, LunchOption]) -> None:
        raw = [
            {
                "id": o.id,
                "name": o.name,
                "price": str(o.price.amount),
                "currency": o.price.currency,
                "available": o.available,
                "provider_id": o.provider_id,
            }
            for o in options.values()
        ]
        self._file_path.write_text(
            json.dumps(raw, indent=2) + "\n", encoding="utf-8"
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
