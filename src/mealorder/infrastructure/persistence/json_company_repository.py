"""JSON-file-backed implementation of CompanyRepository.

Subsidy rules are stored with their type, ``{"type": "percentage",
"value": "30"}``, so a zero rule survives a round trip. Records written
by the hosted database instead carry one ``subsidy_percentage`` and one
``fixed_subsidy_amount`` column; those are still read.
"""

from __future__ import annotations

import json
from decimal import Decimal, InvalidOperation
from pathlib import Path

from mealorder.domain.exceptions import InvalidConfigurationError
from mealorder.domain.model.company import Company
from mealorder.domain.model.subsidy import SubsidyConfig, SubsidyType
from mealorder.domain.repository.company_repository import CompanyRepository


class JsonCompanyRepository(CompanyRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    # --- CompanyRepository interface ------------------------------------------

    def get_by_id(self, company_id: str) -> Company | None:
        for raw in self._load_raw():
            if raw["id"] == company_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Company]:
        return [self._to_domain(raw) for raw in self._load_raw()]

    def list_by_provider(self, provider_id: str) -> list[Company]:
        return [
            self._to_domain(raw)
            for raw in self._load_raw()
            if raw.get("provider_id") == provider_id
        ]

    def save(self, company: Company) -> None:
        records = self._load_raw()
        replaced = False
        for i, raw in enumerate(records):
            if raw["id"] == company.id:
                records[i] = self._to_raw(company)
                replaced = True
                break
        if not replaced:
            records.append(self._to_raw(company))
        self._persist_raw(records)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _subsidy_to_raw(config: SubsidyConfig | None) -> dict | None:
        if config is None:
            return None
        if config.subsidy_type is SubsidyType.FIXED:
            value = config.fixed_value
        else:
            value = config.percentage_value
        return {"type": config.subsidy_type.value, "value": str(value)}

    @staticmethod
    def _subsidy_to_domain(raw: dict | None) -> SubsidyConfig | None:
        if raw is None:
            return None
        try:
            subsidy_type = SubsidyType(raw["type"])
            value = Decimal(str(raw["value"]))
        except (KeyError, ValueError, InvalidOperation) as exc:
            raise InvalidConfigurationError("subsidy", raw) from exc
        if subsidy_type is SubsidyType.FIXED:
            return SubsidyConfig(subsidy_type, fixed_value=value)
        return SubsidyConfig(subsidy_type, percentage_value=value)

    @staticmethod
    def _legacy_subsidy(raw: dict) -> SubsidyConfig | None:
        return SubsidyConfig.from_company_fields(
            raw.get("subsidy_percentage") or "0",
            raw.get("fixed_subsidy_amount") or "0",
        )

    @classmethod
    def _to_raw(cls, company: Company) -> dict:
        return {
            "id": company.id,
            "name": company.name,
            "provider_id": company.provider_id,
            "subsidy": cls._subsidy_to_raw(company.subsidy),
            "employee_overrides": {
                user_id: cls._subsidy_to_raw(config)
                for user_id, config in company.employee_overrides.items()
            },
        }

    @classmethod
    def _to_domain(cls, raw: dict) -> Company:
        if "subsidy" in raw:
            subsidy = cls._subsidy_to_domain(raw["subsidy"])
        else:
            subsidy = cls._legacy_subsidy(raw)

        overrides: dict[str, SubsidyConfig] = {}
        for user_id, fields in raw.get("employee_overrides", {}).items():
            config = cls._subsidy_to_domain(fields)
            if config is not None:
                overrides[user_id] = config
        return Company(
            id=raw["id"],
            name=raw["name"],
            provider_id=raw.get("provider_id"),
            subsidy=subsidy,
            employee_overrides=overrides,
        )

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, records: list[dict]) -> None:
        self._file_path.write_text(
            json.dumps(records, indent=2) + "\n", encoding="utf-8"
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
