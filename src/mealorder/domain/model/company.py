"""Company aggregate — a client company served by a food provider.

The company owns its subsidy configuration and any per-employee
overrides. Orders only ever read a snapshot of it.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from mealorder.domain.exceptions import ValidationError
from mealorder.domain.model.subsidy import SubsidyConfig
from mealorder.domain.service.pricing import effective_subsidy


@dataclass
class Company:

    id: str
    name: str
    provider_id: str | None = None
    subsidy: SubsidyConfig | None = None
    employee_overrides: dict[str, SubsidyConfig] = field(default_factory=dict)

    def subsidy_for(self, user_id: str) -> SubsidyConfig | None:
        """Return the rule that applies to *user_id*.

        An employee override fully replaces the company rule.
        """
        return effective_subsidy(self.subsidy, self.employee_overrides.get(user_id))

    def configure_subsidy(self, config: SubsidyConfig | None) -> None:
        self.subsidy = config

    def set_employee_override(self, user_id: str, config: SubsidyConfig) -> None:
        if not user_id or not user_id.strip():
            raise ValidationError("Employee id is required for a subsidy override")
        self.employee_overrides[user_id.strip()] = config

    def clear_employee_override(self, user_id: str) -> None:
        self.employee_overrides.pop(user_id, None)
