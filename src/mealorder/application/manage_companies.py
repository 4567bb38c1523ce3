"""Application services: client companies and their subsidy settings.

Subsidy changes never reach back into existing orders; each order holds
the price it was created with.
"""

from __future__ import annotations

import logging

from mealorder.application.dto import CompanyDTO
from mealorder.domain.exceptions import (
    EntityNotFoundError,
    InvalidConfigurationError,
    ValidationError,
)
from mealorder.domain.model.company import Company
from mealorder.domain.model.role import Role
from mealorder.domain.model.subsidy import SubsidyConfig
from mealorder.domain.repository.company_repository import CompanyRepository

logger = logging.getLogger(__name__)

# Roles allowed to change subsidy settings.
SUBSIDY_MANAGERS = frozenset({Role.ADMIN, Role.PROVIDER, Role.SUPERVISOR})


def company_to_dto(company: Company) -> CompanyDTO:
    return CompanyDTO(
        id=company.id,
        name=company.name,
        provider_id=company.provider_id,
        subsidy=str(company.subsidy) if company.subsidy else "none",
        overrides={user: str(cfg) for user, cfg in sorted(company.employee_overrides.items())},
    )


class AddCompanyHandler:

    def __init__(self, company_repo: CompanyRepository) -> None:
        self._company_repo = company_repo

    def handle(
        self,
        name: str,
        provider_id: str | None = None,
        subsidy: SubsidyConfig | None = None,
    ) -> CompanyDTO:
        if not name or not name.strip():
            raise ValidationError("Company name is required")
        if any(c.name.lower() == name.strip().lower() for c in self._company_repo.list_all()):
            raise ValidationError(f"Company '{name}' already exists")

        all_companies = self._company_repo.list_all()
        next_id = str(
            max((int(c.id) for c in all_companies if c.id.isdigit()), default=0) + 1
        )
        company = Company(
            id=next_id, name=name.strip(), provider_id=provider_id, subsidy=subsidy
        )
        self._company_repo.save(company)
        logger.info("Company %s '%s' added", company.id, company.name)
        return company_to_dto(company)


class ConfigureSubsidyHandler:

    def __init__(self, company_repo: CompanyRepository) -> None:
        self._company_repo = company_repo

    def handle(
        self,
        company_id: str,
        acting_role: str | Role,
        percentage: str | None = None,
        fixed: str | None = None,
        employee_id: str | None = None,
        clear: bool = False,
    ) -> CompanyDTO:
        """Set, replace or clear a company's (or one employee's) subsidy rule.

        Exactly one of *percentage*, *fixed* or *clear* must be given.
        """
        role = Role.parse(acting_role)
        if role not in SUBSIDY_MANAGERS:
            raise ValidationError(f"Role '{role.value}' may not change subsidy settings")

        chosen = [flag for flag in (percentage is not None, fixed is not None, clear) if flag]
        if len(chosen) != 1:
            raise InvalidConfigurationError(
                "subsidy_type",
                {"percentage": percentage, "fixed": fixed, "clear": clear},
                "Specify exactly one of a percentage, a fixed amount, or clear",
            )

        company = self._company_repo.get_by_id(company_id)
        if company is None:
            raise EntityNotFoundError(f"Company not found: '{company_id}'")

        config: SubsidyConfig | None = None
        if percentage is not None:
            config = SubsidyConfig.percentage(percentage)
        elif fixed is not None:
            config = SubsidyConfig.fixed(fixed)

        if employee_id:
            if config is None:
                company.clear_employee_override(employee_id)
            else:
                company.set_employee_override(employee_id, config)
        else:
            company.configure_subsidy(config)

        self._company_repo.save(company)
        logger.info(
            "Subsidy for company %s%s set to %s by %s",
            company.id,
            f" (employee {employee_id})" if employee_id else "",
            config or "none",
            role.value,
        )
        return company_to_dto(company)


class ListCompaniesHandler:

    def __init__(self, company_repo: CompanyRepository) -> None:
        self._company_repo = company_repo

    def handle(self, provider_id: str | None = None) -> list[CompanyDTO]:
        if provider_id:
            companies = self._company_repo.list_by_provider(provider_id)
        else:
            companies = self._company_repo.list_all()
        return [company_to_dto(c) for c in companies]
