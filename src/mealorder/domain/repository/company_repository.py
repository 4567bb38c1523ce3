"""Abstract repository for Company aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from mealorder.domain.model.company import Company


class CompanyRepository(ABC):

    @abstractmethod
    def get_by_id(self, company_id: str) -> Company | None:
        """Return a company by its ID, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Company]:
        """Return every company."""

    @abstractmethod
    def list_by_provider(self, provider_id: str) -> list[Company]:
        """Return the companies served by a provider."""

    @abstractmethod
    def save(self, company: Company) -> None:
        """Persist a new or updated company."""
