"""Platform roles."""

from __future__ import annotations

from enum import Enum

from mealorder.domain.exceptions import ValidationError


class Role(Enum):
    ADMIN = "admin"
    PROVIDER = "provider"
    COMPANY = "company"
    SUPERVISOR = "supervisor"
    EMPLOYEE = "employee"

    @staticmethod
    def parse(raw: str | Role) -> Role:
        if isinstance(raw, Role):
            return raw
        try:
            return Role(raw.strip().lower())
        except (ValueError, AttributeError) as exc:
            raise ValidationError(f"Unknown role: {raw!r}") from exc
