"""Subsidy configuration value object.

A company (and optionally a single employee) carries at most one active
subsidy rule: either a percentage discount or a flat amount off the list
price. The two are mutually exclusive.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum

from mealorder.domain.exceptions import InvalidConfigurationError

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


class SubsidyType(Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


@dataclass(frozen=True)
class SubsidyConfig:
    """Immutable snapshot of a subsidy rule.

    Invariants:
    - ``percentage_value`` is within [0, 100]
    - ``fixed_value`` is >= 0
    - the value of the inactive type is zero
    """

    subsidy_type: SubsidyType
    percentage_value: Decimal = _ZERO
    fixed_value: Decimal = _ZERO

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Raise InvalidConfigurationError unless every invariant holds."""
        if not isinstance(self.subsidy_type, SubsidyType):
            raise InvalidConfigurationError("subsidy_type", self.subsidy_type)
        for name in ("percentage_value", "fixed_value"):
            if not isinstance(getattr(self, name), Decimal):
                raise InvalidConfigurationError(
                    name,
                    getattr(self, name),
                    f"{name} must be a Decimal, got {type(getattr(self, name)).__name__}",
                )
            if not getattr(self, name).is_finite():
                raise InvalidConfigurationError(name, getattr(self, name))

        if not _ZERO <= self.percentage_value <= _HUNDRED:
            raise InvalidConfigurationError(
                "percentage_value",
                self.percentage_value,
                f"Subsidy percentage must be between 0 and 100, got {self.percentage_value}",
            )
        if self.fixed_value < _ZERO:
            raise InvalidConfigurationError(
                "fixed_value",
                self.fixed_value,
                f"Fixed subsidy cannot be negative, got {self.fixed_value}",
            )

        if self.subsidy_type is SubsidyType.PERCENTAGE and self.fixed_value != _ZERO:
            raise InvalidConfigurationError(
                "fixed_value",
                self.fixed_value,
                "A percentage subsidy cannot also carry a fixed amount",
            )
        if self.subsidy_type is SubsidyType.FIXED and self.percentage_value != _ZERO:
            raise InvalidConfigurationError(
                "percentage_value",
                self.percentage_value,
                "A fixed subsidy cannot also carry a percentage",
            )

    def __str__(self) -> str:
        if self.subsidy_type is SubsidyType.PERCENTAGE:
            return f"{self.percentage_value}%"
        return f"${self.fixed_value:.2f} off"

    # --- Factories ------------------------------------------------------------

    @staticmethod
    def percentage(value: str | int | float | Decimal) -> SubsidyConfig:
        return SubsidyConfig(
            SubsidyType.PERCENTAGE, percentage_value=_to_decimal("percentage_value", value)
        )

    @staticmethod
    def fixed(value: str | int | float | Decimal) -> SubsidyConfig:
        return SubsidyConfig(
            SubsidyType.FIXED, fixed_value=_to_decimal("fixed_value", value)
        )

    @staticmethod
    def from_company_fields(
        percentage: str | int | float | Decimal | None,
        fixed: str | int | float | Decimal | None,
    ) -> SubsidyConfig | None:
        """Build a config from the legacy two-column company record.

        A positive fixed amount wins over the percentage; when neither
        is positive there is no subsidy at all.
        """
        fixed_value = _to_decimal("fixed_value", fixed or 0)
        percentage_value = _to_decimal("percentage_value", percentage or 0)
        if fixed_value > _ZERO:
            return SubsidyConfig(SubsidyType.FIXED, fixed_value=fixed_value)
        if percentage_value > _ZERO:
            return SubsidyConfig(SubsidyType.PERCENTAGE, percentage_value=percentage_value)
        if fixed_value < _ZERO:
            raise InvalidConfigurationError("fixed_value", fixed_value)
        if percentage_value < _ZERO:
            raise InvalidConfigurationError("percentage_value", percentage_value)
        return None


def _to_decimal(field: str, value: str | int | float | Decimal) -> Decimal:
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise InvalidConfigurationError(field, value) from exc
