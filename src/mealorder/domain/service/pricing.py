"""Pricing policy: what an employee actually pays for a meal.

Pure functions, no I/O. Callers fetch the subsidy configuration once and
pass the snapshot in; nothing here reads shared state.
"""

from __future__ import annotations

from decimal import Decimal

from mealorder.domain.model.subsidy import SubsidyConfig, SubsidyType
from mealorder.domain.model.value_objects import Money

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


def effective_subsidy(
    company_config: SubsidyConfig | None,
    employee_config: SubsidyConfig | None,
) -> SubsidyConfig | None:
    """An employee-level override, if present, replaces the company rule."""
    if employee_config is not None:
        return employee_config
    return company_config


def compute_subsidized_price(list_price: Money, config: SubsidyConfig | None) -> Money:
    """Apply *config* to *list_price*.

    - fixed:      max(0, price - fixed_value)
    - percentage: price * (1 - percentage_value / 100)
    - none:       price

    The result is clamped to be non-negative and rounded half-up to cents.
    An out-of-range configuration raises ``InvalidConfigurationError``;
    only the computed result is clamped, never the configuration.
    """
    if config is not None:
        config.validate()

    if config is None:
        amount = list_price.amount
    elif config.subsidy_type is SubsidyType.FIXED:
        amount = list_price.amount - config.fixed_value
    else:
        amount = list_price.amount * (1 - config.percentage_value / _HUNDRED)

    return Money(max(_ZERO, amount), list_price.currency).rounded()
