"""Unit tests for the pricing policy."""

from decimal import Decimal

import pytest

from mealorder.domain.exceptions import InvalidConfigurationError
from mealorder.domain.model.subsidy import SubsidyConfig, SubsidyType
from mealorder.domain.model.value_objects import Money
from mealorder.domain.service.pricing import (
    compute_subsidized_price,
    effective_subsidy,
)


class TestComputeSubsidizedPrice:

    def test_fixed_never_goes_negative(self):
        result = compute_subsidized_price(Money.of("20.00"), SubsidyConfig.fixed("25.00"))
        assert result == Money.of("0.00")

    def test_fixed_partial_offset(self):
        result = compute_subsidized_price(Money.of("12.00"), SubsidyConfig.fixed("5.00"))
        assert result == Money.of("7.00")

    def test_half_off(self):
        result = compute_subsidized_price(Money.of("20.00"), SubsidyConfig.percentage("50"))
        assert result == Money.of("10.00")

    def test_no_config_is_list_price(self):
        assert compute_subsidized_price(Money.of("20.00"), None) == Money.of("20.00")

    def test_thirty_percent_of_twelve(self):
        result = compute_subsidized_price(Money.of("12.00"), SubsidyConfig.percentage("30"))
        assert result.amount == Decimal("8.40")

    def test_full_subsidy_is_free(self):
        result = compute_subsidized_price(Money.of("9.99"), SubsidyConfig.percentage("100"))
        assert result == Money.of("0")

    def test_rounds_half_up_to_cents(self):
        # 10.05 * 0.85 = 8.5425
        result = compute_subsidized_price(Money.of("10.05"), SubsidyConfig.percentage("15"))
        assert result.amount == Decimal("8.54")
        # 0.05 * 0.5 = 0.025
        result = compute_subsidized_price(Money.of("0.05"), SubsidyConfig.percentage("50"))
        assert result.amount == Decimal("0.03")

    def test_result_has_two_decimal_places(self):
        result = compute_subsidized_price(Money.of("20"), None)
        assert result.amount.as_tuple().exponent == -2

    def test_keeps_currency(self):
        result = compute_subsidized_price(
            Money(Decimal("10"), "EUR"), SubsidyConfig.percentage("10")
        )
        assert result.currency == "EUR"

    def test_invalid_config_is_reported_not_clamped(self):
        # Bypass the constructor the way a corrupted snapshot would.
        config = SubsidyConfig.percentage("10")
        object.__setattr__(config, "percentage_value", Decimal("150"))
        with pytest.raises(InvalidConfigurationError):
            compute_subsidized_price(Money.of("10"), config)

    def test_does_not_mutate_config(self):
        config = SubsidyConfig.percentage("30")
        compute_subsidized_price(Money.of("12"), config)
        assert config.percentage_value == Decimal("30")


class TestEffectiveSubsidy:

    def test_employee_override_replaces_company(self):
        company = SubsidyConfig.percentage("30")
        employee = SubsidyConfig.fixed("2")
        assert effective_subsidy(company, employee) is employee

    def test_falls_back_to_company(self):
        company = SubsidyConfig.percentage("30")
        assert effective_subsidy(company, None) is company

    def test_none_when_nothing_configured(self):
        assert effective_subsidy(None, None) is None

    def test_override_type_is_not_merged(self):
        result = effective_subsidy(SubsidyConfig.fixed("3"), SubsidyConfig.percentage("10"))
        assert result.subsidy_type is SubsidyType.PERCENTAGE
        assert result.fixed_value == Decimal("0")
