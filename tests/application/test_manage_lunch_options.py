"""Tests for menu management."""

import pytest

from mealorder.application.manage_lunch_options import (
    AddLunchOptionHandler,
    ListLunchOptionsHandler,
    UpdateLunchOptionHandler,
)
from mealorder.domain.exceptions import EntityNotFoundError, ValidationError
from mealorder.domain.model.lunch_option import LunchOption
from mealorder.domain.model.value_objects import Money
from tests.fakes import FakeLunchOptionRepository


def _repo() -> FakeLunchOptionRepository:
    return FakeLunchOptionRepository([
        LunchOption(id="1", name="Pasta", price=Money.of("12.00")),
        LunchOption(id="2", name="Stew", price=Money.of("11.00"), available=False),
    ])


class TestAddLunchOption:

    def test_adds_with_next_id(self):
        repo = _repo()
        dto = AddLunchOptionHandler(repo).handle("Salad", "9.50", provider_id="p1")
        assert dto.id == "3"
        assert dto.price == "$9.50"
        assert repo.get_by_id("3").provider_id == "p1"

    def test_empty_menu_starts_at_one(self):
        dto = AddLunchOptionHandler(FakeLunchOptionRepository()).handle("Soup", "5")
        assert dto.id == "1"

    def test_duplicate_name_rejected(self):
        with pytest.raises(ValidationError, match="already exists"):
            AddLunchOptionHandler(_repo()).handle("pasta", "10")

    def test_bad_price_rejected(self):
        with pytest.raises(ValidationError):
            AddLunchOptionHandler(_repo()).handle("Salad", "-1")


class TestUpdateLunchOption:

    def test_update_price(self):
        repo = _repo()
        dto = UpdateLunchOptionHandler(repo).handle("1", new_price="13.50")
        assert dto.price == "$13.50"

    def test_toggle_availability(self):
        repo = _repo()
        dto = UpdateLunchOptionHandler(repo).handle("2", available=True)
        assert dto.available is True

    def test_unknown_option(self):
        with pytest.raises(EntityNotFoundError):
            UpdateLunchOptionHandler(_repo()).handle("9", new_price="1")


class TestListLunchOptions:

    def test_available_only(self):
        names = [o.name for o in ListLunchOptionsHandler(_repo()).handle(available_only=True)]
        assert names == ["Pasta"]

    def test_everything(self):
        assert len(ListLunchOptionsHandler(_repo()).handle()) == 2
