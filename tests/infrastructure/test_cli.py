"""End-to-end tests of the click CLI against JSON files in tmp_path."""

import re

import pytest
from click.testing import CliRunner

from mealorder.infrastructure.cli.main import cli


@pytest.fixture
def run(tmp_path):
    runner = CliRunner()

    def _run(*args: str):
        return runner.invoke(cli, ["--data-dir", str(tmp_path), *args])

    return _run


@pytest.fixture
def seeded(run):
    assert run("company", "add", "--name", "Acme", "--provider", "p1").exit_code == 0
    assert run(
        "company", "subsidy", "--id", "1", "--role", "supervisor", "--percentage", "30"
    ).exit_code == 0
    assert run("menu", "add", "--name", "Pasta", "--price", "12.00", "--provider", "p1").exit_code == 0
    return run


def _create(run, user: str = "emp-1", option: str = "1") -> str:
    result = run(
        "order", "create", "--user", user, "--company", "1",
        "--option", option, "--date", "2024-05-02",
    )
    assert result.exit_code == 0, result.output
    return re.search(r"Order #(\w+) saved", result.output).group(1)


class TestOrderCommands:

    def test_create_prints_prices(self, seeded):
        result = seeded(
            "order", "create", "--user", "emp-1", "--company", "1",
            "--option", "1", "--date", "2024-05-02",
        )
        assert result.exit_code == 0
        assert "status=pending" in result.output
        assert "Pasta: $12.00, employee pays $8.40" in result.output

    def test_full_lifecycle(self, seeded):
        order_id = _create(seeded)
        steps = [
            ("approve", "sup-1", "supervisor", "approved"),
            ("prepare", "prov-1", "provider", "prepared"),
            ("revert", "prov-1", "provider", "approved"),
            ("prepare", "prov-1", "provider", "prepared"),
            ("deliver", "prov-1", "provider", "delivered"),
        ]
        for command, user, role, status in steps:
            result = seeded("order", command, "--id", order_id, "--user", user, "--role", role)
            assert result.exit_code == 0, result.output
            assert f"is {status}" in result.output

        shown = seeded("order", "show", "--id", order_id)
        assert "status=delivered" in shown.output
        assert "Approved: sup-1" in shown.output

    def test_show_includes_subsidy(self, seeded):
        shown = seeded("order", "show", "--id", _create(seeded))
        assert shown.exit_code == 0, shown.output
        assert "Price:    $12.00  (employee pays $8.40)" in shown.output
        assert "Subsidy:  $3.60" in shown.output

    def test_domain_errors_become_click_errors(self, seeded):
        order_id = _create(seeded)
        result = seeded("order", "approve", "--id", order_id, "--user", "emp-1", "--role", "employee")
        assert result.exit_code == 1
        assert "Role 'employee' may not move an order" in result.output

    def test_invalid_transition(self, seeded):
        order_id = _create(seeded)
        result = seeded(
            "order", "transition", "--id", order_id, "--to", "delivered",
            "--user", "prov-1", "--role", "provider",
        )
        assert result.exit_code == 1
        assert "Invalid transition: pending -> delivered" in result.output

    def test_revert_requires_prepared(self, seeded):
        order_id = _create(seeded)
        result = seeded("order", "revert", "--id", order_id, "--user", "prov-1", "--role", "provider")
        assert result.exit_code == 1
        assert "Only prepared orders can be reverted" in result.output

    def test_list(self, seeded):
        _create(seeded, "emp-1")
        _create(seeded, "emp-2")
        result = seeded("order", "list", "--company", "1", "--date", "2024-05-02")
        assert "emp-1" in result.output
        assert "emp-2" in result.output

    def test_unknown_order(self, seeded):
        result = seeded("order", "show", "--id", "nope")
        assert result.exit_code == 1
        assert "not found" in result.output


class TestMenuAndCompanyCommands:

    def test_menu_list_and_update(self, seeded):
        assert seeded("menu", "update", "--id", "1", "--unavailable").exit_code == 0
        result = seeded("menu", "list")
        assert "Pasta" in result.output
        assert "no" in result.output
        assert "No lunch options found." in seeded("menu", "list", "--available").output

    def test_menu_update_needs_a_change(self, seeded):
        result = seeded("menu", "update", "--id", "1")
        assert result.exit_code == 2

    def test_company_list_shows_subsidy(self, seeded):
        result = seeded("company", "list")
        assert "Acme" in result.output
        assert "30%" in result.output

    def test_subsidy_role_gate(self, seeded):
        result = seeded("company", "subsidy", "--id", "1", "--role", "employee", "--fixed", "3")
        assert result.exit_code == 1
        assert "may not change subsidy" in result.output

    def test_subsidy_out_of_range(self, seeded):
        result = seeded("company", "subsidy", "--id", "1", "--role", "admin", "--percentage", "130")
        assert result.exit_code == 1
        assert "between 0 and 100" in result.output


class TestReportCommands:

    def test_daily(self, seeded):
        _create(seeded)
        result = seeded("report", "daily", "--company", "1", "--date", "2024-05-02")
        assert result.exit_code == 0, result.output
        assert "Orders:        1" in result.output
        assert "Pasta" in result.output

    def test_provider(self, seeded):
        order_id = _create(seeded)
        seeded("order", "approve", "--id", order_id, "--user", "sup-1", "--role", "supervisor")
        result = seeded("report", "provider", "--provider", "p1", "--date", "2024-05-02")
        assert result.exit_code == 0, result.output
        assert "Orders today:     1" in result.output
        assert "Revenue this month: $12.00" in result.output

    def test_companies(self, seeded):
        _create(seeded)
        result = seeded("report", "companies", "--provider", "p1")
        assert "Acme" in result.output

    def test_companies_empty(self, seeded):
        assert "No orders found." in seeded("report", "companies").output
