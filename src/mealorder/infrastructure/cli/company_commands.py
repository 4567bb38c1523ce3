"""CLI commands for client companies and subsidy settings."""

from __future__ import annotations

import click

from mealorder.application.manage_companies import (
    AddCompanyHandler,
    ConfigureSubsidyHandler,
    ListCompaniesHandler,
)
from mealorder.domain.exceptions import DomainException
from mealorder.domain.model.role import Role
from mealorder.infrastructure.bootstrap import company_repository


@click.command("add")
@click.option("--name", required=True, help="Company name.")
@click.option("--provider", "provider_id", default=None, help="Meal provider serving it.")
def company_add(name: str, provider_id: str | None) -> None:
    """Register a client company."""
    handler = AddCompanyHandler(company_repo=company_repository())

    try:
        company = handler.handle(name=name, provider_id=provider_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Company #{company.id} '{company.name}' added")


@click.command("list")
@click.option("--provider", "provider_id", default=None, help="Only this provider's companies.")
def company_list(provider_id: str | None) -> None:
    """List client companies and their subsidies."""
    handler = ListCompaniesHandler(company_repo=company_repository())
    companies = handler.handle(provider_id=provider_id)

    if not companies:
        click.echo("No companies found.")
        return

    click.echo(f"{'ID':<6} {'Name':<24} {'Provider':<12} {'Subsidy':<14} {'Overrides':>9}")
    click.echo("-" * 70)
    for c in companies:
        click.echo(
            f"{c.id:<6} {c.name:<24} {c.provider_id or '-':<12} {c.subsidy:<14} {len(c.overrides):>9}"
        )


@click.command("subsidy")
@click.option("--id", "company_id", required=True, help="Company ID.")
@click.option("--role", required=True,
              type=click.Choice([r.value for r in Role], case_sensitive=False),
              help="Acting role.")
@click.option("--percentage", default=None, help="Percentage off the list price (0-100).")
@click.option("--fixed", default=None, help="Fixed amount off the list price.")
@click.option("--clear", is_flag=True, default=False, help="Remove the subsidy.")
@click.option("--employee", "employee_id", default=None,
              help="Apply to one employee instead of the whole company.")
def company_subsidy(
    company_id: str,
    role: str,
    percentage: str | None,
    fixed: str | None,
    clear: bool,
    employee_id: str | None,
) -> None:
    """Set or clear a company's (or one employee's) subsidy."""
    handler = ConfigureSubsidyHandler(company_repo=company_repository())

    try:
        company = handler.handle(
            company_id=company_id,
            acting_role=role,
            percentage=percentage,
            fixed=fixed,
            employee_id=employee_id,
            clear=clear,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if employee_id:
        rule = company.overrides.get(employee_id, "company default")
        click.echo(f"Subsidy for employee {employee_id} at '{company.name}': {rule}")
    else:
        click.echo(f"Subsidy for '{company.name}': {company.subsidy}")
