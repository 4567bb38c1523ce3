import click

from mealorder.domain.exceptions import DomainException
from mealorder.infrastructure.bootstrap import configure_logging, set_data_dir
from mealorder.infrastructure.cli.company_commands import (
    company_add,
    company_list,
    company_subsidy,
)
from mealorder.infrastructure.cli.lunch_option_commands import (
    menu_add,
    menu_list,
    menu_update,
)
from mealorder.infrastructure.cli.order_commands import (
    order_approve,
    order_create,
    order_deliver,
    order_list,
    order_prepare,
    order_reject,
    order_revert,
    order_show,
    order_transition,
)
from mealorder.infrastructure.cli.report_commands import (
    report_companies,
    report_daily,
    report_provider,
)


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log debug output.")
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory holding the JSON data files.",
)
def cli(verbose: bool, data_dir: str | None) -> None:
    """Meal ordering: daily orders, approvals and subsidies."""
    try:
        configure_logging(verbose)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    set_data_dir(data_dir)


@cli.group()
def order() -> None:
    """Place and move daily meal orders."""


@cli.group()
def menu() -> None:
    """Manage lunch options."""


@cli.group()
def company() -> None:
    """Manage client companies and subsidies."""


@cli.group()
def report() -> None:
    """Dashboard reports."""


# Register subcommands
order.add_command(order_create)
order.add_command(order_show)
order.add_command(order_list)
order.add_command(order_approve)
order.add_command(order_reject)
order.add_command(order_prepare)
order.add_command(order_deliver)
order.add_command(order_revert)
order.add_command(order_transition)
menu.add_command(menu_add)
menu.add_command(menu_list)
menu.add_command(menu_update)
company.add_command(company_add)
company.add_command(company_list)
company.add_command(company_subsidy)
report.add_command(report_daily)
report.add_command(report_provider)
report.add_command(report_companies)
