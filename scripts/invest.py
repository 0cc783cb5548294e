#!/usr/bin/env python3
"""Investment planning CLI tool.

Runs the investment strategy against a saved marketplace snapshot in dry-run
mode and shows what would be invested.

Examples:
    # Show ratings ordered by how far they are below target
    python scripts/invest.py rank \\
        --strategy config/strategy.yaml --marketplace config/marketplace.yaml

    # Show the investments a strategy-driven run would make
    python scripts/invest.py plan \\
        --strategy config/strategy.yaml --marketplace config/marketplace.yaml

    # Only consider A and B loans
    python scripts/invest.py plan --ratings '["A", "B"]'

    # Dry run a single investment of 400 into loan 101
    python scripts/invest.py invest --loan-id 101 --amount 400
"""

import sys
from decimal import Decimal
from typing import List, Optional

import click
from rich.console import Console
from rich.table import Table

from autolend.investing.investor import Investor
from autolend.remote.api import SnapshotMarketplace
from autolend.remote.entities import Investment, Loan
from autolend.remote.ratings import RatingSet
from autolend.strategy.loader import strategy_from_config
from autolend.utils.config import Config
from autolend.utils.exceptions import AutolendError
from autolend.utils.logging import setup_logging, setup_logging_from_config

console = Console()

DEFAULT_STRATEGY = "config/strategy.yaml"
DEFAULT_MARKETPLACE = "config/marketplace.yaml"


def create_investments_table(investments: List[Investment], loans: List[Loan]) -> Table:
    """Create table of investments made during a run.

    Args:
        investments: Investments in submission order
        loans: Loans of the snapshot, for names and terms

    Returns:
        Rich Table with one row per investment
    """
    by_id = {loan.id: loan for loan in loans}

    table = Table(title="Planned Investments", show_header=True, header_style="bold magenta")
    table.add_column("#", justify="right")
    table.add_column("Loan", justify="right")
    table.add_column("Name")
    table.add_column("Rating")
    table.add_column("Term", justify="right")
    table.add_column("Amount", justify="right", style="green")

    for index, investment in enumerate(investments, start=1):
        loan = by_id.get(investment.loan_id)
        table.add_row(
            str(index),
            str(investment.loan_id),
            loan.name if loan else "",
            investment.rating.name,
            f"{loan.term_in_months}m" if loan else "",
            f"{investment.amount:,.0f}",
        )

    total = sum((i.amount for i in investments), Decimal(0))
    table.add_section()
    table.add_row("", "", "Total", "", "", f"{total:,.0f}")
    return table


def load_inputs(strategy_file: str, marketplace_file: str, log_level: Optional[str]):
    """Load configuration, set up logging and build strategy and marketplace."""
    config = Config.from_file(strategy_file)
    setup_logging_from_config(config, level=log_level, stream=sys.stderr)
    strategy = strategy_from_config(config)
    marketplace = SnapshotMarketplace.from_file(marketplace_file)
    return strategy, marketplace


@click.group()
def cli():
    """autolend investment planning tool"""
    pass


@cli.command()
@click.option("--strategy", "strategy_file", default=DEFAULT_STRATEGY, help="Strategy YAML file")
@click.option("--marketplace", "marketplace_file", default=DEFAULT_MARKETPLACE, help="Snapshot YAML file")
@click.option("--log-level", default=None, help="Logging level (overrides the strategy file)")
def rank(strategy_file: str, marketplace_file: str, log_level: Optional[str]):
    """Show ratings ordered by demand."""
    try:
        strategy, marketplace = load_inputs(strategy_file, marketplace_file, log_level)
    except (AutolendError, FileNotFoundError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        sys.exit(1)

    portfolio = marketplace.get_portfolio()
    table = Table(title="Ratings by Demand", show_header=True, header_style="bold magenta")
    table.add_column("Rating")
    table.add_column("Target", justify="right")
    table.add_column("Current", justify="right")
    table.add_column("Demand", justify="right", style="green")

    for rating in strategy.rank_ratings_by_demand(portfolio.shares_on_investment):
        target = strategy.strategies[rating].target_share
        current = portfolio.share_of(rating)
        table.add_row(rating.name, f"{target:.1%}", f"{current:.1%}", f"{target - current:.1%}")

    console.print(table)


@cli.command()
@click.option("--strategy", "strategy_file", default=DEFAULT_STRATEGY, help="Strategy YAML file")
@click.option("--marketplace", "marketplace_file", default=DEFAULT_MARKETPLACE, help="Snapshot YAML file")
@click.option("--ratings", default=None, help='Only consider these ratings, e.g. \'["A", "B"]\'')
@click.option("--log-level", default=None, help="Logging level (overrides the strategy file)")
def plan(
    strategy_file: str,
    marketplace_file: str,
    ratings: Optional[str],
    log_level: Optional[str],
):
    """Dry run the strategy and show the investments it would make."""
    try:
        strategy, marketplace = load_inputs(strategy_file, marketplace_file, log_level)
        allowed = RatingSet.parse(ratings) if ratings else RatingSet.all()
    except (AutolendError, FileNotFoundError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        sys.exit(1)

    loans = [loan for loan in marketplace.get_loans() if loan.rating in allowed]
    portfolio = marketplace.get_portfolio()

    console.print(f"Ratings:   {allowed}")
    console.print(f"Loans:     {len(loans)}")
    console.print(f"Balance:   {portfolio.available_balance:,.0f}")
    console.print(f"Invested:  {portfolio.total_invested:,.0f}")
    console.print()

    investor = Investor(marketplace, portfolio, strategy, dry_run=True)
    investments = investor.invest_using_strategy(loans)

    if not investments:
        console.print("[yellow]Nothing to invest this cycle.[/yellow]")
        return

    console.print(create_investments_table(investments, loans))
    console.print(f"Balance left: {investor.portfolio.available_balance:,.0f}")


@cli.command()
@click.option("--marketplace", "marketplace_file", default=DEFAULT_MARKETPLACE, help="Snapshot YAML file")
@click.option("--loan-id", type=int, required=True, help="Loan to invest into")
@click.option("--amount", type=int, required=True, help="Amount to invest")
@click.option("--log-level", default="WARNING", help="Logging level")
def invest(marketplace_file: str, loan_id: int, amount: int, log_level: str):
    """Dry run a single user-chosen investment."""
    setup_logging(level=log_level, stream=sys.stderr)
    try:
        marketplace = SnapshotMarketplace.from_file(marketplace_file)
        investor = Investor(marketplace, marketplace.get_portfolio(), dry_run=True)
        investment = investor.invest_into(loan_id, amount)
    except (AutolendError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        sys.exit(1)

    if investment is None:
        console.print(f"[yellow]Investment into loan {loan_id} was rejected.[/yellow]")
        sys.exit(1)

    console.print(
        f"[bold green]Would invest {investment.amount:,.0f} into loan {loan_id} "
        f"({investment.rating.name}).[/bold green]"
    )
    console.print(f"Balance left: {investor.portfolio.available_balance:,.0f}")


if __name__ == "__main__":
    cli()
