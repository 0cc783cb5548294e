"""Marketplace access used by the investor.

The investment strategy never talks to the marketplace; the investor does,
through the InvestingApi interface. Real implementations wrap an
authenticated HTTP session. SnapshotMarketplace serves a saved snapshot
from a YAML file and is used for dry runs and tests.
"""

import dataclasses
from abc import ABC, abstractmethod
from decimal import Decimal
from pathlib import Path
from typing import Dict, List

from autolend.portfolio.overview import PortfolioOverview
from autolend.remote.entities import Investment, Loan, to_decimal
from autolend.remote.ratings import Rating
from autolend.utils.config import Config
from autolend.utils.exceptions import (
    InvestmentRejectedError,
    MarketplaceError,
    RatingFormatError,
)
from autolend.utils.logging import get_logger

logger = get_logger(__name__)


class InvestingApi(ABC):
    """Abstract interface to an authenticated marketplace session."""

    @abstractmethod
    def get_loans(self) -> List[Loan]:
        """Fetch the loans currently open for investment.

        Raises:
            MarketplaceError: If the marketplace cannot be reached
        """
        pass

    @abstractmethod
    def get_portfolio(self) -> PortfolioOverview:
        """Fetch the current portfolio overview.

        Raises:
            MarketplaceError: If the marketplace cannot be reached
        """
        pass

    @abstractmethod
    def invest(self, investment: Investment) -> None:
        """Submit an investment.

        Raises:
            InvestmentRejectedError: If the marketplace refuses the investment
            MarketplaceError: If the marketplace cannot be reached
        """
        pass


class SnapshotMarketplace(InvestingApi):
    """Marketplace served from memory.

    Accepted investments reduce the loan's remaining amount and are kept in
    ``investments``. The portfolio is not updated; callers track it.

    Example:
        >>> marketplace = SnapshotMarketplace.from_file("config/marketplace.yaml")
        >>> loans = marketplace.get_loans()
    """

    def __init__(self, loans: List[Loan], portfolio: PortfolioOverview):
        self._loans: Dict[int, Loan] = {loan.id: loan for loan in loans}
        self._portfolio = portfolio
        self.investments: List[Investment] = []

    @classmethod
    def from_config(cls, config: Config) -> "SnapshotMarketplace":
        """Build the marketplace from ``loans`` and ``portfolio`` sections.

        Raises:
            MarketplaceError: If the snapshot is malformed
        """
        try:
            loans = [Loan.from_dict(record) for record in config.get("loans", [])]
            balance = to_decimal(config.get("portfolio.available_balance", 0))
            invested = {
                Rating.from_code(str(code)): to_decimal(amount)
                for code, amount in (config.get("portfolio.invested") or {}).items()
            }
        except (
            KeyError,
            TypeError,
            ValueError,
            ArithmeticError,
            RatingFormatError,
        ) as e:
            raise MarketplaceError(f"Malformed marketplace snapshot: {e}") from e

        logger.debug("Loaded snapshot with %d loans", len(loans))
        return cls(loans, PortfolioOverview.calculate(balance, invested))

    @classmethod
    def from_file(cls, filepath: str | Path) -> "SnapshotMarketplace":
        return cls.from_config(Config.from_file(filepath))

    def get_loans(self) -> List[Loan]:
        return [loan for loan in self._loans.values() if loan.remaining_investment > 0]

    def get_portfolio(self) -> PortfolioOverview:
        return self._portfolio

    def invest(self, investment: Investment) -> None:
        loan = self._loans.get(investment.loan_id)
        if loan is None:
            raise InvestmentRejectedError(f"Unknown loan {investment.loan_id}", investment)
        if investment.amount > loan.remaining_investment:
            raise InvestmentRejectedError(
                f"Loan {loan.id} has only {loan.remaining_investment} left, "
                f"asked for {investment.amount}",
                investment,
            )
        self._loans[loan.id] = dataclasses.replace(
            loan, remaining_investment=loan.remaining_investment - investment.amount
        )
        self.investments.append(investment)

    def total_invested(self) -> Decimal:
        return sum((i.amount for i in self.investments), Decimal(0))
