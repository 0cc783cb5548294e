"""Snapshot of the investor's portfolio.

The overview answers three questions the strategy asks: how much money is
free to invest, how much has been invested so far, and how the invested
money is split between ratings.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Dict, Mapping

from autolend.remote.ratings import Rating


@dataclass(frozen=True)
class PortfolioOverview:
    """Current portfolio state.

    Attributes:
        available_balance: Money ready to be invested
        total_invested: Money committed to loans so far
        shares_on_investment: {rating: fraction of total_invested}
        timestamp: When this snapshot was taken
    """

    available_balance: Decimal
    total_invested: Decimal
    shares_on_investment: Mapping[Rating, Decimal] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now, compare=False)

    def __post_init__(self):
        """Validate portfolio state."""
        if self.total_invested < 0:
            raise ValueError(
                f"total_invested must be non-negative, got {self.total_invested}"
            )
        for rating, share in self.shares_on_investment.items():
            if not 0 <= share <= 1:
                raise ValueError(
                    f"share of {rating.name} must be in [0, 1], got {share}"
                )

    @classmethod
    def calculate(
        cls,
        balance: Decimal,
        invested_by_rating: Mapping[Rating, Decimal],
    ) -> "PortfolioOverview":
        """Build an overview from the amounts invested in each rating.

        Args:
            balance: Available balance
            invested_by_rating: {rating: money invested in loans of that rating}

        Returns:
            PortfolioOverview with totals and shares derived from the amounts

        Example:
            >>> overview = PortfolioOverview.calculate(
            ...     Decimal(1000), {Rating.A: Decimal(600), Rating.B: Decimal(400)}
            ... )
            >>> overview.share_of(Rating.A)
            Decimal('0.6')
        """
        total = sum(invested_by_rating.values(), Decimal(0))
        if total > 0:
            shares = {
                rating: amount / total
                for rating, amount in invested_by_rating.items()
            }
        else:
            shares = {rating: Decimal(0) for rating in invested_by_rating}
        return cls(
            available_balance=balance,
            total_invested=total,
            shares_on_investment=shares,
        )

    def share_of(self, rating: Rating) -> Decimal:
        """Current share of a rating, zero when not present."""
        return self.shares_on_investment.get(rating, Decimal(0))

    def invested_by_rating(self) -> Dict[Rating, Decimal]:
        """Money invested in each rating, derived from shares and total."""
        return {
            rating: share * self.total_invested
            for rating, share in self.shares_on_investment.items()
        }

    def after_investment(self, rating: Rating, amount: Decimal) -> "PortfolioOverview":
        """Return the overview as it will look after one more investment.

        Args:
            rating: Rating of the loan invested into
            amount: Money invested

        Returns:
            New PortfolioOverview; this one is left untouched
        """
        invested = self.invested_by_rating()
        invested[rating] = invested.get(rating, Decimal(0)) + amount
        return PortfolioOverview.calculate(self.available_balance - amount, invested)
