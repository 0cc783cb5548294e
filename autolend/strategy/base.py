"""Abstract base class for investment strategies.

An investment strategy decides which marketplace loans are worth investing
in, in which order, and how much to put into each.

Responsibilities:
- Eligibility: Filter loans by per-rating rules
- Prioritisation: Prefer ratings the portfolio is short of
- Sizing: Recommend an amount per loan, in whole investment increments
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Sequence

from autolend.portfolio.overview import PortfolioOverview
from autolend.remote.entities import Loan

# Investments are only ever made in multiples of this amount.
MINIMAL_INVESTMENT_INCREMENT = 200


@dataclass(frozen=True)
class Recommendation:
    """A loan together with the amount recommended to invest into it."""

    loan: Loan
    amount: Decimal


class InvestmentStrategy(ABC):
    """Abstract interface for investment strategies.

    Implementations must be stateless: every call depends only on its
    arguments and the strategy's immutable configuration.

    Example:
        >>> strategy = SimpleInvestmentStrategy(200, None, strategies)
        >>> for loan in strategy.get_matching_loans(loans, portfolio):
        ...     amount = strategy.recommend_investment_amount(loan, portfolio)
    """

    @abstractmethod
    def get_matching_loans(
        self,
        loans: Sequence[Loan],
        portfolio: PortfolioOverview,
    ) -> List[Loan]:
        """Select loans acceptable for investment, best candidates first.

        Args:
            loans: Loans currently open on the marketplace
            portfolio: Current portfolio state

        Returns:
            Acceptable loans in the order they should be invested into.
            Empty when nothing should be invested this cycle.
        """
        pass

    @abstractmethod
    def recommend_investment_amount(
        self,
        loan: Loan,
        portfolio: PortfolioOverview,
    ) -> Decimal:
        """Recommend how much to invest into a loan.

        Args:
            loan: Loan to invest into
            portfolio: Current portfolio state

        Returns:
            Non-negative multiple of MINIMAL_INVESTMENT_INCREMENT not exceeding
            the available balance; zero means do not invest
        """
        pass

    def recommend(
        self,
        loans: Sequence[Loan],
        portfolio: PortfolioOverview,
    ) -> List[Recommendation]:
        """Size every matching loan against one portfolio snapshot.

        Amounts are computed independently, as if each were the only
        investment made from this snapshot. Loans sized to zero are left out.

        Args:
            loans: Loans currently open on the marketplace
            portfolio: Current portfolio state

        Returns:
            Recommendations in the order of get_matching_loans
        """
        recommendations = []
        for loan in self.get_matching_loans(loans, portfolio):
            amount = self.recommend_investment_amount(loan, portfolio)
            if amount > 0:
                recommendations.append(Recommendation(loan=loan, amount=amount))
        return recommendations
