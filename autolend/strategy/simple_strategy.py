"""Rating-demand investment strategy.

This module implements the allocation engine: given the open loans and a
portfolio snapshot, it decides which loans to invest into and in what order.

Algorithm:
1. Stop if the balance is below the minimum or the ceiling was exceeded
2. Rank ratings by demand (target share minus current share)
3. Within each rating, keep acceptable loans sorted by preferred term
4. Concatenate the per-rating blocks, most demanded rating first
5. Size each investment separately (share of loan, per-loan cap, balance)
"""

from decimal import Decimal
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Sequence

from autolend.portfolio.overview import PortfolioOverview
from autolend.remote.entities import Loan, to_decimal
from autolend.remote.ratings import Rating
from autolend.strategy.base import MINIMAL_INVESTMENT_INCREMENT, InvestmentStrategy
from autolend.strategy.strategy_per_rating import StrategyPerRating
from autolend.utils.exceptions import ConfigurationError
from autolend.utils.logging import get_logger, log_with_context

logger = get_logger(__name__)


class SimpleInvestmentStrategy(InvestmentStrategy):
    """Invest into the ratings the portfolio is most short of.

    Configuration Parameters:
        minimum_balance: Never invest when the available balance is below this
        investment_ceiling: Never invest once total invested exceeds this,
            None for no ceiling
        strategies: {rating: StrategyPerRating}, one for every Rating

    Example:
        >>> strategy = SimpleInvestmentStrategy(
        ...     minimum_balance=200,
        ...     investment_ceiling=100000,
        ...     strategies=per_rating,
        ... )
        >>> strategy.rank_ratings_by_demand({Rating.A: Decimal("0.05")})
        [<Rating.B: 5>, <Rating.A: 4>]
    """

    def __init__(
        self,
        minimum_balance: Decimal | int,
        investment_ceiling: Optional[Decimal | int],
        strategies: Mapping[Rating, StrategyPerRating],
    ):
        """Initialize strategy and check that every rating is covered.

        Raises:
            ConfigurationError: If a rating has no strategy, a key is not a
                Rating, or a strategy is registered under another rating
        """
        self.minimum_balance = to_decimal(minimum_balance)
        self.investment_ceiling = (
            None if investment_ceiling is None else to_decimal(investment_ceiling)
        )
        self.strategies: Mapping[Rating, StrategyPerRating] = MappingProxyType(
            dict(strategies)
        )

        self._validate_config()

        logger.debug(
            "SimpleInvestmentStrategy initialized: minimum_balance=%s, ceiling=%s",
            self.minimum_balance,
            self.investment_ceiling,
        )

    def _validate_config(self) -> None:
        """Validate configuration parameters."""
        unknown = [key for key in self.strategies if not isinstance(key, Rating)]
        if unknown:
            raise ConfigurationError(f"Strategies keyed by non-ratings: {unknown}")

        missing = [rating.name for rating in Rating if rating not in self.strategies]
        if missing:
            raise ConfigurationError(
                f"Investment strategy is missing ratings: {', '.join(missing)}"
            )

        for rating, strategy in self.strategies.items():
            if strategy.rating is not rating:
                raise ConfigurationError(
                    f"Strategy for {strategy.rating.name} registered under {rating.name}"
                )

        if self.minimum_balance < 0:
            raise ConfigurationError(
                f"minimum_balance must be >= 0, got {self.minimum_balance}"
            )
        if (
            self.investment_ceiling is not None
            and self.investment_ceiling < self.minimum_balance
        ):
            # Accepted; investing stops once total invested passes the ceiling.
            logger.warning(
                "investment_ceiling (%s) is below minimum_balance (%s)",
                self.investment_ceiling,
                self.minimum_balance,
            )

    def rank_ratings_by_demand(
        self,
        shares_on_investment: Mapping[Rating, Decimal],
    ) -> List[Rating]:
        """Order ratings by how far they are below their target share.

        Ratings at or above their target are left out. Ratings with equal
        demand keep rating order (best rating first).

        Args:
            shares_on_investment: Current {rating: share}, missing means zero

        Returns:
            Ratings with positive demand, largest demand first
        """
        demands: Dict[Rating, Decimal] = {}
        for rating, strategy in self.strategies.items():
            current = shares_on_investment.get(rating, Decimal(0))
            demand = strategy.target_share - current
            if demand > 0:
                demands[rating] = demand

        ranked = sorted(demands, key=lambda rating: (-demands[rating], rating))
        logger.debug(
            "Ratings by demand: %s",
            ", ".join(f"{r.name}={demands[r]}" for r in ranked) or "none",
        )
        return ranked

    @staticmethod
    def sort_loans_by_rating(loans: Sequence[Loan]) -> Dict[Rating, List[Loan]]:
        """Group loans by rating.

        A loan object listed more than once is kept once; within a rating,
        loans keep the order in which they were first seen.
        """
        seen = set()
        groups: Dict[Rating, List[Loan]] = {}
        for loan in loans:
            if id(loan) in seen:
                continue
            seen.add(id(loan))
            groups.setdefault(loan.rating, []).append(loan)
        return groups

    def recommend_investment_amount(
        self,
        loan: Loan,
        portfolio: PortfolioOverview,
    ) -> Decimal:
        """Recommend how much to invest into a loan.

        The amount is the smallest of the allowed share of the loan's
        remaining amount, the per-loan maximum and the available balance,
        rounded down to a multiple of MINIMAL_INVESTMENT_INCREMENT. Amounts
        below the rating's minimum investment become zero.

        Args:
            loan: Loan to invest into
            portfolio: Current portfolio state

        Returns:
            Recommended amount, zero to skip the loan
        """
        strategy = self.strategies[loan.rating]
        by_share = loan.remaining_investment * strategy.max_loan_share
        capped = min(by_share, strategy.max_investment_amount, portfolio.available_balance)
        if capped <= 0:
            return Decimal(0)

        increments = int(capped // MINIMAL_INVESTMENT_INCREMENT)
        amount = Decimal(increments * MINIMAL_INVESTMENT_INCREMENT)
        if amount < strategy.min_investment_amount:
            return Decimal(0)
        return amount

    def get_matching_loans(
        self,
        loans: Sequence[Loan],
        portfolio: PortfolioOverview,
    ) -> List[Loan]:
        """Select acceptable loans, most demanded rating first.

        Within a rating, loans are ordered by term, longest first when the
        rating prefers longer terms and shortest first otherwise; loans with
        equal terms keep their input order.

        Args:
            loans: Loans currently open on the marketplace
            portfolio: Current portfolio state

        Returns:
            Matching loans, not yet sized. Empty when the balance is below
            the minimum or total invested is above the ceiling.
        """
        if portfolio.available_balance < self.minimum_balance:
            log_with_context(
                logger, "debug", "Balance below minimum, not investing",
                balance=portfolio.available_balance, minimum=self.minimum_balance,
            )
            return []
        if (
            self.investment_ceiling is not None
            and portfolio.total_invested > self.investment_ceiling
        ):
            log_with_context(
                logger, "debug", "Investment ceiling reached, not investing",
                invested=portfolio.total_invested, ceiling=self.investment_ceiling,
            )
            return []

        groups = self.sort_loans_by_rating(loans)
        matching: List[Loan] = []
        for rating in self.rank_ratings_by_demand(portfolio.shares_on_investment):
            strategy = self.strategies[rating]
            acceptable = [
                loan for loan in groups.get(rating, []) if strategy.is_acceptable(loan)
            ]
            acceptable.sort(
                key=lambda loan: loan.term_in_months,
                reverse=strategy.prefer_longer_terms,
            )
            matching.extend(acceptable)

        logger.debug("%d of %d loans match the strategy", len(matching), len(loans))
        return matching
