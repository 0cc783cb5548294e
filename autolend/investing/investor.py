"""Execute investment decisions against the marketplace.

The investor runs in one of two modes:
- Strategy-driven: ask the strategy for matching loans, invest into the best
  one, update the portfolio, and ask again until nothing matches.
- User-driven: invest a fixed amount into one given loan.

In dry-run mode nothing is submitted, but the portfolio is updated exactly
as in a live run, so the resulting investments show what would be done.
"""

from decimal import Decimal
from enum import Enum
from typing import List, Optional, Sequence, Set

from autolend.portfolio.overview import PortfolioOverview
from autolend.remote.api import InvestingApi
from autolend.remote.entities import Investment, Loan, to_decimal
from autolend.strategy.base import MINIMAL_INVESTMENT_INCREMENT, InvestmentStrategy
from autolend.utils.exceptions import ConfigurationError, InvestmentRejectedError
from autolend.utils.logging import get_logger, log_with_context

logger = get_logger(__name__)


class OperatingMode(Enum):
    """How investment decisions are made."""

    STRATEGY_DRIVEN = "strategy_driven"
    USER_DRIVEN = "user_driven"


class Investor:
    """Submits investments and keeps the portfolio snapshot current.

    Example:
        >>> investor = Investor(api, api.get_portfolio(), strategy, dry_run=True)
        >>> for investment in investor.invest_using_strategy():
        ...     print(investment.loan_id, investment.amount)
    """

    def __init__(
        self,
        api: InvestingApi,
        portfolio: PortfolioOverview,
        strategy: Optional[InvestmentStrategy] = None,
        dry_run: bool = False,
    ):
        """Initialize investor.

        Args:
            api: Marketplace session to submit investments through
            portfolio: Portfolio snapshot at the start of the run
            strategy: Investment strategy, required for strategy-driven mode
            dry_run: Do not submit anything to the marketplace
        """
        self.api = api
        self.portfolio = portfolio
        self.strategy = strategy
        self.dry_run = dry_run

    @property
    def operating_mode(self) -> OperatingMode:
        if self.strategy is None:
            return OperatingMode.USER_DRIVEN
        return OperatingMode.STRATEGY_DRIVEN

    def _submit(self, loan: Loan, amount: Decimal) -> Optional[Investment]:
        """Submit one investment and update the portfolio when it succeeds."""
        investment = Investment.of(loan, amount)
        if self.dry_run:
            log_with_context(
                logger, "info", "Dry run, skipping investment",
                loan_id=loan.id, amount=amount, rating=loan.rating,
            )
        else:
            try:
                self.api.invest(investment)
            except InvestmentRejectedError as e:
                log_with_context(
                    logger, "warning", "Investment rejected",
                    loan_id=loan.id, amount=amount, reason=e,
                )
                return None
            log_with_context(
                logger, "info", "Investment submitted",
                loan_id=loan.id, amount=amount, rating=loan.rating,
            )

        self.portfolio = self.portfolio.after_investment(loan.rating, amount)
        return investment

    def invest_using_strategy(
        self,
        loans: Optional[Sequence[Loan]] = None,
    ) -> List[Investment]:
        """Invest into matching loans until the strategy has nothing left.

        Every loan is attempted at most once per run. After each successful
        investment the strategy is consulted again with the updated
        portfolio, so ratings drop out as they reach their target share.

        Args:
            loans: Loans to consider, fetched from the marketplace if None

        Returns:
            Investments made, in submission order

        Raises:
            ConfigurationError: If the investor has no strategy
        """
        if self.strategy is None:
            raise ConfigurationError("Strategy-driven investing requires a strategy")

        available = list(self.api.get_loans() if loans is None else loans)
        attempted: Set[int] = set()
        investments: List[Investment] = []

        log_with_context(
            logger, "info", "Starting strategy-driven run",
            loans=len(available), balance=self.portfolio.available_balance,
            dry_run=self.dry_run,
        )

        while True:
            candidates = [loan for loan in available if loan.id not in attempted]
            matching = self.strategy.get_matching_loans(candidates, self.portfolio)

            submitted = False
            for loan in matching:
                amount = self.strategy.recommend_investment_amount(loan, self.portfolio)
                if amount <= 0:
                    continue
                attempted.add(loan.id)
                investment = self._submit(loan, amount)
                if investment is not None:
                    investments.append(investment)
                submitted = True
                break

            if not submitted:
                break

        logger.info(
            "Run finished: %d investments, %s invested",
            len(investments),
            sum((i.amount for i in investments), Decimal(0)),
        )
        return investments

    def invest_into(self, loan_id: int, amount: Decimal | int) -> Optional[Investment]:
        """Invest a fixed amount into one loan.

        Args:
            loan_id: Loan to invest into
            amount: Positive multiple of MINIMAL_INVESTMENT_INCREMENT, not
                above the available balance

        Returns:
            The investment, or None when the marketplace rejected it

        Raises:
            ValueError: If the amount is invalid or the loan is not open
        """
        amount = to_decimal(amount)
        if amount <= 0 or amount % MINIMAL_INVESTMENT_INCREMENT != 0:
            raise ValueError(
                f"amount must be a positive multiple of {MINIMAL_INVESTMENT_INCREMENT}, "
                f"got {amount}"
            )
        if amount > self.portfolio.available_balance:
            raise ValueError(
                f"amount {amount} exceeds available balance {self.portfolio.available_balance}"
            )

        loan = next(
            (open_loan for open_loan in self.api.get_loans() if open_loan.id == loan_id),
            None,
        )
        if loan is None:
            raise ValueError(f"Loan {loan_id} is not open for investment")

        return self._submit(loan, amount)
