"""Investment rules for loans of a single rating."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from autolend.remote.entities import Loan
from autolend.remote.ratings import Rating
from autolend.utils.exceptions import ConfigurationError


@dataclass(frozen=True)
class StrategyPerRating:
    """Immutable per-rating strategy configuration.

    Attributes:
        rating: Rating this strategy applies to
        target_share: Desired fraction of total invested money in this rating
        min_term_months: Shortest acceptable loan term
        max_term_months: Longest acceptable loan term, None for no limit
        min_investment_amount: Smallest amount worth putting into one loan
        max_investment_amount: Largest amount to put into one loan
        min_loan_share: Lower bound on the fraction of a loan's remaining
            amount to take
        max_loan_share: Upper bound on the fraction of a loan's remaining
            amount to take
        min_ask_amount: Smallest total loan size to consider
        max_ask_amount: Largest total loan size to consider, None for no limit
        prefer_longer_terms: Order acceptable loans by term descending
            instead of ascending
    """

    rating: Rating
    target_share: Decimal
    min_term_months: int
    max_term_months: Optional[int]
    min_investment_amount: Decimal
    max_investment_amount: Decimal
    min_loan_share: Decimal
    max_loan_share: Decimal
    min_ask_amount: Decimal
    max_ask_amount: Optional[Decimal]
    prefer_longer_terms: bool = False

    def __post_init__(self):
        """Validate the strategy bounds."""
        name = self.rating.name
        for attr in ("target_share", "min_loan_share", "max_loan_share"):
            value = getattr(self, attr)
            if not 0 <= value <= 1:
                raise ConfigurationError(f"{name}: {attr} must be in [0, 1], got {value}")
        if self.min_term_months < 0:
            raise ConfigurationError(
                f"{name}: min_term_months must be >= 0, got {self.min_term_months}"
            )
        if self.max_term_months is not None and self.max_term_months < self.min_term_months:
            raise ConfigurationError(
                f"{name}: max_term_months ({self.max_term_months}) must be >= "
                f"min_term_months ({self.min_term_months})"
            )
        if self.min_investment_amount < 0:
            raise ConfigurationError(
                f"{name}: min_investment_amount must be >= 0, got {self.min_investment_amount}"
            )
        if self.max_investment_amount < self.min_investment_amount:
            raise ConfigurationError(
                f"{name}: max_investment_amount ({self.max_investment_amount}) must be >= "
                f"min_investment_amount ({self.min_investment_amount})"
            )
        if self.max_loan_share < self.min_loan_share:
            raise ConfigurationError(
                f"{name}: max_loan_share ({self.max_loan_share}) must be >= "
                f"min_loan_share ({self.min_loan_share})"
            )
        if self.min_ask_amount < 0:
            raise ConfigurationError(
                f"{name}: min_ask_amount must be >= 0, got {self.min_ask_amount}"
            )
        if self.max_ask_amount is not None and self.max_ask_amount < self.min_ask_amount:
            raise ConfigurationError(
                f"{name}: max_ask_amount ({self.max_ask_amount}) must be >= "
                f"min_ask_amount ({self.min_ask_amount})"
            )

    def is_acceptable(self, loan: Loan) -> bool:
        """Check the loan's term and size against this strategy.

        The rating is not checked; callers only pass loans of this rating.
        """
        if loan.term_in_months < self.min_term_months:
            return False
        if self.max_term_months is not None and loan.term_in_months > self.max_term_months:
            return False
        if loan.amount < self.min_ask_amount:
            return False
        if self.max_ask_amount is not None and loan.amount > self.max_ask_amount:
            return False
        return True
