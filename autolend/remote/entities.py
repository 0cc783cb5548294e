"""Marketplace entities consumed by the investment strategy.

These are plain, immutable snapshots of remote data. They are created fresh
for every investment cycle and never mutated by the strategy.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from autolend.remote.ratings import Rating


def to_decimal(value: Any) -> Decimal:
    """Convert a number read from configuration or JSON to Decimal.

    Floats go through str() so that 0.01 becomes Decimal("0.01") rather than
    its binary approximation.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


@dataclass(frozen=True)
class Loan:
    """A loan listed on the marketplace, open for investment.

    Attributes:
        id: Marketplace identifier of the loan
        rating: Risk tier of the loan
        amount: Total size of the loan
        remaining_investment: Amount still open for investment
        term_in_months: Duration of the loan
        name: Borrower-supplied title (informational)
        interest_rate: Annual interest rate as a fraction (informational)
    """

    id: int
    rating: Rating
    amount: Decimal
    remaining_investment: Decimal
    term_in_months: int
    name: str = ""
    interest_rate: Optional[Decimal] = None

    def __post_init__(self):
        """Validate loan fields."""
        if self.term_in_months < 1:
            raise ValueError(
                f"term_in_months must be >= 1, got {self.term_in_months}"
            )
        if self.amount < 0:
            raise ValueError(f"amount must be non-negative, got {self.amount}")
        if self.remaining_investment < 0:
            raise ValueError(
                f"remaining_investment must be non-negative, got {self.remaining_investment}"
            )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Loan":
        """Build a loan from a marketplace record.

        Args:
            data: Mapping with keys id, rating, amount, remaining_investment,
                term_in_months and optionally name and interest_rate

        Raises:
            KeyError: If a required key is missing
            RatingFormatError: If the rating is unknown
        """
        interest_rate = data.get("interest_rate")
        return cls(
            id=int(data["id"]),
            rating=Rating.from_code(str(data["rating"])),
            amount=to_decimal(data["amount"]),
            remaining_investment=to_decimal(data["remaining_investment"]),
            term_in_months=int(data["term_in_months"]),
            name=str(data.get("name", "")),
            interest_rate=None if interest_rate is None else to_decimal(interest_rate),
        )


@dataclass(frozen=True)
class Investment:
    """An investment of a given amount into a loan.

    Attributes:
        loan_id: Identifier of the loan invested into
        rating: Rating of that loan
        amount: Money invested
        timestamp: When the investment was created
    """

    loan_id: int
    rating: Rating
    amount: Decimal
    timestamp: datetime = field(default_factory=datetime.now, compare=False)

    def __post_init__(self):
        """Validate investment."""
        if self.amount <= 0:
            raise ValueError(f"amount must be positive, got {self.amount}")

    @classmethod
    def of(cls, loan: Loan, amount: Decimal) -> "Investment":
        return cls(loan_id=loan.id, rating=loan.rating, amount=amount)
