"""Unit tests for PortfolioOverview."""

from decimal import Decimal

import pytest

from autolend.portfolio.overview import PortfolioOverview
from autolend.remote.ratings import Rating


class TestPortfolioOverview:
    """Test cases for PortfolioOverview dataclass."""

    def test_creation(self) -> None:
        """Test creating an overview directly."""
        overview = PortfolioOverview(
            available_balance=Decimal(1000),
            total_invested=Decimal(5000),
            shares_on_investment={Rating.A: Decimal("0.4")},
        )

        assert overview.share_of(Rating.A) == Decimal("0.4")
        assert overview.share_of(Rating.B) == Decimal(0)

    def test_invalid_total_invested(self) -> None:
        """Test negative invested total is rejected."""
        with pytest.raises(ValueError, match="total_invested must be non-negative"):
            PortfolioOverview(Decimal(0), Decimal(-1))

    def test_invalid_share(self) -> None:
        """Test shares outside [0, 1] are rejected."""
        with pytest.raises(ValueError, match="share of A must be in"):
            PortfolioOverview(Decimal(0), Decimal(0), {Rating.A: Decimal("1.5")})

    def test_calculate(self) -> None:
        """Test totals and shares derived from invested amounts."""
        overview = PortfolioOverview.calculate(
            Decimal(1000),
            {Rating.A: Decimal(600), Rating.B: Decimal(400)},
        )

        assert overview.available_balance == Decimal(1000)
        assert overview.total_invested == Decimal(1000)
        assert overview.share_of(Rating.A) == Decimal("0.6")
        assert overview.share_of(Rating.B) == Decimal("0.4")

    def test_calculate_nothing_invested(self) -> None:
        """Test an empty portfolio has zero shares."""
        overview = PortfolioOverview.calculate(Decimal(500), {Rating.A: Decimal(0)})

        assert overview.total_invested == Decimal(0)
        assert overview.share_of(Rating.A) == Decimal(0)

    def test_after_investment(self) -> None:
        """Test the overview after one more investment."""
        overview = PortfolioOverview.calculate(
            Decimal(1000),
            {Rating.A: Decimal(600), Rating.B: Decimal(400)},
        )

        updated = overview.after_investment(Rating.C, Decimal(1000))

        assert updated.available_balance == Decimal(0)
        assert updated.total_invested == Decimal(2000)
        assert updated.share_of(Rating.A) == Decimal("0.3")
        assert updated.share_of(Rating.B) == Decimal("0.2")
        assert updated.share_of(Rating.C) == Decimal("0.5")
        # Original snapshot untouched
        assert overview.total_invested == Decimal(1000)
        assert overview.share_of(Rating.C) == Decimal(0)

    def test_after_investment_into_empty_portfolio(self) -> None:
        """Test the first investment takes the whole share."""
        overview = PortfolioOverview(Decimal(400), Decimal(0))

        updated = overview.after_investment(Rating.AA, Decimal(200))

        assert updated.available_balance == Decimal(200)
        assert updated.share_of(Rating.AA) == Decimal(1)
