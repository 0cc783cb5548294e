"""Unit tests for Investor."""

import logging
from decimal import Decimal
from typing import List
from unittest.mock import Mock

import pytest

from autolend.investing.investor import Investor, OperatingMode
from autolend.portfolio.overview import PortfolioOverview
from autolend.remote.api import InvestingApi, SnapshotMarketplace
from autolend.remote.entities import Investment, Loan
from autolend.remote.ratings import Rating
from autolend.strategy.simple_strategy import SimpleInvestmentStrategy
from autolend.strategy.strategy_per_rating import StrategyPerRating
from autolend.utils.exceptions import ConfigurationError, InvestmentRejectedError


def make_strategy(minimum_balance: int = 0) -> SimpleInvestmentStrategy:
    """A and B each target half of the portfolio; at most 400 per loan."""
    strategies = {}
    for rating in Rating:
        strategies[rating] = StrategyPerRating(
            rating=rating,
            target_share=Decimal("0.5") if rating in (Rating.A, Rating.B) else Decimal(0),
            min_term_months=0,
            max_term_months=None,
            min_investment_amount=Decimal(200),
            max_investment_amount=Decimal(400),
            min_loan_share=Decimal(0),
            max_loan_share=Decimal(1),
            min_ask_amount=Decimal(0),
            max_ask_amount=None,
            prefer_longer_terms=False,
        )
    return SimpleInvestmentStrategy(minimum_balance, None, strategies)


def make_loans() -> List[Loan]:
    return [
        Loan(1, Rating.A, Decimal(100000), Decimal(100000), 12),
        Loan(2, Rating.A, Decimal(100000), Decimal(100000), 24),
        Loan(3, Rating.B, Decimal(100000), Decimal(100000), 36),
    ]


def make_portfolio(balance: int = 1000) -> PortfolioOverview:
    return PortfolioOverview(available_balance=Decimal(balance), total_invested=Decimal(0))


class RejectingMarketplace(SnapshotMarketplace):
    """Marketplace that refuses investments into some loans."""

    def __init__(self, loans, portfolio, rejected_ids):
        super().__init__(loans, portfolio)
        self.rejected_ids = set(rejected_ids)

    def invest(self, investment: Investment) -> None:
        if investment.loan_id in self.rejected_ids:
            raise InvestmentRejectedError(f"Loan {investment.loan_id} already funded")
        super().invest(investment)


class TestOperatingMode:
    """Test cases for operating mode selection."""

    def test_strategy_driven(self) -> None:
        """Test an investor with a strategy is strategy-driven."""
        investor = Investor(Mock(spec=InvestingApi), make_portfolio(), make_strategy())

        assert investor.operating_mode is OperatingMode.STRATEGY_DRIVEN

    def test_user_driven(self) -> None:
        """Test an investor without a strategy is user-driven."""
        investor = Investor(Mock(spec=InvestingApi), make_portfolio())

        assert investor.operating_mode is OperatingMode.USER_DRIVEN

    def test_strategy_required(self) -> None:
        """Test strategy-driven investing without a strategy fails."""
        investor = Investor(Mock(spec=InvestingApi), make_portfolio())

        with pytest.raises(ConfigurationError, match="requires a strategy"):
            investor.invest_using_strategy([])


class TestInvestUsingStrategy:
    """Test cases for strategy-driven investing."""

    def test_ratings_re_ranked_after_each_investment(self) -> None:
        """Test the portfolio update moves investing on to the next rating."""
        loans = make_loans()
        marketplace = SnapshotMarketplace(loans, make_portfolio())
        investor = Investor(marketplace, make_portfolio(), make_strategy())

        investments = investor.invest_using_strategy()

        # A first (tie, better rating), then A is at target and B takes over
        assert [(i.loan_id, i.amount) for i in investments] == [
            (1, Decimal(400)),
            (3, Decimal(400)),
        ]
        assert marketplace.investments == investments
        assert investor.portfolio.available_balance == Decimal(200)
        assert investor.portfolio.total_invested == Decimal(800)
        assert investor.portfolio.share_of(Rating.A) == Decimal("0.5")

    def test_stops_at_minimum_balance(self) -> None:
        """Test investing stops once the balance falls below the minimum."""
        marketplace = SnapshotMarketplace(make_loans(), make_portfolio())
        investor = Investor(marketplace, make_portfolio(), make_strategy(minimum_balance=700))

        investments = investor.invest_using_strategy()

        assert [i.loan_id for i in investments] == [1]
        assert investor.portfolio.available_balance == Decimal(600)

    def test_rejected_loan_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test a rejected investment is logged and the next loan is tried."""
        marketplace = RejectingMarketplace(make_loans(), make_portfolio(), rejected_ids=[1])
        investor = Investor(marketplace, make_portfolio(), make_strategy())

        with caplog.at_level(logging.WARNING, logger="autolend.investing.investor"):
            investments = investor.invest_using_strategy()

        assert [i.loan_id for i in investments] == [2, 3]
        assert any(
            "Investment rejected" in r.message and "loan_id=1" in r.message
            for r in caplog.records
        )

    def test_dry_run_submits_nothing(self) -> None:
        """Test a dry run never calls the marketplace but plans the same."""
        api = Mock(spec=InvestingApi)
        api.get_loans.return_value = make_loans()
        investor = Investor(api, make_portfolio(), make_strategy(), dry_run=True)

        investments = investor.invest_using_strategy()

        api.invest.assert_not_called()
        api.get_loans.assert_called_once()
        assert [(i.loan_id, i.amount) for i in investments] == [
            (1, Decimal(400)),
            (3, Decimal(400)),
        ]
        assert investor.portfolio.available_balance == Decimal(200)

    def test_explicit_loans_not_fetched(self) -> None:
        """Test loans passed in are used instead of fetching."""
        api = Mock(spec=InvestingApi)
        investor = Investor(api, make_portfolio(), make_strategy(), dry_run=True)

        investments = investor.invest_using_strategy(make_loans()[2:])

        api.get_loans.assert_not_called()
        assert [i.loan_id for i in investments] == [3]

    def test_nothing_to_invest(self) -> None:
        """Test an empty balance results in no investments."""
        api = Mock(spec=InvestingApi)
        investor = Investor(api, make_portfolio(balance=0), make_strategy())

        assert investor.invest_using_strategy(make_loans()) == []
        api.invest.assert_not_called()

    def test_each_loan_attempted_once(self) -> None:
        """Test a loan is never invested into twice in one run."""
        loans = [Loan(1, Rating.A, Decimal(100000), Decimal(100000), 12)]
        api = Mock(spec=InvestingApi)
        investor = Investor(api, make_portfolio(balance=10000), make_strategy())

        investments = investor.invest_using_strategy(loans)

        assert len(investments) == 1
        api.invest.assert_called_once()


class TestInvestInto:
    """Test cases for user-driven investing."""

    @pytest.fixture
    def marketplace(self) -> SnapshotMarketplace:
        return SnapshotMarketplace(make_loans(), make_portfolio())

    def test_invest_into(self, marketplace) -> None:
        """Test investing a fixed amount into a chosen loan."""
        investor = Investor(marketplace, make_portfolio())

        investment = investor.invest_into(3, 600)

        assert investment.loan_id == 3
        assert investment.rating is Rating.B
        assert investment.amount == Decimal(600)
        assert marketplace.investments == [investment]
        assert investor.portfolio.available_balance == Decimal(400)

    @pytest.mark.parametrize("amount", [0, -200, 300])
    def test_amount_must_be_whole_increments(self, marketplace, amount: int) -> None:
        """Test amounts must be positive multiples of the increment."""
        investor = Investor(marketplace, make_portfolio())

        with pytest.raises(ValueError, match="positive multiple of 200"):
            investor.invest_into(1, amount)

    def test_amount_within_balance(self, marketplace) -> None:
        """Test amounts above the balance are refused."""
        investor = Investor(marketplace, make_portfolio())

        with pytest.raises(ValueError, match="exceeds available balance"):
            investor.invest_into(1, 1200)

    def test_unknown_loan(self, marketplace) -> None:
        """Test investing into a loan that is not open is refused."""
        investor = Investor(marketplace, make_portfolio())

        with pytest.raises(ValueError, match="Loan 42 is not open"):
            investor.invest_into(42, 200)

    def test_rejected(self) -> None:
        """Test a rejected investment returns None and keeps the balance."""
        marketplace = RejectingMarketplace(make_loans(), make_portfolio(), rejected_ids=[2])
        investor = Investor(marketplace, make_portfolio())

        assert investor.invest_into(2, 200) is None
        assert investor.portfolio.available_balance == Decimal(1000)
