"""Investment Strategy Layer.

This layer decides which loans to invest into, in what order and how much.

Components:
- InvestmentStrategy: Abstract interface for investment strategies
- SimpleInvestmentStrategy: Rating-demand allocation engine
- StrategyPerRating: Per-rating eligibility and sizing rules
- load_strategy: Build a strategy from a YAML file
"""

from autolend.strategy.base import (
    MINIMAL_INVESTMENT_INCREMENT,
    InvestmentStrategy,
    Recommendation,
)
from autolend.strategy.loader import load_strategy, strategy_from_config
from autolend.strategy.simple_strategy import SimpleInvestmentStrategy
from autolend.strategy.strategy_per_rating import StrategyPerRating

__all__ = [
    "InvestmentStrategy",
    "SimpleInvestmentStrategy",
    "StrategyPerRating",
    "Recommendation",
    "MINIMAL_INVESTMENT_INCREMENT",
    "load_strategy",
    "strategy_from_config",
]
