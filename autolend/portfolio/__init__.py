"""Portfolio Layer.

Components:
- PortfolioOverview: Balance, invested total and shares per rating
"""

from autolend.portfolio.overview import PortfolioOverview

__all__ = ["PortfolioOverview"]
