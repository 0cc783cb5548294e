"""Marketplace Layer.

Data received from and sent to the loan marketplace.

Components:
- Rating, RatingSet: Risk tiers and their textual set form
- Loan, Investment: Marketplace entities
- InvestingApi, SnapshotMarketplace: see autolend.remote.api
"""

from autolend.remote.entities import Investment, Loan
from autolend.remote.ratings import Rating, RatingSet, format_ratings, parse_ratings

__all__ = [
    "Rating",
    "RatingSet",
    "parse_ratings",
    "format_ratings",
    "Loan",
    "Investment",
]
