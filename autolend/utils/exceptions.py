"""Exceptions raised by autolend.

Configuration and parsing problems are raised while the strategy is being
built. Marketplace errors are raised by an InvestingApi while a run is in
progress. The investor handles InvestmentRejectedError and lets everything
else propagate.
"""


class AutolendError(Exception):
    """Base exception for all autolend errors.

    All custom exceptions in the application should inherit from this class.
    """

    pass


class ConfigurationError(AutolendError):
    """Raised when configuration is invalid or missing.

    Examples:
        - A rating without a strategy in the investment strategy
        - Inverted bounds in a per-rating strategy
        - Unknown or missing keys in the strategy file
    """

    pass


class RatingFormatError(AutolendError):
    """Raised when a rating or a rating set literal cannot be parsed.

    Examples:
        - Missing surrounding brackets in '["A", "B"]'
        - Unquoted element
        - Unknown rating name (names are case-sensitive)
    """

    pass


class MarketplaceError(AutolendError):
    """Base exception for marketplace communication errors.

    Parent class for all errors raised by an InvestingApi.
    """

    pass


class InvestmentRejectedError(MarketplaceError):
    """Raised when the marketplace refuses an investment.

    Examples:
        - The loan was already fully funded by other investors
        - The amount exceeds what is left in the loan
        - Unknown loan

    Attributes:
        investment: The refused Investment, when known
    """

    def __init__(self, message: str, investment=None):
        super().__init__(message)
        self.investment = investment
