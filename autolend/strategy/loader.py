"""Load a SimpleInvestmentStrategy from a YAML configuration file.

The strategy lives under the ``strategy`` key:

    strategy:
      minimum_balance: 200
      investment_ceiling: 150000      # null or absent for no ceiling
      defaults:                       # applied to every rating
        target_share: 0.1
        min_term_months: 0
        max_term_months: -1           # -1 for no limit
        min_investment_amount: 200
        max_investment_amount: 400
        min_loan_share: 0
        max_loan_share: 0.01
        min_ask_amount: 0
        max_ask_amount: -1            # -1 for no limit
        prefer_longer_terms: false
      ratings:                        # per-rating overrides
        A:
          target_share: 0.2
        '["C", "D"]':
          target_share: 0
"""

from pathlib import Path
from typing import Any, Callable, Dict, Mapping

from autolend.remote.entities import to_decimal
from autolend.remote.ratings import Rating, RatingSet
from autolend.strategy.simple_strategy import SimpleInvestmentStrategy
from autolend.strategy.strategy_per_rating import StrategyPerRating
from autolend.utils.config import Config
from autolend.utils.exceptions import ConfigurationError, RatingFormatError
from autolend.utils.logging import get_logger

logger = get_logger(__name__)

UNBOUNDED = -1


def _optional_int(value: Any) -> int | None:
    if value is None or int(value) == UNBOUNDED:
        return None
    return int(value)


def _optional_decimal(value: Any):
    if value is None or to_decimal(value) == UNBOUNDED:
        return None
    return to_decimal(value)


def _boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    raise ValueError(f"expected true or false, got {value!r}")


FIELD_PARSERS: Dict[str, Callable[[Any], Any]] = {
    "target_share": to_decimal,
    "min_term_months": int,
    "max_term_months": _optional_int,
    "min_investment_amount": to_decimal,
    "max_investment_amount": to_decimal,
    "min_loan_share": to_decimal,
    "max_loan_share": to_decimal,
    "min_ask_amount": to_decimal,
    "max_ask_amount": _optional_decimal,
    "prefer_longer_terms": _boolean,
}


def _check_fields(values: Mapping[str, Any], where: str) -> None:
    unknown = sorted(set(values) - set(FIELD_PARSERS))
    if unknown:
        raise ConfigurationError(f"Unknown strategy fields in {where}: {', '.join(unknown)}")


def _ratings_for_key(key: Any) -> RatingSet:
    """Resolve an override key: a rating name or a rating set literal."""
    text = str(key).strip()
    try:
        if text.startswith("["):
            return RatingSet.parse(text)
        return RatingSet.of(Rating.from_code(text))
    except RatingFormatError as e:
        raise ConfigurationError(f"Invalid rating key {key!r}: {e}") from e


def build_strategy_per_rating(rating: Rating, values: Mapping[str, Any]) -> StrategyPerRating:
    """Build one per-rating strategy from raw configuration values.

    Raises:
        ConfigurationError: If a field is missing or has an invalid value
    """
    missing = [name for name in FIELD_PARSERS if name not in values]
    if missing:
        raise ConfigurationError(
            f"Strategy for {rating.name} is missing fields: {', '.join(missing)}"
        )

    parsed = {}
    for name, parser in FIELD_PARSERS.items():
        try:
            parsed[name] = parser(values[name])
        except (ArithmeticError, TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Invalid value for {rating.name}.{name}: {values[name]!r}"
            ) from e

    return StrategyPerRating(rating=rating, **parsed)


def strategy_from_config(config: Config) -> SimpleInvestmentStrategy:
    """Build the investment strategy from a loaded configuration.

    Args:
        config: Configuration with a ``strategy`` section

    Returns:
        SimpleInvestmentStrategy covering every rating

    Raises:
        ConfigurationError: If the section is missing or invalid
    """
    section = config.section("strategy")

    defaults = section.get("defaults") or {}
    overrides = section.get("ratings") or {}
    if not isinstance(defaults, dict) or not isinstance(overrides, dict):
        raise ConfigurationError("'defaults' and 'ratings' must be mappings")
    _check_fields(defaults, "defaults")

    values: Dict[Rating, Dict[str, Any]] = {rating: dict(defaults) for rating in Rating}
    for key, override in overrides.items():
        if not isinstance(override, dict):
            raise ConfigurationError(f"Override for {key!r} must be a mapping")
        _check_fields(override, str(key))
        for rating in _ratings_for_key(key):
            values[rating].update(override)

    strategies = {
        rating: build_strategy_per_rating(rating, rating_values)
        for rating, rating_values in values.items()
    }

    try:
        minimum_balance = to_decimal(section.get("minimum_balance", 0))
        ceiling = section.get("investment_ceiling")
        ceiling = None if ceiling is None else to_decimal(ceiling)
    except (ArithmeticError, TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid balance limits: {e}") from e

    logger.info(
        "Loaded strategy: minimum_balance=%s, ceiling=%s, %d ratings",
        minimum_balance,
        ceiling,
        len(strategies),
    )
    return SimpleInvestmentStrategy(minimum_balance, ceiling, strategies)


def load_strategy(filepath: str | Path) -> SimpleInvestmentStrategy:
    """Load the investment strategy from a YAML file."""
    return strategy_from_config(Config.from_file(filepath))
