"""Loan ratings and sets of ratings.

Ratings are the marketplace's risk tiers, ordered from the safest (AAAAA)
to the riskiest (D). A RatingSet is an immutable collection of ratings with
a textual literal form used in configuration files and on the command line:

    ["AAA", "A", "B"]

Elements are double-quoted rating names, separated by a comma and a space,
inside mandatory square brackets. Parsing tolerates arbitrary whitespace;
formatting always emits members in rating order.
"""

from enum import IntEnum
from typing import Iterable, Iterator, Tuple

from autolend.utils.exceptions import RatingFormatError


class Rating(IntEnum):
    """Marketplace risk tiers, best first.

    The integer value is the tier's ordinal, so ratings compare naturally:
    Rating.AAAAA < Rating.D.
    """

    AAAAA = 0
    AAAA = 1
    AAA = 2
    AA = 3
    A = 4
    B = 5
    C = 6
    D = 7

    @property
    def code(self) -> str:
        """Symbolic name as used by the marketplace."""
        return self.name

    @classmethod
    def from_code(cls, code: str) -> "Rating":
        """Resolve a rating from its exact, case-sensitive name.

        Raises:
            RatingFormatError: If no rating has this name
        """
        try:
            return cls[code]
        except KeyError:
            raise RatingFormatError(f"Unknown rating: {code!r}") from None

    def __str__(self) -> str:
        return self.name


class RatingSet:
    """Immutable set of ratings, kept sorted by rating ordinal.

    Example:
        >>> ratings = RatingSet.parse('[ "B", "A" ,"B"]')
        >>> str(ratings)
        '["A", "B"]'
        >>> Rating.A in ratings
        True
    """

    __slots__ = ("_ratings",)

    def __init__(self, ratings: Iterable[Rating] = ()) -> None:
        self._ratings: Tuple[Rating, ...] = tuple(sorted(set(ratings)))

    @classmethod
    def of(cls, *ratings: Rating) -> "RatingSet":
        return cls(ratings)

    @classmethod
    def all(cls) -> "RatingSet":
        return cls(Rating)

    @classmethod
    def parse(cls, text: str) -> "RatingSet":
        """Parse a rating set literal such as '["A", "B"]'.

        Args:
            text: Rating set literal

        Returns:
            RatingSet with the parsed ratings (duplicates collapse)

        Raises:
            RatingFormatError: If brackets are missing, an element is not
                double-quoted, or an element names an unknown rating
        """
        trimmed = text.strip()
        if not (trimmed.startswith("[") and trimmed.endswith("]")) or len(trimmed) < 2:
            raise RatingFormatError(
                f'Expecting string in the format of ["A", "B"], got {text!r}'
            )

        interior = trimmed[1:-1]
        if not interior.strip():
            return cls()

        ratings = []
        for part in interior.split(","):
            element = part.strip()
            if len(element) < 2 or not (element.startswith('"') and element.endswith('"')):
                raise RatingFormatError(
                    f"Expecting rating to be double-quoted, got {part.strip()!r}"
                )
            ratings.append(Rating.from_code(element[1:-1]))

        return cls(ratings)

    def format(self) -> str:
        """Canonical literal form, members in rating order."""
        return "[" + ", ".join(f'"{rating.name}"' for rating in self._ratings) + "]"

    @property
    def ratings(self) -> Tuple[Rating, ...]:
        return self._ratings

    def __contains__(self, rating: object) -> bool:
        return rating in self._ratings

    def __iter__(self) -> Iterator[Rating]:
        return iter(self._ratings)

    def __len__(self) -> int:
        return len(self._ratings)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RatingSet):
            return NotImplemented
        return self._ratings == other._ratings

    def __hash__(self) -> int:
        return hash(self._ratings)

    def __str__(self) -> str:
        return self.format()

    def __repr__(self) -> str:
        return f"RatingSet({self.format()})"


def parse_ratings(text: str) -> RatingSet:
    """Parse a rating set literal. See RatingSet.parse."""
    return RatingSet.parse(text)


def format_ratings(ratings: RatingSet) -> str:
    """Format a rating set as its canonical literal."""
    return ratings.format()
