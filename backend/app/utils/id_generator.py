"""
Document number generation for PRs and inventory lots.

Numbers look like ``PR-20250114-0427``: prefix, date, four random digits.
Uniqueness is enforced by the database; a collision surfaces as an
IntegrityError from the insert and retrying is left to the caller.
"""
import random
from datetime import date
from typing import Callable, Iterable, Iterator, Optional, Protocol


class IdGenerator(Protocol):
    def next(self, on: Optional[date] = None) -> str:
        ...


class DatedNumberGenerator:
    """Generates ``<prefix>-<YYYYMMDD>-<NNNN>`` numbers"""

    def __init__(
        self,
        prefix: str,
        today: Callable[[], date] = date.today,
        rng: Optional[random.Random] = None
    ):
        self.prefix = prefix
        self.today = today
        self.rng = rng or random.SystemRandom()

    def next(self, on: Optional[date] = None) -> str:
        day = on or self.today()
        return f"{self.prefix}-{day.strftime('%Y%m%d')}-{self.rng.randint(0, 9999):04d}"


class SequenceIdGenerator:
    """
    Hands out a fixed sequence of numbers.

    Used by tests and seed scripts to get deterministic document numbers, or
    to simulate collisions by repeating a value.
    """

    def __init__(self, values: Iterable[str]):
        self._values: Iterator[str] = iter(values)

    def next(self, on: Optional[date] = None) -> str:
        try:
            return next(self._values)
        except StopIteration:
            raise RuntimeError("SequenceIdGenerator exhausted") from None
