from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

# Grade value the store uses for an attempt that has not been graded.
UNGRADED = Decimal(-1)


@dataclass(frozen=True, slots=True)
class ScoreRecord:
    entity_id: Hashable
    attempt_number: int
    score: Decimal

    def __post_init__(self) -> None:
        if self.attempt_number < 0:
            raise ValueError(f"attempt_number must be >= 0, got {self.attempt_number}")


@dataclass(frozen=True, slots=True)
class LatestScore:
    entity_id: Hashable
    score: Decimal


@dataclass(frozen=True, slots=True)
class Range:
    """``[lower_bound, upper_bound)``, or ``[maximum, maximum]`` when terminal."""

    lower_bound: Decimal
    upper_bound: Decimal

    @property
    def is_terminal(self) -> bool:
        return self.lower_bound == self.upper_bound

    @property
    def label(self) -> str:
        closing = "]" if self.is_terminal else ")"
        return f"[{self.lower_bound}; {self.upper_bound}{closing}"


@dataclass(frozen=True, slots=True)
class HistogramBucket:
    range: Range
    count: int


@dataclass(frozen=True, slots=True)
class Histogram:
    maximum: Decimal
    buckets: tuple[HistogramBucket, ...]

    @property
    def labels(self) -> list[str]:
        return [b.range.label for b in self.buckets]

    @property
    def counts(self) -> list[int]:
        return [b.count for b in self.buckets]

    @property
    def total(self) -> int:
        return sum(b.count for b in self.buckets)


@dataclass(frozen=True, slots=True)
class NotApplicable:
    reason: str


HistogramResult = Histogram | NotApplicable


@dataclass(slots=True)
class Assignment:
    id: int
    name: str
    max_grade: Decimal | None
    due_date: datetime | None
