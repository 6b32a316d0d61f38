from __future__ import annotations

from collections.abc import Iterable, Sequence
from decimal import Decimal

from gradechart.models import HistogramBucket, Range
from gradechart.precision import DEFAULT_PRECISION, to_decimal


class ScoreOutOfRangeError(ValueError):
    def __init__(self, score: Decimal, maximum: Decimal) -> None:
        super().__init__(f"score {score} is outside [0, {maximum}]")
        self.score = score
        self.maximum = maximum


def within_range(
    scores: Iterable[Decimal | int | float | str],
    maximum: Decimal | int | float | str,
    precision: int = DEFAULT_PRECISION,
) -> list[Decimal]:
    top = to_decimal(maximum, precision)
    kept: list[Decimal] = []
    for raw in scores:
        score = to_decimal(raw, precision)
        if 0 <= score <= top:
            kept.append(score)
    return kept


def count_in_ranges(
    ranges: Sequence[Range],
    scores: Iterable[Decimal | int | float | str],
    precision: int = DEFAULT_PRECISION,
) -> list[int]:
    """Count scores per range, positionally aligned with ``ranges``.

    Each score goes to the last range whose lower bound it reaches, so a score
    equal to the maximum lands in the terminal singleton and a score sitting
    on a boundary goes to the range that starts there.
    """
    if not ranges:
        raise ValueError("ranges must not be empty")

    lowers = [to_decimal(r.lower_bound, precision) for r in ranges]
    top = to_decimal(ranges[-1].upper_bound, precision)
    counts = [0] * len(ranges)

    for raw in scores:
        score = to_decimal(raw, precision)
        if score < lowers[0] or score > top:
            raise ScoreOutOfRangeError(score, top)
        for i in range(len(lowers) - 1, -1, -1):
            if score >= lowers[i]:
                counts[i] += 1
                break

    return counts


def build_buckets(
    ranges: Sequence[Range],
    scores: Iterable[Decimal | int | float | str],
    precision: int = DEFAULT_PRECISION,
) -> list[HistogramBucket]:
    counts = count_in_ranges(ranges, scores, precision)
    return [HistogramBucket(range=r, count=c) for r, c in zip(ranges, counts, strict=True)]
