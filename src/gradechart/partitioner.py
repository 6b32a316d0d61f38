from __future__ import annotations

from decimal import Decimal

from gradechart.models import Range
from gradechart.precision import DEFAULT_PRECISION, quantum, to_decimal

DEFAULT_BUCKET_COUNT = 10


def partition(
    maximum: Decimal | int | float | str,
    bucket_count: int = DEFAULT_BUCKET_COUNT,
    precision: int = DEFAULT_PRECISION,
) -> list[Range]:
    """Split ``[0, maximum]`` into ``bucket_count`` half-open ranges plus ``[maximum, maximum]``.

    The step is divided once and truncated to ``precision`` digits, then added
    repeatedly with exact decimal arithmetic. Since a truncated step never
    overshoots, the last half-open range is closed off at ``maximum`` and
    absorbs the truncation residual, e.g. ``maximum=10, bucket_count=3`` gives
    ``[0; 3.33) [3.33; 6.66) [6.66; 10.00) [10.00; 10.00]``.
    """
    if bucket_count < 1:
        raise ValueError(f"bucket_count must be >= 1, got {bucket_count}")

    top = to_decimal(maximum, precision)
    if top < 0:
        raise ValueError(f"maximum must be >= 0, got {maximum}")

    zero = to_decimal(0, precision)
    if top == 0:
        return [Range(zero, zero)]

    # More buckets than quanta: widen to one quantum, which yields fewer ranges.
    step = max(to_decimal(top / bucket_count, precision), quantum(precision))
    ranges: list[Range] = []
    lower = zero
    while lower < top:
        upper = lower + step
        if upper >= top or len(ranges) == bucket_count - 1:
            upper = top
        ranges.append(Range(lower, upper))
        lower = upper

    ranges.append(Range(top, top))
    return ranges
