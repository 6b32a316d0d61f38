from decimal import Decimal

import pytest

from gradechart.bucketizer import (
    ScoreOutOfRangeError,
    build_buckets,
    count_in_ranges,
    within_range,
)
from gradechart.partitioner import partition


def test_count_hundred_example() -> None:
    ranges = partition(100, 10)
    counts = count_in_ranges(ranges, [0, 10, 55, 100, 100, 99.99])
    assert counts == [1, 1, 0, 0, 0, 1, 0, 0, 0, 1, 2]


def test_maximum_lands_in_terminal_singleton() -> None:
    ranges = partition(10, 3)
    counts = count_in_ranges(ranges, ["10", "10.00", Decimal("10.001")])
    assert counts == [0, 0, 0, 3]


def test_boundary_goes_to_range_starting_there() -> None:
    ranges = partition(10, 3)
    counts = count_in_ranges(ranges, ["3.33", "3.329", "6.66", "9.999"])
    assert counts == [1, 1, 2, 0]


def test_count_conservation() -> None:
    ranges = partition(57, 7)
    scores = [Decimal(i) / 4 for i in range(0, 57 * 4 + 1)]
    counts = count_in_ranges(ranges, scores)
    assert sum(counts) == len(scores)
    assert len(counts) == len(ranges)


def test_out_of_range_scores_are_rejected() -> None:
    ranges = partition(100, 10)
    with pytest.raises(ScoreOutOfRangeError):
        count_in_ranges(ranges, [50, 100.5])
    with pytest.raises(ScoreOutOfRangeError):
        count_in_ranges(ranges, [-1])


def test_within_range_filters_before_counting() -> None:
    ranges = partition(100, 10)
    scores = within_range([-1, 0, 50, 100, 101], 100)
    assert scores == [Decimal("0.00"), Decimal("50.00"), Decimal("100.00")]
    assert sum(count_in_ranges(ranges, scores)) == 3


def test_count_is_idempotent() -> None:
    ranges = partition(20, 4)
    scores = [1, 5, 5, 19.99, 20]
    assert count_in_ranges(ranges, scores) == count_in_ranges(ranges, scores)


def test_build_buckets_pairs_ranges_with_counts() -> None:
    ranges = partition(20, 2)
    buckets = build_buckets(ranges, [0, 12, 20])

    assert [b.range for b in buckets] == ranges
    assert [b.count for b in buckets] == [1, 1, 1]


def test_empty_ranges() -> None:
    with pytest.raises(ValueError):
        count_in_ranges([], [1])
