from decimal import Decimal

import pytest

from gradechart.models import Range
from gradechart.partitioner import partition


def _d(value: str) -> Decimal:
    return Decimal(value)


def test_partition_hundred_into_ten() -> None:
    ranges = partition(100, 10)

    assert len(ranges) == 11
    assert ranges[0] == Range(_d("0.00"), _d("10.00"))
    assert ranges[9] == Range(_d("90.00"), _d("100.00"))
    assert ranges[10] == Range(_d("100.00"), _d("100.00"))
    assert ranges[10].is_terminal
    assert not any(r.is_terminal for r in ranges[:-1])


def test_partition_zero_maximum() -> None:
    assert partition(0, 10) == [Range(_d("0.00"), _d("0.00"))]


def test_uneven_step_closes_at_maximum() -> None:
    ranges = partition(10, 3)

    assert [(str(r.lower_bound), str(r.upper_bound)) for r in ranges] == [
        ("0.00", "3.33"),
        ("3.33", "6.66"),
        ("6.66", "10.00"),
        ("10.00", "10.00"),
    ]


def test_float_maximum_does_not_drift() -> None:
    ranges = partition(0.3, 3)
    assert [r.upper_bound for r in ranges] == [_d("0.10"), _d("0.20"), _d("0.30"), _d("0.30")]


def test_step_below_precision_widens_to_one_quantum() -> None:
    ranges = partition("0.05", 10)
    uppers = [str(r.upper_bound) for r in ranges]
    assert uppers == ["0.01", "0.02", "0.03", "0.04", "0.05", "0.05"]


def test_more_buckets_than_quanta_keeps_resolution() -> None:
    ranges = partition(5, 1000)
    assert len(ranges) == 501
    assert ranges[0] == Range(_d("0.00"), _d("0.01"))
    assert ranges[-2] == Range(_d("4.99"), _d("5.00"))
    assert ranges[-1].is_terminal


def test_single_bucket() -> None:
    ranges = partition(20, 1)
    assert ranges == [Range(_d("0.00"), _d("20.00")), Range(_d("20.00"), _d("20.00"))]


@pytest.mark.parametrize(
    "maximum,bucket_count",
    [(100, 10), (10, 3), (7, 10), ("57.5", 4), (1, 7), ("0.01", 1), (33, 33), (1000, 6)],
)
def test_ranges_cover_zero_to_maximum(maximum, bucket_count) -> None:
    ranges = partition(maximum, bucket_count)
    top = ranges[-1].upper_bound
    half_open = ranges[:-1]

    assert len(ranges) >= 2
    assert len(half_open) <= bucket_count
    assert half_open[0].lower_bound == 0
    for prev, nxt in zip(half_open, half_open[1:]):
        assert prev.upper_bound == nxt.lower_bound
    for r in half_open:
        assert r.lower_bound < r.upper_bound
    assert half_open[-1].upper_bound == top
    assert ranges[-1].lower_bound == top


def test_invalid_arguments_fail_fast() -> None:
    with pytest.raises(ValueError):
        partition(100, 0)
    with pytest.raises(ValueError):
        partition(-1, 10)
    with pytest.raises(ValueError):
        partition(100, 10, precision=-1)


def test_labels() -> None:
    ranges = partition(100, 10)
    assert ranges[0].label == "[0.00; 10.00)"
    assert ranges[-1].label == "[100.00; 100.00]"
