from __future__ import annotations

from decimal import ROUND_DOWN, Decimal, InvalidOperation

DEFAULT_PRECISION = 2


def quantum(precision: int) -> Decimal:
    if precision < 0:
        raise ValueError(f"precision must be >= 0, got {precision}")
    return Decimal(1).scaleb(-precision)


def to_decimal(value: Decimal | int | float | str, precision: int = DEFAULT_PRECISION) -> Decimal:
    """Convert ``value`` to a Decimal truncated to ``precision`` fractional digits.

    Floats go through ``str()`` first so ``99.99`` stays ``99.99`` instead of
    picking up the binary expansion. Truncation matches how grades are stored
    upstream, where extra digits are cut rather than rounded.
    """
    if isinstance(value, bool):
        raise TypeError("bool is not a score")
    if isinstance(value, Decimal):
        number = value
    elif isinstance(value, float):
        number = Decimal(str(value))
    elif isinstance(value, (int, str)):
        try:
            number = Decimal(value.strip() if isinstance(value, str) else value)
        except InvalidOperation as exc:
            raise ValueError(f"not a decimal number: {value!r}") from exc
    else:
        raise TypeError(f"unsupported score type: {type(value).__name__}")

    if not number.is_finite():
        raise ValueError(f"score must be finite, got {value!r}")
    return number.quantize(quantum(precision), rounding=ROUND_DOWN)
