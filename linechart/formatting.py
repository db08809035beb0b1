from __future__ import annotations

from decimal import Decimal, InvalidOperation
import math


_COMPACT_SUFFIXES = ((1e12, "T"), (1e9, "B"), (1e6, "M"), (1e3, "K"))


def format_compact(value: float, *, step: float | None = None) -> str:
    """Short label text: thousands collapse to K/M/B/T, small values keep step precision."""
    if not math.isfinite(value):
        return str(value)
    if step is not None and math.isfinite(step) and step > 0 and abs(value) <= step * 1e-9:
        value = 0.0
    for threshold, suffix in _COMPACT_SUFFIXES:
        if abs(value) >= threshold:
            return _trim(_quantize(value / threshold, 1)) + suffix
    decimals = _decimals_from_step(step) if step is not None else 2
    return _trim(_quantize(value, min(decimals, 4)))


def format_compact_values(values: list[float]) -> list[str]:
    if not values:
        return []
    if len(values) == 1:
        return [format_compact(values[0])]
    step = abs(values[1] - values[0])
    return [format_compact(v, step=step if step > 0 else None) for v in values]


def _quantize(value: float, decimals: int) -> str:
    d = Decimal(str(value))
    quant = Decimal("1").scaleb(-decimals)
    try:
        q = d.quantize(quant)
    except InvalidOperation:
        q = d
    return format(q, "f")


def _trim(out: str) -> str:
    if "." in out:
        out = out.rstrip("0").rstrip(".")
    if out == "-0":
        out = "0"
    return out


def _decimals_from_step(step: float) -> int:
    if step <= 0 or not math.isfinite(step):
        return 2
    d = Decimal(str(step)).normalize()
    exp = d.as_tuple().exponent
    assert isinstance(exp, int)
    return max(0, -exp)
