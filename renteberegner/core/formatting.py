"""Danish display formatting for amounts and rates."""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Context, Decimal

CURRENCY_SUFFIX = "kr."

# wide enough for any finite float
_CONTEXT = Context(prec=400)

_COMPACT_UNITS = (
    (1_000_000_000, "mia."),
    (1_000_000, "mio."),
)


def _round_half_up(value: float, decimals: int) -> Decimal:
    quantum = Decimal(1).scaleb(-decimals)
    return Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP, context=_CONTEXT)


def format_grouped(value: float, decimals: int = 0) -> str:
    """12345.6 -> '12.346'; thousands grouped with '.', decimal comma."""
    if not math.isfinite(value):
        return "-" if math.isnan(value) else ("-∞" if value < 0 else "∞")
    rounded = _round_half_up(value, decimals)
    if rounded == 0:
        rounded = abs(rounded)
    text = f"{rounded:,.{decimals}f}"
    return text.replace(",", "_").replace(".", ",").replace("_", ".")


def format_dkk(value: float, decimals: int = 0) -> str:
    return f"{format_grouped(value, decimals)} {CURRENCY_SUFFIX}"


def format_dkk_compact(value: float) -> str:
    """Short form for large amounts, e.g. '13,4 mio. kr.'."""
    magnitude = abs(value)
    for threshold, unit in _COMPACT_UNITS:
        if magnitude >= threshold:
            return f"{format_grouped(value / threshold, 1)} {unit} {CURRENCY_SUFFIX}"
    if magnitude >= 1_000:
        return f"{format_grouped(value / 1_000, 0)} t. {CURRENCY_SUFFIX}"
    return format_dkk(value)


def format_percent(value: float, decimals: int = 1) -> str:
    return f"{format_grouped(value, decimals)} %"


def format_rate_label(annual_rate_percent: float) -> str:
    """Legend label for a comparison line, e.g. '12.0%'."""
    return f"{annual_rate_percent:.1f}%"
