"""Mini README: Rounding rules applied to every stored amount and area.

Structure:
    * generous_round - 2 decimals, nudging fractions above .95 up to a whole unit.
    * standard_round - conventional half-up to 2 decimals, never ``-0.0``.

The two rules are deliberately different. Generous rounding is applied to
operator-entered quantities (hectares, unit prices, service totals, expense
amounts) where 49.96 ha is really a 50 ha field. Standard rounding is used for
contributions and for every derived sum or balance, where compounding the
generous rule would distort totals. Both functions accept any float and never
raise; NaN and infinities pass through unchanged.
"""

from __future__ import annotations

import math
from decimal import ROUND_CEILING, ROUND_FLOOR, ROUND_HALF_UP, Context, Decimal

# Wide enough to quantise any finite float without InvalidOperation.
_CONTEXT = Context(prec=400, rounding=ROUND_HALF_UP)
_CENT = Decimal("0.01")
_GENEROUS_THRESHOLD = Decimal("0.95")


def _to_cents(value: float) -> Decimal:
    """Quantise the shortest decimal representation of ``value`` to cents.

    Going through ``repr`` drops binary artefacts (``1.005`` is stored as
    ``1.00499...``) before rounding half-up.
    """

    return Decimal(repr(float(value))).quantize(_CENT, context=_CONTEXT)


def standard_round(value: float) -> float:
    """Round half away from zero to 2 decimals, collapsing ``-0.0`` to ``0.0``."""

    value = float(value)
    if not math.isfinite(value):
        return value
    return float(_to_cents(value)) + 0.0


def generous_round(value: float) -> float:
    """Round to 2 decimals, then to the next whole unit when the fraction exceeds 0.95.

    Negative values are handled on their magnitude and the sign restored, so
    ``-49.96`` becomes ``-50.0``.
    """

    value = float(value)
    if not math.isfinite(value):
        return value
    magnitude = _to_cents(abs(value))
    fraction = magnitude - magnitude.to_integral_value(rounding=ROUND_FLOOR)
    if fraction > _GENEROUS_THRESHOLD:
        magnitude = magnitude.to_integral_value(rounding=ROUND_CEILING)
    result = float(magnitude)
    return (-result if value < 0 else result) + 0.0
