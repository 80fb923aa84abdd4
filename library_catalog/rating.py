"""
Rating quantizer.

Turns a continuous average rating into the discrete stars drawn on a
book card: ``full`` stars, at most one ``half`` star and ``empty``
outlines, always five in total. Any input is accepted; values that are
not numbers count as 0 and everything is clamped to ``[0, 5]``.
"""

from __future__ import annotations

import logging
import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, List, Optional

from .schemas import MAX_STARS, StarBreakdown


logger = logging.getLogger(__name__)

ICON_FULL = "star"
ICON_HALF = "star-half-full"
ICON_EMPTY = "star-outline"


def _coerce_rating(value: Any) -> float:
    """Return ``value`` as a float, or 0.0 when it is not a number.

    Numeric strings (``"4.2"``) are accepted. Booleans, ``None``, NaN and
    other objects count as 0. Huge integers are clamped before conversion
    so they cannot overflow.
    """
    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, int):
        return float(min(max(value, 0), MAX_STARS))
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            logger.debug("Non-numeric rating %r treated as 0", value)
            return 0.0
    else:
        try:
            number = float(value)
        except (TypeError, ValueError, OverflowError):
            logger.debug("Non-numeric rating %r treated as 0", value)
            return 0.0
    if math.isnan(number):
        return 0.0
    return number


def clamp_rating(value: Any) -> float:
    """Coerce ``value`` to a number and clamp it to ``[0, 5]``."""
    return min(max(_coerce_rating(value), 0.0), float(MAX_STARS))


def quantize(rating: Any) -> StarBreakdown:
    """Break a rating down into full, half and empty stars.

    Parameters
    ----------
    rating : Any
        The average rating. Missing or non-numeric values count as 0.

    Returns
    -------
    StarBreakdown
        Star counts with ``full + half + empty == 5``. The label is left
        empty; use ``rate()`` for a breakdown with its label.
    """
    clamped = clamp_rating(rating)
    full = int(math.floor(clamped))
    half = 1 if clamped % 1 >= 0.5 else 0
    return StarBreakdown(full=full, half=half, empty=MAX_STARS - full - half)


def _format_count(count: Any) -> Optional[str]:
    """Render a ratings count, or ``None`` when it is not a positive number.

    Numeric strings and floats are accepted; whole numbers drop their
    fractional part (``3.0`` renders as ``"3"``).
    """
    if count is None or isinstance(count, bool):
        return None
    if isinstance(count, int):
        return str(count) if count > 0 else None
    try:
        number = float(count.strip() if isinstance(count, str) else count)
    except (TypeError, ValueError, OverflowError):
        return None
    if math.isnan(number) or math.isinf(number) or number <= 0:
        return None
    if number.is_integer():
        return str(int(number))
    return f"{number:g}"


def format_rating_label(rating: Any, count: Any = None) -> str:
    """Format the text shown next to the stars, e.g. ``"4.25 (12)"``.

    The clamped rating always gets exactly two decimals, rounding halves
    away from zero on the exact value. The ratings count is appended only
    when it is a number greater than zero (ints, floats or numeric
    strings).
    """
    value = Decimal(clamp_rating(rating)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    label = f"{value:.2f}"
    shown = _format_count(count)
    if shown is not None:
        label = f"{label} ({shown})"
    return label


def rate(rating: Any, count: Any = None) -> StarBreakdown:
    """Quantize ``rating`` and attach its display label."""
    stars = quantize(rating)
    return stars.model_copy(update={"label": format_rating_label(rating, count)})


def star_icons(stars: StarBreakdown) -> List[str]:
    """Icon names in drawing order: full stars, the half star, then outlines."""
    return [ICON_FULL] * stars.full + [ICON_HALF] * stars.half + [ICON_EMPTY] * stars.empty
