from __future__ import annotations

import logging
import math

from .quarter import Quarter
from .types import CodeReference

logger = logging.getLogger(__name__)


def round_half_away_from_zero(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def estimate_quarter(lower: CodeReference, upper: CodeReference, target_code: int) -> Quarter:
    """Interpolate the quarter of ``target_code`` between two known codes.

    Codes outside ``[lower.code, upper.code]`` extrapolate; the result is
    not clamped.
    """
    diff = upper.code - lower.code
    if diff == 0:
        return lower.quarter

    scale = abs(1 - (upper.code - target_code) / diff)
    span = upper.quarter.linearize() - lower.quarter.linearize()
    quarters_to_add = round_half_away_from_zero(span * scale)
    result = lower.quarter.add_quarters(quarters_to_add)

    logger.info(
        "Estimated quarter between %s (%s) and %s (%s): %s (%+d; scale %.2f)",
        lower.quarter,
        lower.code,
        upper.quarter,
        upper.code,
        result,
        quarters_to_add,
        scale,
    )
    return result


def initial_guess(
    lower: CodeReference | None,
    upper: CodeReference | None,
    target_code: int,
) -> Quarter | None:
    if lower is not None and upper is not None:
        return estimate_quarter(lower, upper, target_code)
    single = lower or upper
    return single.quarter if single is not None else None
