from __future__ import annotations

import math

from covfold.core.model.types import FULL_COVERAGE


def pct(covered: int, total: int, *, full: float = float(FULL_COVERAGE)) -> float:
    """Return the coverage percentage, defaulting to `full` when no total exists.

    The value is floored to two decimals so 99.999% never reads as 100%.
    """
    if total == 0:
        return full
    return math.floor((covered * full * 100) / total) / 100


__all__ = ["pct"]
