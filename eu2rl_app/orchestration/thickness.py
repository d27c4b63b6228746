from __future__ import annotations

from math import floor, isfinite
from typing import Tuple

from eu2rl_app.domain.errors import ThicknessError

__all__ = ["expand_range", "parse_thickness"]

# Relative slack on floor((end - begin) / step) so "2:0.01:6" keeps its end point.
_RANGE_RTOL = 1e-9


def _number(text: str) -> float:
    try:
        return float(text.strip())
    except ValueError as e:
        raise ThicknessError("format", text, f"Not a number: {text.strip()!r}") from e


def expand_range(begin: float, step: float, end: float) -> Tuple[float, ...]:
    """[begin:step:end] → (begin, begin+step, ...), end included when reached.

    Raises ThicknessError for step ≤ 0 or end < begin instead of returning ().
    """
    if not (isfinite(begin) and isfinite(step) and isfinite(end)):
        raise ThicknessError("format", (begin, step, end), "Range bounds must be finite")
    if step <= 0.0:
        raise ThicknessError("degenerate_range", (begin, step, end), f"Range step must be > 0, got {step}")
    if end < begin:
        raise ThicknessError(
            "degenerate_range", (begin, step, end), f"Range end {end} is below begin {begin}"
        )
    ratio = (end - begin) / step
    n = floor(ratio + _RANGE_RTOL * max(1.0, abs(ratio)))
    return tuple(begin + i * step for i in range(n + 1))


def parse_thickness(text: str) -> Tuple[float, ...]:
    """Parse thickness input in mm.

    Accepts a single value ``"3"``, a comma list ``"2, 3, 4"`` or a range
    ``"2 : 0.01 : 6"``. Every value must be > 0.
    """
    raw = text.strip()
    if not raw:
        raise ThicknessError("empty", text, "No thickness given")

    if "," in raw:
        values = tuple(_number(item) for item in raw.split(",") if item.strip())
    elif ":" in raw:
        parts = raw.split(":")
        if len(parts) != 3:
            raise ThicknessError("format", text, "Range must be 'begin : step : end'")
        begin, step, end = (_number(p) for p in parts)
        values = expand_range(begin, step, end)
    else:
        values = (_number(raw),)

    if not values:
        raise ThicknessError("empty", text, "No thickness given")
    bad = [v for v in values if not isfinite(v) or v <= 0.0]
    if bad:
        raise ThicknessError("non_positive", bad[0], f"Thickness must be > 0 mm, got {bad[0]}")
    return values
