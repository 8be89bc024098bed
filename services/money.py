# Money helpers — the one numeric guard every price passes through
# Reference data is not perfectly typed: fares can be missing, strings,
# NaN. Anything that is not a finite real number counts as 0.

import math
from numbers import Real
from typing import Iterable

import numpy as np


def safe_num(value) -> float:
    """Return value as a finite number, or 0 for anything else (None, str, NaN, bool)."""
    if isinstance(value, bool) or not isinstance(value, Real):
        return 0
    if not math.isfinite(value):
        return 0
    return value


def positive(value) -> float:
    v = safe_num(value)
    return v if v > 0 else 0


def median(values: Iterable) -> float:
    """Median of the numeric values; 0 for an empty input."""
    nums = [safe_num(v) for v in values]
    if not nums:
        return 0
    return float(np.median(nums))


def round_money(value) -> float:
    return round(safe_num(value), 2)


def format_inr(amount) -> str:
    """Rupee amount with Indian digit grouping and no decimals: ₹1,23,456."""
    n    = int(round(safe_num(amount)))
    sign = "-" if n < 0 else ""
    digits = str(abs(n))

    if len(digits) > 3:
        head, tail = digits[:-3], digits[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        digits = ",".join(groups) + "," + tail

    return f"{sign}₹{digits}"
