"""
Converters module for data_extractor.

Pure functions turning raw extracted text into typed values. None of them
raise: unparseable input becomes NaN or False.
"""

import math
import re
from typing import Any, Optional, Union

_NON_NUMERIC = re.compile(r"[^0-9.\-]")

BOOLEAN_TRUE_VALUES = frozenset({"true", "t", "yes", "y", "1"})


def identity(value: Any) -> Any:
    return value


def to_number(value: Optional[str]) -> Union[int, float]:
    """
    Convert text such as "$5,000" or "-12.5 kg" to a number.

    Every character that is not a digit, "." or "-" is dropped before
    parsing. Whole numbers without a decimal point come back as int,
    everything else as float.

    Args:
        value: Raw text

    Returns:
        The parsed number, or math.nan when nothing numeric remains
    """
    if value is None:
        return math.nan

    cleaned = _NON_NUMERIC.sub("", str(value))
    try:
        return int(cleaned)
    except ValueError:
        pass

    try:
        return float(cleaned)
    except ValueError:
        return math.nan


def to_boolean(value: Optional[str]) -> bool:
    """Return True for "true", "t", "yes", "y" or "1" in any case."""
    if value is None:
        return False
    return str(value).lower() in BOOLEAN_TRUE_VALUES
