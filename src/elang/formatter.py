"""Canonical display strings for elang values."""

from __future__ import annotations

import math
from decimal import Decimal

from .types import ElAbsent, ElArray, ElBool, ElNumber, ElString, ElValue

ABSENT_TEXT = "undefined"


def format_number(value: float) -> str:
    """
    Plain decimal digits (never exponent notation), so the text of a
    finite number always lexes back as a NUMBER literal.
    """
    if math.isnan(value):
        return "NaN"

    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"

    if value == 0:
        return "0"

    # repr gives the shortest digits that round-trip; Decimal expands them.
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_value(value: ElValue) -> str:
    match value:
        case ElBool(value=b):
            return "True" if b else "False"
        case ElString(value=s):
            return f'"{s}"'
        case ElNumber(value=num):
            return format_number(num)
        case ElArray(items=items):
            return "[" + ", ".join(format_value(item) for item in items) + "]"
        case ElAbsent():
            return ABSENT_TEXT

    return ABSENT_TEXT
