"""Raw value coercion into typed scalars.

Feeds are hand-made spreadsheets as often as exports, so numbers arrive as
``"2 500,75"`` and lists as ``"м. Сокол; м. Аэропорт"``. Absent numbers are
``None``, never zero.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable
from typing import Any

from catalog_sync.models.enums import Category, DealType, Status

_DECIMAL_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")
_LIST_SEPARATORS = re.compile(r"[,;|]")
_WHITESPACE = re.compile(r"\s+")


def as_string(value: Any) -> str:
    """Stringify a scalar; non-scalars become an empty string."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return str(value)
    return ""


def as_number(value: Any) -> float | int | None:
    """Parse a locale-tolerant number.

    Whitespace is dropped and a comma is read as the decimal separator.

    Returns
    -------
    float | int | None
        The number, or None when the value is not a finite number.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else None
    if not isinstance(value, str):
        return None

    text = _WHITESPACE.sub("", value).replace(",", ".")
    if not _DECIMAL_RE.match(text):
        return None
    number = float(text)
    if not math.isfinite(number):
        return None
    return number


def as_int(value: Any) -> int | None:
    """Parse a whole number; fractional or absent values give None."""
    number = as_number(value)
    if number is None or not float(number).is_integer():
        return None
    return int(number)


def as_string_list(value: Any) -> list[str]:
    """Coerce a list or a delimited string into trimmed, non-empty strings."""
    if isinstance(value, (list, tuple)):
        items = [as_string(item).strip() for item in value]
    else:
        text = as_string(value)
        if not text:
            return []
        items = [part.strip() for part in _LIST_SEPARATORS.split(text)]
    return unique(item for item in items if item)


def unique(values: Iterable[str]) -> list[str]:
    """De-duplicate while keeping first-seen order."""
    return list(dict.fromkeys(values))


def normalize_status(value: Any) -> Status:
    """Map free text to a record status; unknown text means active."""
    text = as_string(value).strip().lower()
    if text == Status.HIDDEN.value:
        return Status.HIDDEN
    if text == Status.ARCHIVED.value:
        return Status.ARCHIVED
    return Status.ACTIVE


def normalize_category(value: Any) -> Category:
    """Map free text to a category; unknown text means newbuild."""
    text = as_string(value).strip().lower()
    if text == Category.SECONDARY.value:
        return Category.SECONDARY
    if text == Category.RENT.value:
        return Category.RENT
    return Category.NEWBUILD


def normalize_deal_type(value: Any) -> DealType:
    """Map free text to a deal type; anything but rent is a sale."""
    text = as_string(value).strip().lower()
    return DealType.RENT if text == DealType.RENT.value else DealType.SALE
