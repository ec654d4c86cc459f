"""Parsing and checking of user-entered record fields."""

from datetime import date, datetime
from typing import Any, Mapping, Optional

from dateutil.parser import isoparse

from .errors import ValidationError


def normalize_number(value: str) -> str:
    """
    Strip currency/grouping noise and accept a comma decimal separator.

    With both separators present, commas must be grouping marks ahead of
    the decimal point (1,234.56); anything else raises ValueError.
    """
    text = value.replace("$", "").replace(" ", "").strip()
    if "," in text and "." not in text:
        return text.replace(",", ".")
    if "," in text and text.rindex(",") > text.index("."):
        raise ValueError(f"ambiguous separators in {value!r}")
    return text.replace(",", "")


def parse_number(
    fields: Mapping[str, Any],
    name: str,
    required: bool = True,
    minimum: Optional[float] = None,
    positive: bool = False,
) -> Optional[float]:
    """
    Read a numeric field from a form mapping.

    Strings are accepted and normalized. Missing or blank values are an
    error when required, otherwise None.
    """
    raw = fields.get(name)
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        if required:
            raise ValidationError(f"{name} is required", field=name)
        return None
    if isinstance(raw, bool):
        raise ValidationError(f"{name} must be a number", field=name)

    try:
        value = float(normalize_number(raw) if isinstance(raw, str) else raw)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(f"{name} must be a number, got {raw!r}", field=name)
    if value != value or value in (float("inf"), float("-inf")):
        raise ValidationError(f"{name} must be a finite number", field=name)

    if positive and value <= 0:
        raise ValidationError(f"{name} must be greater than zero", field=name)
    if minimum is not None and value < minimum:
        raise ValidationError(f"{name} must be at least {minimum:g}", field=name)
    return value


def parse_int(
    fields: Mapping[str, Any], name: str, required: bool = True, positive: bool = False
) -> Optional[int]:
    """Read a whole-number field; fractional values are rejected."""
    value = parse_number(fields, name, required=required, positive=positive)
    if value is None:
        return None
    if not value.is_integer():
        raise ValidationError(f"{name} must be a whole number", field=name)
    return int(value)


def parse_text(fields: Mapping[str, Any], name: str, required: bool = True) -> Optional[str]:
    """Read a text field, trimmed. Blank counts as missing."""
    raw = fields.get(name)
    text = str(raw).strip() if raw is not None else ""
    if not text:
        if required:
            raise ValidationError(f"{name} is required", field=name)
        return None
    return text


def parse_date(
    fields: Mapping[str, Any], name: str = "date", default_today: bool = True
) -> Optional[str]:
    """
    Read an ISO 8601 date field and return it as YYYY-MM-DD.

    A missing date defaults to today unless default_today is False, in
    which case None is returned.
    """
    raw = fields.get(name)
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return date.today().isoformat() if default_today else None
    if isinstance(raw, datetime):
        return raw.date().isoformat()
    if isinstance(raw, date):
        return raw.isoformat()
    try:
        return isoparse(str(raw).strip()).date().isoformat()
    except ValueError:
        raise ValidationError(f"{name} must be an ISO date (YYYY-MM-DD), got {raw!r}", field=name)
