"""
Coercion helpers shared by the record schemas.

Records arrive from the backend loosely typed (legacy Portuguese
spellings, empty strings for "no reference", ids as ints). These
helpers turn them into the strict values the derivations expect.
"""

from datetime import date
from typing import Any, Optional

from realty_crm.db.models import Priority, PropertyCategory


# Values that mean "no reference" in a reference column
_EMPTY_REFERENCES = ("", "0")

_PRIORITY_SPELLINGS = {
    "low": Priority.LOW,
    "baixa": Priority.LOW,
    "medium": Priority.MEDIUM,
    "média": Priority.MEDIUM,
    "media": Priority.MEDIUM,
    "high": Priority.HIGH,
    "alta": Priority.HIGH,
}

_CATEGORY_SPELLINGS = {
    "apartment": PropertyCategory.APARTMENT,
    "apartamento": PropertyCategory.APARTMENT,
    "house": PropertyCategory.HOUSE,
    "casa": PropertyCategory.HOUSE,
    "land": PropertyCategory.LAND,
    "terreno": PropertyCategory.LAND,
    "commercial": PropertyCategory.COMMERCIAL,
    "comercial": PropertyCategory.COMMERCIAL,
    "other": PropertyCategory.OTHER,
    "outro": PropertyCategory.OTHER,
}


def coerce_id(value: Any) -> Any:
    """Ids are opaque strings; ints from older rows are stringified."""
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


def coerce_reference(value: Any) -> Optional[str]:
    """Map empty/"0"/None reference values to None."""
    if value is None:
        return None
    value = coerce_id(value)
    if isinstance(value, str) and value.strip() in _EMPTY_REFERENCES:
        return None
    return value


def coerce_text(value: Any) -> Any:
    """Null text columns render as empty strings."""
    return "" if value is None else value


def parse_priority(value: Any) -> Any:
    if isinstance(value, Priority):
        return value
    if isinstance(value, str):
        found = _PRIORITY_SPELLINGS.get(value.strip().casefold())
        if found is not None:
            return found
    raise ValueError(f"Unknown priority: {value!r}")


def parse_category(value: Any) -> Any:
    if isinstance(value, PropertyCategory):
        return value
    if isinstance(value, str):
        found = _CATEGORY_SPELLINGS.get(value.strip().casefold())
        if found is not None:
            return found
    raise ValueError(f"Unknown property category: {value!r}")


def normalize_iso_date(value: Any) -> str:
    """
    Return the date as YYYY-MM-DD.

    Accepts date objects and ISO strings; a timestamp string keeps only
    its calendar part ("2024-06-01T10:00:00Z" -> "2024-06-01").
    """
    if isinstance(value, date):
        return value.isoformat()
    if not isinstance(value, str) or not value.strip():
        raise ValueError("A data é obrigatória.")
    raw = value.strip()[:10]
    try:
        return date.fromisoformat(raw).isoformat()
    except ValueError:
        raise ValueError(f"Invalid calendar date: {value!r}")


def require_text(value: Optional[str], message: str) -> str:
    """Reject None/blank strings with a user-facing message."""
    if value is None or not value.strip():
        raise ValueError(message)
    return value
