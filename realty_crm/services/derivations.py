"""
View-state derivations.

Pure functions that turn the raw collections plus the current filter
inputs into what the dashboard and lists display:
- Summary statistics and the three soonest pending appointments
- The day planner for a selected date
- Contact search and property search/filter
- The contacts CSV export

Nothing here touches the database or module state; every input is an
explicit argument.
"""

import csv
import enum
import io
import re
import unicodedata
from decimal import Decimal
from typing import Iterable, List, Optional, Sequence, Union

from realty_crm.db.models import Priority, PropertyCategory
from realty_crm.schemas.appointment import Appointment
from realty_crm.schemas.common import parse_category
from realty_crm.schemas.contact import Contact
from realty_crm.schemas.property import Property
from realty_crm.schemas.views import DerivedStats


UPCOMING_LIMIT = 3

CSV_HEADER = ("ID", "Nome", "Email", "Telefone", "Imovel_Interesse_ID")

# Placeholders for references that are empty or no longer resolve
NO_CONTACT = "Sem cliente"
CONTACT_NOT_FOUND = "Cliente não encontrado"
NO_PROPERTY = "Nenhum imóvel associado"
PROPERTY_NOT_FOUND = "Imóvel (ID) não encontrado"

_ALL_SELECTORS = ("", "all", "todos")
_NON_DIGITS = re.compile(r"[^0-9]")


class PriceBand(str, enum.Enum):
    """
    Price filter buckets.

    Each band is (lower, upper]: exclusive lower bound, inclusive upper
    bound, in the same unit the price is stored in.
    """
    ALL = "all"
    UP_TO_100K = "100k"
    UP_TO_300K = "300k"
    UP_TO_500K = "500k"
    UP_TO_1M = "1m"
    ABOVE_1M = "1m+"

    def contains(self, price: float) -> bool:
        if self is PriceBand.ALL:
            return True
        lower, upper = _BAND_BOUNDS[self]
        if lower is not None and price <= lower:
            return False
        if upper is not None and price > upper:
            return False
        return True


_BAND_BOUNDS = {
    PriceBand.UP_TO_100K: (None, 100_000),
    PriceBand.UP_TO_300K: (100_000, 300_000),
    PriceBand.UP_TO_500K: (300_000, 500_000),
    PriceBand.UP_TO_1M: (500_000, 1_000_000),
    PriceBand.ABOVE_1M: (1_000_000, None),
}


def parse_price_band(value: Union[PriceBand, str, None]) -> PriceBand:
    """Accept a PriceBand, its string value, or "all"/"Todos"/None."""
    if isinstance(value, PriceBand):
        return value
    if value is None or value.strip().casefold() in _ALL_SELECTORS:
        return PriceBand.ALL
    return PriceBand(value.strip().lower())


def parse_category_filter(value: Union[PropertyCategory, str, None]) -> Optional[PropertyCategory]:
    """None means "all categories"."""
    if value is None or isinstance(value, PropertyCategory):
        return value
    if value.strip().casefold() in _ALL_SELECTORS:
        return None
    return parse_category(value)


def _title_key(title: str):
    # Accent-insensitive first, then case-insensitive, then exact
    stripped = "".join(
        ch for ch in unicodedata.normalize("NFKD", title) if not unicodedata.combining(ch)
    )
    return (stripped.casefold(), title.casefold(), title)


def _upcoming_key(appointment: Appointment):
    # ISO dates are fixed width, so string order is date order
    return (
        appointment.scheduled_date,
        -appointment.priority.rank,
        _title_key(appointment.title),
        appointment.id,
    )


def compute_stats(
    contacts: Sequence[Contact],
    properties: Sequence[Property],
    appointments: Sequence[Appointment],
) -> DerivedStats:
    """
    Dashboard statistics for the given collections.

    Pending means not completed. The upcoming list is ordered by date,
    then priority (High first); title and id only break exact ties so
    the result never depends on input order.
    """
    pending = [a for a in appointments if not a.completed]

    by_priority = {Priority.HIGH: 0, Priority.MEDIUM: 0, Priority.LOW: 0}
    for appointment in pending:
        by_priority[appointment.priority] += 1

    upcoming = sorted(pending, key=_upcoming_key)[:UPCOMING_LIMIT]

    return DerivedStats(
        total_contacts=len(contacts),
        total_properties=len(properties),
        total_appointments=len(appointments),
        pending_appointments=len(pending),
        pending_by_priority=by_priority,
        upcoming=upcoming,
    )


def appointments_for_day(appointments: Iterable[Appointment], selected_date: str) -> List[Appointment]:
    """
    Every appointment on `selected_date`, completed ones included.

    Exact string match on the ISO date. Ordered by priority (High
    first), then title.
    """
    day = [a for a in appointments if a.scheduled_date == selected_date]
    return sorted(day, key=lambda a: (-a.priority.rank, _title_key(a.title), a.id))


def filter_contacts(contacts: Sequence[Contact], query: str) -> List[Contact]:
    """
    Contacts whose name, email or phone contains `query`.

    Name and email match case-insensitively; phone matches the literal
    text. An empty query returns every contact in the given order.
    """
    if not query:
        return list(contacts)

    folded = query.casefold()
    return [
        c for c in contacts
        if folded in c.name.casefold()
        or folded in c.email.casefold()
        or query in c.phone
    ]


def price_digits(price: float) -> str:
    """The price as plain digits, e.g. 250000.0 -> "250000", 5e-05 -> "0.00005"."""
    if float(price).is_integer():
        return str(int(price))
    # Shortest round-trip digits, never in exponent form
    return format(Decimal(repr(float(price))), "f")


def filter_properties(
    properties: Sequence[Property],
    query: str = "",
    category: Union[PropertyCategory, str, None] = None,
    price_band: Union[PriceBand, str, None] = PriceBand.ALL,
) -> List[Property]:
    """
    Apply the text search, the category and the price band together.

    The text matches title or address (case-insensitive), or the digits
    of the query against the digits of the price. Order is preserved.
    """
    category = parse_category_filter(category)
    band = parse_price_band(price_band)
    result = list(properties)

    if query:
        folded = query.casefold()
        digits = _NON_DIGITS.sub("", query)
        result = [
            p for p in result
            if folded in p.title.casefold()
            or folded in p.address.casefold()
            or (digits and digits in price_digits(p.price))
        ]

    if category is not None:
        result = [p for p in result if p.category is category]

    if band is not PriceBand.ALL:
        result = [p for p in result if band.contains(p.price)]

    return result


def export_contacts_csv(contacts: Iterable[Contact]) -> str:
    """
    Encode contacts as CSV.

    Fixed header, then one row per contact in the given order. Every
    field is double-quoted, embedded quotes are doubled, missing values
    are empty. No newline after the last row.
    """
    buffer = io.StringIO()
    buffer.write(",".join(CSV_HEADER) + "\n")

    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for contact in contacts:
        writer.writerow([
            contact.id or "",
            contact.name or "",
            contact.email or "",
            contact.phone or "",
            contact.interested_property_id or "",
        ])

    return buffer.getvalue()[:-1]


def resolve_contact_name(contacts: Iterable[Contact], contact_id: Optional[str]) -> str:
    """Name of the referenced contact, or a placeholder."""
    if not contact_id:
        return NO_CONTACT
    for contact in contacts:
        if contact.id == contact_id:
            return contact.name
    return CONTACT_NOT_FOUND


def resolve_property_title(properties: Iterable[Property], property_id: Optional[str]) -> str:
    """Title of the referenced property, or a placeholder."""
    if not property_id:
        return NO_PROPERTY
    for prop in properties:
        if prop.id == property_id:
            return prop.title
    return PROPERTY_NOT_FOUND
