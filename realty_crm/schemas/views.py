"""
Derived view schemas.

These are computed from the raw collections on every request and are
never persisted.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from realty_crm.db.models import Priority
from realty_crm.schemas.appointment import Appointment
from realty_crm.schemas.contact import Contact


class DerivedStats(BaseModel):
    """
    Dashboard statistics.

    pending_by_priority always carries all three levels, zero when
    absent. upcoming holds at most three pending appointments.
    """

    total_contacts: int = 0
    total_properties: int = 0
    total_appointments: int = 0
    pending_appointments: int = 0
    pending_by_priority: Dict[Priority, int] = Field(default_factory=dict)
    upcoming: List[Appointment] = Field(default_factory=list)


class ContactView(Contact):
    """Contact plus the resolved title of the property it is interested in."""
    interested_property_title: str


class AppointmentView(Appointment):
    """Appointment plus the resolved contact name."""
    contact_name: str


class DashboardResponse(BaseModel):
    total_contacts: int
    total_properties: int
    total_appointments: int
    pending_appointments: int
    pending_by_priority: Dict[Priority, int]
    upcoming: List[AppointmentView]
    rejected_records: int
    loaded_at: Optional[str] = None


class ReloadResponse(BaseModel):
    contacts: int
    appointments: int
    properties: int
    rejected_records: int


class LinksResponse(BaseModel):
    """Deep links for one contact. None when the channel is unavailable."""
    whatsapp: Optional[str] = None
    dial: Optional[str] = None
    email: Optional[str] = None


class ClipboardResponse(BaseModel):
    email: str
    message: str


class WhatsappLinkResponse(BaseModel):
    url: str
