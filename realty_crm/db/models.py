"""
Database models (tables).

These classes define the structure of the three collections.
Each class becomes a table, each attribute becomes a column.
"""

import enum
import uuid

from sqlalchemy import Column, String, Boolean, Float, Text
from realty_crm.db.database import Base


def _new_id() -> str:
    """Opaque identifier assigned on insert."""
    return uuid.uuid4().hex


class Priority(str, enum.Enum):
    """
    Appointment priority.

    Strict total order High > Medium > Low, see `rank`.
    """
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {Priority.HIGH: 3, Priority.MEDIUM: 2, Priority.LOW: 1}


class PropertyCategory(str, enum.Enum):
    """Kinds of listing the agent handles."""
    APARTMENT = "Apartment"
    HOUSE = "House"
    LAND = "Land"
    COMMERCIAL = "Commercial"
    OTHER = "Other"


class Contact(Base):
    """
    Contact model - a client or lead of the agent.

    interested_property_id is a weak reference: no foreign key, the
    property may be deleted while contacts still point at it.
    """

    __tablename__ = "contacts"

    id = Column(String(32), primary_key=True, default=_new_id)
    name = Column(String(255), nullable=False, index=True)
    email = Column(String(255), nullable=False, default="")
    phone = Column(String(50), nullable=False, default="")
    interested_property_id = Column(String(32), nullable=True)

    def __repr__(self):
        return f"<Contact(id={self.id}, name={self.name})>"


class Appointment(Base):
    """
    Appointment model - one entry in the agent's agenda.

    scheduled_date is an ISO calendar date string (YYYY-MM-DD) so it
    sorts lexicographically.
    """

    __tablename__ = "appointments"

    id = Column(String(32), primary_key=True, default=_new_id)
    title = Column(String(255), nullable=False)
    completed = Column(Boolean, default=False, nullable=False)
    priority = Column(String(10), default=Priority.MEDIUM.value, nullable=False)  # Priority value
    contact_id = Column(String(32), nullable=True)  # Weak reference to Contact
    scheduled_date = Column(String(10), nullable=False, index=True)

    def __repr__(self):
        return f"<Appointment(id={self.id}, date={self.scheduled_date}, priority={self.priority})>"


class Property(Base):
    """Property model - a listing in the agent's portfolio."""

    __tablename__ = "properties"

    id = Column(String(32), primary_key=True, default=_new_id)
    title = Column(String(255), nullable=False, index=True)
    address = Column(Text, nullable=False)
    price = Column(Float, nullable=False, default=0)
    listing_url = Column(Text, nullable=False, default="")
    photo_url = Column(Text, nullable=False, default="")
    category = Column(String(20), default=PropertyCategory.APARTMENT.value, nullable=False)  # PropertyCategory value

    def __repr__(self):
        return f"<Property(id={self.id}, title={self.title}, price={self.price})>"
