"""
Pydantic schemas for record validation and responses.

This module exports all schemas for easy importing.
"""

from realty_crm.schemas.contact import Contact, ContactCreate
from realty_crm.schemas.appointment import Appointment, AppointmentCreate
from realty_crm.schemas.property import Property, PropertyCreate
from realty_crm.schemas.template import MessageTemplate, TemplateUpdate
from realty_crm.schemas.views import DerivedStats

__all__ = [
    "Contact",
    "ContactCreate",
    "Appointment",
    "AppointmentCreate",
    "Property",
    "PropertyCreate",
    "MessageTemplate",
    "TemplateUpdate",
    "DerivedStats",
]
