"""
Command handlers - what happens when the agent clicks a button.

One place for every write the CRM performs:
- Adding/removing contacts, appointments and properties
- Toggling an appointment's completion
- Producing the contacts export

Handlers validate first, then call the data service. They never patch
the snapshot: the change notification triggers a full reload.
"""

from typing import Dict, Any

from realty_crm.core.errors import DataServiceError, RecordNotFound, ValidationFailure, WriteFailure
from realty_crm.core.logging import with_context
from realty_crm.schemas.appointment import Appointment, AppointmentCreate
from realty_crm.schemas.contact import Contact, ContactCreate
from realty_crm.schemas.property import Property, PropertyCreate
from realty_crm.services.data_service import Collection, DataService
from realty_crm.services.derivations import export_contacts_csv
from realty_crm.services.view_state import ViewStateStore
import logging

logger = logging.getLogger(__name__)


class CommandHandlers:
    """
    Service class for user-initiated writes.

    Every backend failure becomes a WriteFailure naming the operation,
    so the client can show it and keep the form filled for a retry.
    """

    def __init__(self, data_service: DataService, store: ViewStateStore):
        """
        Args:
            data_service: Backend to write to
            store: Current view state, read for toggles and exports
        """
        self.data_service = data_service
        self.store = store

    def _insert(self, collection: Collection, record: Dict[str, Any], failure_message: str) -> Dict[str, Any]:
        try:
            return self.data_service.insert(collection, record)
        except DataServiceError as e:
            logger.error(f"{failure_message} ({e})")
            raise WriteFailure(f"insert {collection.value}", failure_message) from e

    def _delete(self, collection: Collection, record_id: str, failure_message: str) -> None:
        log = with_context(logger, collection=collection.value, record_id=record_id)
        try:
            deleted = self.data_service.delete(collection, record_id)
        except DataServiceError as e:
            log.error(f"{failure_message} ({e})")
            raise WriteFailure(f"delete {collection.value}", failure_message) from e
        if not deleted:
            raise RecordNotFound(collection.value, record_id)
        log.info("Removed")

    # Contacts

    def add_contact(self, data: ContactCreate) -> Contact:
        logger.info(f"Adding contact: {data.name}")
        stored = self._insert(Collection.CONTACTS, data.model_dump(), "Erro ao adicionar cliente.")
        return Contact.model_validate(stored)

    def remove_contact(self, contact_id: str) -> None:
        self._delete(Collection.CONTACTS, contact_id, "Erro ao remover cliente.")

    # Appointments

    def add_appointment(self, data: AppointmentCreate) -> Appointment:
        logger.info(f"Adding appointment '{data.title}' on {data.scheduled_date}")
        stored = self._insert(Collection.APPOINTMENTS, data.model_dump(), "Erro ao adicionar compromisso.")
        return Appointment.model_validate(stored)

    def toggle_appointment(self, appointment_id: str) -> bool:
        """
        Flip an appointment's completion flag.

        Returns:
            The new value of the flag
        """
        current = self.store.snapshot.find(Collection.APPOINTMENTS, appointment_id)
        if current is None:
            raise RecordNotFound(Collection.APPOINTMENTS.value, appointment_id)

        completed = not current.completed
        log = with_context(logger, appointment_id=appointment_id)
        try:
            updated = self.data_service.update(
                Collection.APPOINTMENTS, appointment_id, {"completed": completed}
            )
        except DataServiceError as e:
            log.error(f"Toggle failed ({e})")
            raise WriteFailure("update appointments", "Erro ao atualizar compromisso.") from e
        if not updated:
            raise RecordNotFound(Collection.APPOINTMENTS.value, appointment_id)

        log.info(f"Marked {'completed' if completed else 'pending'}")
        return completed

    def remove_appointment(self, appointment_id: str) -> None:
        self._delete(Collection.APPOINTMENTS, appointment_id, "Erro ao remover compromisso.")

    # Properties

    def add_property(self, data: PropertyCreate) -> Property:
        logger.info(f"Adding property: {data.title}")
        stored = self._insert(Collection.PROPERTIES, data.model_dump(), "Erro ao adicionar imóvel.")
        return Property.model_validate(stored)

    def remove_property(self, property_id: str) -> None:
        self._delete(Collection.PROPERTIES, property_id, "Erro ao remover imóvel.")

    # Export

    def export_contacts(self) -> str:
        """
        CSV of every contact in the current snapshot.

        Raises:
            ValidationFailure: If there are no contacts
        """
        contacts = self.store.snapshot.contacts
        if not contacts:
            raise ValidationFailure("Não há clientes para exportar.")
        logger.info(f"Exporting {len(contacts)} contacts")
        return export_contacts_csv(contacts)
