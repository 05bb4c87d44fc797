"""
View-state store.

Holds the current snapshot of the three collections and rebuilds it
wholesale whenever the backend reports a change. Readers always get a
complete snapshot; a reload swaps the reference in one assignment.
"""

import enum
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple, Type

from pydantic import BaseModel, ValidationError

from realty_crm.core.errors import DataServiceError
from realty_crm.core.logging import with_context
from realty_crm.schemas.appointment import Appointment
from realty_crm.schemas.contact import Contact
from realty_crm.schemas.property import Property
from realty_crm.services.data_service import ChangeEvent, Collection, DataService, Subscription
from realty_crm.services.derivations import resolve_contact_name, resolve_property_title
import logging

logger = logging.getLogger(__name__)


_RECORD_MODELS: Dict[Collection, Type[BaseModel]] = {
    Collection.CONTACTS: Contact,
    Collection.APPOINTMENTS: Appointment,
    Collection.PROPERTIES: Property,
}


class ReloadState(str, enum.Enum):
    IDLE = "idle"
    LOADING = "loading"


@dataclass(frozen=True)
class Snapshot:
    """
    One consistent view of the backend's collections.

    rejected counts raw records dropped because they failed to parse
    during the reload that produced this snapshot.
    """
    contacts: Tuple[Contact, ...] = ()
    appointments: Tuple[Appointment, ...] = ()
    properties: Tuple[Property, ...] = ()
    rejected: int = 0
    loaded_at: Optional[datetime] = None

    def get(self, collection: Collection) -> tuple:
        return getattr(self, Collection(collection).value)

    def find(self, collection: Collection, record_id: str) -> Optional[BaseModel]:
        for record in self.get(collection):
            if record.id == record_id:
                return record
        return None


def contact_name(snapshot: Snapshot, contact_id: Optional[str]) -> str:
    """Resolve an appointment's contact reference; never raises."""
    return resolve_contact_name(snapshot.contacts, contact_id)


def property_title(snapshot: Snapshot, property_id: Optional[str]) -> str:
    """Resolve a contact's interested-property reference; never raises."""
    return resolve_property_title(snapshot.properties, property_id)


def coerce_records(collection: Collection, raw_records: List[Dict[str, Any]]) -> Tuple[tuple, int]:
    """
    Validate raw backend records into strict models.

    Records that fail validation are logged and dropped.

    Returns:
        (valid records as a tuple, number rejected)
    """
    model = _RECORD_MODELS[collection]
    valid = []
    rejected = 0
    for raw in raw_records:
        try:
            valid.append(model.model_validate(raw))
        except ValidationError as e:
            rejected += 1
            log = with_context(logger, collection=collection.value, record_id=raw.get("id"))
            log.warning(f"Rejected malformed record: {e.error_count()} error(s): {e.errors()[0]['msg']}")
    return tuple(valid), rejected


class ViewStateStore:
    """
    Single writer of the snapshot.

    start() subscribes to all three collections; any change triggers a
    full reload_all(). A collection that fails to load keeps its data
    from the previous snapshot.
    """

    def __init__(self, data_service: DataService):
        self.data_service = data_service
        self._snapshot = Snapshot()
        self._state = ReloadState.IDLE
        self._subscriptions: List[Subscription] = []

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    @property
    def state(self) -> ReloadState:
        return self._state

    def start(self) -> Snapshot:
        """Subscribe to changes on every collection and load once."""
        if not self._subscriptions:
            for collection in Collection:
                self._subscriptions.append(
                    self.data_service.subscribe_to_changes(collection, self._on_change)
                )
            logger.info("View state subscribed to contacts, appointments and properties")
        return self.reload_all()

    def stop(self) -> None:
        for subscription in self._subscriptions:
            subscription.unsubscribe()
        self._subscriptions = []
        logger.info("View state unsubscribed")

    def _on_change(self, collection: Collection, event: ChangeEvent) -> None:
        logger.debug(f"Change on {collection.value} ({event.value}), reloading all collections")
        self.reload_all()

    def reload_all(self) -> Snapshot:
        """
        Re-fetch every collection and replace the snapshot.

        Returns:
            The new snapshot
        """
        self._state = ReloadState.LOADING
        previous = self._snapshot
        loaded: Dict[Collection, tuple] = {}
        rejected = 0
        try:
            for collection in Collection:
                try:
                    raw_records = self.data_service.fetch_all(collection)
                except DataServiceError as e:
                    logger.error(f"Failed to load {collection.value}, keeping previous data: {e}")
                    loaded[collection] = previous.get(collection)
                    continue
                loaded[collection], dropped = coerce_records(collection, raw_records)
                rejected += dropped

            self._snapshot = Snapshot(
                contacts=loaded[Collection.CONTACTS],
                appointments=loaded[Collection.APPOINTMENTS],
                properties=loaded[Collection.PROPERTIES],
                rejected=rejected,
                loaded_at=datetime.now(timezone.utc),
            )
        finally:
            self._state = ReloadState.IDLE

        logger.info(
            f"Reloaded {len(self._snapshot.contacts)} contacts, "
            f"{len(self._snapshot.appointments)} appointments, "
            f"{len(self._snapshot.properties)} properties"
            + (f" ({rejected} rejected)" if rejected else "")
        )
        return self._snapshot
