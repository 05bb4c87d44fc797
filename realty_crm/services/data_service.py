"""
Data service - the CRM's view of its relational backend.

This service handles:
- Fetching whole collections in their default order
- Inserting, updating and deleting single records
- Notifying subscribers after every committed change

Records cross this boundary as plain dicts; turning them into strict
models is the view-state store's job.
"""

import enum
from typing import Any, Callable, Dict, List

from sqlalchemy import case, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from realty_crm.core.errors import DataServiceError
from realty_crm.core.logging import with_context
from realty_crm.db import models
import logging

logger = logging.getLogger(__name__)


class Collection(str, enum.Enum):
    """The three record collections held by the backend."""
    CONTACTS = "contacts"
    APPOINTMENTS = "appointments"
    PROPERTIES = "properties"


class ChangeEvent(str, enum.Enum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


ChangeCallback = Callable[[Collection, ChangeEvent], None]

_MODELS = {
    Collection.CONTACTS: models.Contact,
    Collection.APPOINTMENTS: models.Appointment,
    Collection.PROPERTIES: models.Property,
}


def _default_order(collection: Collection):
    """
    ORDER BY clauses for fetch_all.

    Contacts by name, properties by title, appointments by date
    ascending then priority descending (High first).
    """
    if collection is Collection.CONTACTS:
        return (models.Contact.name,)
    if collection is Collection.PROPERTIES:
        return (models.Property.title,)
    priority_rank = case(
        (models.Appointment.priority == models.Priority.HIGH.value, 3),
        (models.Appointment.priority == models.Priority.MEDIUM.value, 2),
        else_=1,
    )
    return (models.Appointment.scheduled_date.asc(), priority_rank.desc())


def _plain(value: Any) -> Any:
    if isinstance(value, enum.Enum):
        return value.value
    return value


def _row_to_dict(row) -> Dict[str, Any]:
    return {column.key: _plain(getattr(row, column.key)) for column in row.__table__.columns}


class Subscription:
    """Handle returned by subscribe_to_changes."""

    def __init__(self, service: "DataService", collection: Collection, callback: ChangeCallback):
        self.service = service
        self.collection = collection
        self.callback = callback
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self.service._remove_subscription(self)
            self.active = False


class DataService:
    """
    CRUD and change notifications over the three collections.

    Every operation runs in its own short session. Failures roll back
    and surface as DataServiceError; subscribers only hear about
    changes that were committed.
    """

    def __init__(self, session_factory: sessionmaker):
        """
        Initialize the service with a session factory.

        Args:
            session_factory: SQLAlchemy sessionmaker bound to the backend
        """
        self._session_factory = session_factory
        self._subscriptions: List[Subscription] = []

    def fetch_all(self, collection: Collection) -> List[Dict[str, Any]]:
        """
        Load every record of a collection in its default order.

        Raises:
            DataServiceError: If the query fails
        """
        collection = Collection(collection)
        model = _MODELS[collection]
        try:
            with self._session_factory() as db:
                rows = db.execute(select(model).order_by(*_default_order(collection))).scalars().all()
                records = [_row_to_dict(row) for row in rows]
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch {collection.value}: {e}")
            raise DataServiceError(collection.value, "fetch", e) from e

        logger.debug(f"Fetched {len(records)} {collection.value}")
        return records

    def insert(self, collection: Collection, record: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert a record; the backend assigns its id.

        Returns:
            The stored record, including the new id
        """
        collection = Collection(collection)
        model = _MODELS[collection]
        try:
            with self._session_factory() as db:
                row = model(**{field: _plain(value) for field, value in record.items()})
                db.add(row)
                try:
                    db.commit()
                except SQLAlchemyError:
                    db.rollback()
                    raise
                db.refresh(row)
                stored = _row_to_dict(row)
        except SQLAlchemyError as e:
            logger.error(f"Insert into {collection.value} failed: {e}")
            raise DataServiceError(collection.value, "insert", e) from e

        with_context(logger, collection=collection.value, record_id=stored["id"]).info("Record inserted")
        self._notify(collection, ChangeEvent.INSERT)
        return stored

    def update(self, collection: Collection, record_id: str, partial: Dict[str, Any]) -> bool:
        """
        Apply a partial update to one record.

        Returns:
            True if the record existed and was updated, False otherwise
        """
        collection = Collection(collection)
        model = _MODELS[collection]
        log = with_context(logger, collection=collection.value, record_id=record_id)
        try:
            with self._session_factory() as db:
                row = db.get(model, record_id)
                if row is None:
                    log.warning("Update target not found")
                    return False
                for field, value in partial.items():
                    setattr(row, field, _plain(value))
                try:
                    db.commit()
                except SQLAlchemyError:
                    db.rollback()
                    raise
        except SQLAlchemyError as e:
            log.error(f"Update failed: {e}")
            raise DataServiceError(collection.value, "update", e) from e

        log.info(f"Record updated: {sorted(partial)}")
        self._notify(collection, ChangeEvent.UPDATE)
        return True

    def delete(self, collection: Collection, record_id: str) -> bool:
        """
        Delete one record.

        Returns:
            True if the record existed and was deleted, False otherwise
        """
        collection = Collection(collection)
        model = _MODELS[collection]
        log = with_context(logger, collection=collection.value, record_id=record_id)
        try:
            with self._session_factory() as db:
                row = db.get(model, record_id)
                if row is None:
                    log.warning("Delete target not found")
                    return False
                db.delete(row)
                try:
                    db.commit()
                except SQLAlchemyError:
                    db.rollback()
                    raise
        except SQLAlchemyError as e:
            log.error(f"Delete failed: {e}")
            raise DataServiceError(collection.value, "delete", e) from e

        log.info("Record deleted")
        self._notify(collection, ChangeEvent.DELETE)
        return True

    def subscribe_to_changes(self, collection: Collection, callback: ChangeCallback) -> Subscription:
        """
        Call `callback(collection, event)` after every committed change.

        Returns:
            A Subscription; call unsubscribe() to stop notifications
        """
        subscription = Subscription(self, Collection(collection), callback)
        self._subscriptions.append(subscription)
        logger.debug(f"Subscribed to {subscription.collection.value} changes")
        return subscription

    def _remove_subscription(self, subscription: Subscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)
            logger.debug(f"Unsubscribed from {subscription.collection.value} changes")

    def _notify(self, collection: Collection, event: ChangeEvent) -> None:
        # The write is already committed; a failing subscriber is only logged
        for subscription in list(self._subscriptions):
            if subscription.collection is not collection:
                continue
            try:
                subscription.callback(collection, event)
            except Exception as e:
                logger.exception(f"Change subscriber failed for {collection.value} {event.value}: {e}")
