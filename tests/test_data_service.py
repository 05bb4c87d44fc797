"""
Tests for the data service against an in-memory SQLite backend.
"""

import logging

import pytest

from realty_crm.core.errors import DataServiceError
from realty_crm.db.database import Base
from realty_crm.services.data_service import ChangeEvent, Collection


def add_appointment(data_service, title, date, priority):
    return data_service.insert(
        Collection.APPOINTMENTS,
        {"title": title, "priority": priority, "scheduled_date": date},
    )


def test_insert_assigns_id_and_defaults(data_service):
    stored = data_service.insert(Collection.CONTACTS, {"name": "Ana"})

    assert stored["id"]
    assert stored["name"] == "Ana"
    assert stored["email"] == ""
    assert stored["interested_property_id"] is None


def test_fetch_contacts_sorted_by_name(data_service):
    for name in ["Carla", "Ana", "Bruno"]:
        data_service.insert(Collection.CONTACTS, {"name": name})

    names = [c["name"] for c in data_service.fetch_all(Collection.CONTACTS)]

    assert names == ["Ana", "Bruno", "Carla"]


def test_fetch_appointments_by_date_then_priority(data_service):
    add_appointment(data_service, "low", "2024-06-01", "Low")
    add_appointment(data_service, "high", "2024-06-01", "High")
    add_appointment(data_service, "earlier", "2024-05-30", "Low")
    add_appointment(data_service, "medium", "2024-06-01", "Medium")

    titles = [a["title"] for a in data_service.fetch_all(Collection.APPOINTMENTS)]

    assert titles == ["earlier", "high", "medium", "low"]


def test_fetch_properties_sorted_by_title(data_service):
    for title in ["Sobrado", "Apartamento", "Loja"]:
        data_service.insert(
            Collection.PROPERTIES,
            {"title": title, "address": "Rua A", "price": 1, "category": "Other"},
        )

    titles = [p["title"] for p in data_service.fetch_all(Collection.PROPERTIES)]

    assert titles == ["Apartamento", "Loja", "Sobrado"]


def test_update_and_delete_report_missing_rows(data_service):
    stored = add_appointment(data_service, "Visita", "2024-06-01", "High")

    assert data_service.update(Collection.APPOINTMENTS, stored["id"], {"completed": True}) is True
    assert data_service.fetch_all(Collection.APPOINTMENTS)[0]["completed"] is True
    assert data_service.update(Collection.APPOINTMENTS, "missing", {"completed": True}) is False

    assert data_service.delete(Collection.APPOINTMENTS, stored["id"]) is True
    assert data_service.delete(Collection.APPOINTMENTS, stored["id"]) is False
    assert data_service.fetch_all(Collection.APPOINTMENTS) == []


def test_subscribers_notified_per_collection(data_service):
    events = []
    data_service.subscribe_to_changes(Collection.CONTACTS, lambda c, e: events.append((c, e)))

    stored = data_service.insert(Collection.CONTACTS, {"name": "Ana"})
    data_service.update(Collection.CONTACTS, stored["id"], {"email": "ana@x.com"})
    data_service.delete(Collection.CONTACTS, stored["id"])
    data_service.insert(Collection.PROPERTIES, {"title": "Casa", "address": "Rua", "category": "House"})

    assert events == [
        (Collection.CONTACTS, ChangeEvent.INSERT),
        (Collection.CONTACTS, ChangeEvent.UPDATE),
        (Collection.CONTACTS, ChangeEvent.DELETE),
    ]


def test_no_notification_when_nothing_matched(data_service):
    events = []
    data_service.subscribe_to_changes(Collection.CONTACTS, lambda c, e: events.append(e))

    data_service.delete(Collection.CONTACTS, "missing")

    assert events == []


def test_unsubscribe_stops_notifications(data_service):
    events = []
    subscription = data_service.subscribe_to_changes(Collection.CONTACTS, lambda c, e: events.append(e))
    subscription.unsubscribe()
    subscription.unsubscribe()

    data_service.insert(Collection.CONTACTS, {"name": "Ana"})

    assert events == []


def test_failing_subscriber_does_not_undo_write(data_service, caplog):
    events = []

    def broken(collection, event):
        raise RuntimeError("boom")

    data_service.subscribe_to_changes(Collection.CONTACTS, broken)
    data_service.subscribe_to_changes(Collection.CONTACTS, lambda c, e: events.append(e))

    with caplog.at_level(logging.ERROR):
        data_service.insert(Collection.CONTACTS, {"name": "Ana"})

    assert len(data_service.fetch_all(Collection.CONTACTS)) == 1
    assert events == [ChangeEvent.INSERT]
    assert any("Change subscriber failed" in r.message for r in caplog.records)


def test_backend_failure_raises_data_service_error(data_service, engine):
    Base.metadata.drop_all(bind=engine)

    with pytest.raises(DataServiceError) as exc_info:
        data_service.fetch_all(Collection.CONTACTS)
    assert exc_info.value.collection == "contacts"
    assert exc_info.value.operation == "fetch"

    with pytest.raises(DataServiceError):
        data_service.insert(Collection.CONTACTS, {"name": "Ana"})


def test_failed_insert_does_not_notify(data_service):
    events = []
    data_service.subscribe_to_changes(Collection.CONTACTS, lambda c, e: events.append(e))

    with pytest.raises(DataServiceError):
        # name is NOT NULL
        data_service.insert(Collection.CONTACTS, {"name": None})

    assert events == []
