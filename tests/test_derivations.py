"""
Unit tests for the view-state derivations.

Covers the dashboard statistics, the day planner, both search filters
and the CSV export.
"""

import random

import pytest

from realty_crm.db.models import Priority, PropertyCategory
from realty_crm.schemas.appointment import Appointment
from realty_crm.schemas.contact import Contact
from realty_crm.schemas.property import Property
from realty_crm.services.derivations import (
    CONTACT_NOT_FOUND,
    NO_CONTACT,
    NO_PROPERTY,
    PROPERTY_NOT_FOUND,
    PriceBand,
    appointments_for_day,
    compute_stats,
    export_contacts_csv,
    filter_contacts,
    filter_properties,
    parse_price_band,
    price_digits,
    resolve_contact_name,
    resolve_property_title,
)


def appt(id, date, priority, completed=False, title=None, contact_id=None):
    return Appointment(
        id=id,
        title=title or f"Compromisso {id}",
        completed=completed,
        priority=priority,
        contact_id=contact_id,
        scheduled_date=date,
    )


def prop(id, price, title="Imóvel", address="Rua A, 1", category=PropertyCategory.APARTMENT):
    return Property(id=id, title=title, address=address, price=price, category=category)


@pytest.fixture
def sample_appointments():
    return [
        appt("A", "2024-06-01", Priority.LOW),
        appt("B", "2024-06-01", Priority.HIGH),
        appt("C", "2024-05-30", Priority.LOW),
    ]


# Statistics

def test_stats_empty_collections():
    stats = compute_stats([], [], [])

    assert stats.total_appointments == 0
    assert stats.pending_appointments == 0
    assert stats.pending_by_priority == {Priority.HIGH: 0, Priority.MEDIUM: 0, Priority.LOW: 0}
    assert stats.upcoming == []


def test_upcoming_sorted_by_date_then_priority(sample_appointments):
    stats = compute_stats([], [], sample_appointments)

    assert [a.id for a in stats.upcoming] == ["C", "B", "A"]


def test_upcoming_ignores_input_order(sample_appointments):
    shuffled = list(sample_appointments)
    random.Random(7).shuffle(shuffled)

    assert compute_stats([], [], shuffled).upcoming == compute_stats([], [], sample_appointments).upcoming


def test_upcoming_truncated_to_three_pending():
    appointments = [
        appt("1", "2024-06-03", Priority.LOW),
        appt("2", "2024-06-01", Priority.MEDIUM, completed=True),
        appt("3", "2024-06-02", Priority.HIGH),
        appt("4", "2024-06-05", Priority.MEDIUM),
        appt("5", "2024-06-04", Priority.LOW),
    ]

    stats = compute_stats([], [], appointments)

    assert [a.id for a in stats.upcoming] == ["3", "1", "5"]
    assert len(stats.upcoming) == min(3, stats.pending_appointments)


def test_priority_counts_cover_only_pending():
    appointments = [
        appt("1", "2024-06-01", Priority.HIGH),
        appt("2", "2024-06-01", Priority.HIGH, completed=True),
        appt("3", "2024-06-02", Priority.MEDIUM),
    ]

    stats = compute_stats([], [], appointments)

    assert stats.total_appointments == 3
    assert stats.pending_appointments == 2
    assert stats.pending_by_priority[Priority.HIGH] == 1
    assert stats.pending_by_priority[Priority.MEDIUM] == 1
    assert stats.pending_by_priority[Priority.LOW] == 0


def test_priority_counts_sum_to_pending():
    rng = random.Random(42)
    priorities = list(Priority)
    for _ in range(20):
        appointments = [
            appt(str(i), f"2024-06-{rng.randint(1, 28):02d}", rng.choice(priorities), completed=rng.random() < 0.4)
            for i in range(rng.randint(0, 15))
        ]
        stats = compute_stats([], [], appointments)

        assert sum(stats.pending_by_priority.values()) == stats.pending_appointments
        assert stats.pending_appointments <= stats.total_appointments
        assert len(stats.upcoming) == min(3, stats.pending_appointments)


def test_stats_count_contacts_and_properties():
    contacts = [Contact(id="1", name="Ana"), Contact(id="2", name="Bruno")]
    properties = [prop("p1", 100)]

    stats = compute_stats(contacts, properties, [])

    assert stats.total_contacts == 2
    assert stats.total_properties == 1


# Day planner

def test_day_view_filters_by_exact_date(sample_appointments):
    day = appointments_for_day(sample_appointments, "2024-06-01")

    assert [a.id for a in day] == ["B", "A"]


def test_day_view_includes_completed():
    appointments = [
        appt("1", "2024-06-01", Priority.LOW, completed=True),
        appt("2", "2024-06-01", Priority.LOW),
    ]

    assert len(appointments_for_day(appointments, "2024-06-01")) == 2


def test_day_view_breaks_priority_ties_by_title():
    appointments = [
        appt("1", "2024-06-01", Priority.MEDIUM, title="visita"),
        appt("2", "2024-06-01", Priority.MEDIUM, title="Assinatura"),
        appt("3", "2024-06-01", Priority.MEDIUM, title="Ábaco"),
        appt("4", "2024-06-01", Priority.HIGH, title="Zelador"),
    ]

    day = appointments_for_day(appointments, "2024-06-01")

    assert [a.title for a in day] == ["Zelador", "Ábaco", "Assinatura", "visita"]


def test_day_view_empty_for_other_date(sample_appointments):
    assert appointments_for_day(sample_appointments, "2024-06-02") == []


# Contact search

def test_contact_search_empty_query_returns_input():
    contacts = [Contact(id="2", name="Zé"), Contact(id="1", name="Ana")]

    assert filter_contacts(contacts, "") == contacts


def test_contact_search_by_name_case_insensitive():
    maria = Contact(id="1", name="Maria Silva")
    joao = Contact(id="2", name="João")

    assert filter_contacts([maria, joao], "maria") == [maria]


def test_contact_search_by_email_and_phone():
    a = Contact(id="1", name="Ana", email="ANA@Example.com", phone="(11) 98765-4321")
    b = Contact(id="2", name="Bia", email="bia@x.com", phone="21 5555-0000")

    assert filter_contacts([a, b], "example") == [a]
    assert filter_contacts([a, b], "5555") == [b]
    assert filter_contacts([a, b], "zzz") == []


# Property filter

def test_price_band_boundaries():
    at_limit = prop("a", 300000)
    just_over = prop("b", 300000.01)
    lower_band = prop("c", 100000)

    result = filter_properties([at_limit, just_over, lower_band], price_band="300k")

    assert result == [at_limit]


@pytest.mark.parametrize("price,band", [
    (0, PriceBand.UP_TO_100K),
    (100000, PriceBand.UP_TO_100K),
    (100001, PriceBand.UP_TO_300K),
    (500000, PriceBand.UP_TO_500K),
    (1000000, PriceBand.UP_TO_1M),
    (1000000.5, PriceBand.ABOVE_1M),
])
def test_price_lands_in_exactly_one_band(price, band):
    bands = [b for b in PriceBand if b is not PriceBand.ALL and b.contains(price)]

    assert bands == [band]


def test_property_text_search_title_address_and_price():
    casa = prop("1", 250000, title="Casa na praia", address="Av. Atlântica, 10")
    apto = prop("2", 480000, title="Apartamento", address="Rua Augusta, 200")

    assert filter_properties([casa, apto], "PRAIA") == [casa]
    assert filter_properties([casa, apto], "augusta") == [apto]
    assert filter_properties([casa, apto], "R$ 480.000") == [apto]
    assert filter_properties([casa, apto], "xyz") == []


def test_property_filters_are_conjunctive():
    casa_cara = prop("1", 2000000, title="Casa grande", category=PropertyCategory.HOUSE)
    casa_barata = prop("2", 90000, title="Casa pequena", category=PropertyCategory.HOUSE)
    terreno = prop("3", 80000, title="Terreno casa", category=PropertyCategory.LAND)

    result = filter_properties(
        [casa_cara, casa_barata, terreno],
        query="casa",
        category=PropertyCategory.HOUSE,
        price_band=PriceBand.UP_TO_100K,
    )

    assert result == [casa_barata]


def test_property_all_selectors_are_noops():
    properties = [prop("2", 10), prop("1", 5000000, category=PropertyCategory.OTHER)]

    assert filter_properties(properties, "", "all", "all") == properties
    assert filter_properties(properties, "", "Todos", "Todos") == properties


def test_property_filter_accepts_legacy_category_names():
    terreno = prop("1", 10, category=PropertyCategory.LAND)

    assert filter_properties([terreno, prop("2", 10)], category="Terreno") == [terreno]


def test_property_filter_is_idempotent():
    properties = [prop(str(i), i * 75000, title=f"Imóvel {i}") for i in range(20)]
    args = (properties, "imóvel 1", "Apartment", "1m")

    assert filter_properties(*args) == filter_properties(*args)


def test_parse_price_band_rejects_unknown():
    with pytest.raises(ValueError):
        parse_price_band("2m")


def test_price_digits():
    assert price_digits(250000.0) == "250000"
    assert price_digits(99.5) == "99.5"
    assert price_digits(1e16) == "10000000000000000"
    assert price_digits(0.00005) == "0.00005"


# CSV export

def test_csv_single_contact_with_quote():
    contact = Contact.model_validate(
        {"id": "1", "nome": 'O"Brien', "email": "", "telefone": "123", "imovel_interesse_id": None}
    )

    assert export_contacts_csv([contact]) == (
        'ID,Nome,Email,Telefone,Imovel_Interesse_ID\n"1","O""Brien","","123",""'
    )


def test_csv_preserves_order_and_has_no_trailing_newline():
    contacts = [
        Contact(id="b", name="Bia", interested_property_id="p9"),
        Contact(id="a", name="Ana, a"),
    ]

    csv_text = export_contacts_csv(contacts)

    assert csv_text.split("\n") == [
        "ID,Nome,Email,Telefone,Imovel_Interesse_ID",
        '"b","Bia","","","p9"',
        '"a","Ana, a","","",""',
    ]
    assert not csv_text.endswith("\n")


def test_csv_empty_collection_is_header_only():
    assert export_contacts_csv([]) == "ID,Nome,Email,Telefone,Imovel_Interesse_ID"


# Reference resolution

def test_dangling_property_reference_renders_placeholder():
    contact = Contact(id="1", name="Ana", interested_property_id="deleted")

    assert resolve_property_title([prop("p1", 10)], contact.interested_property_id) == PROPERTY_NOT_FOUND
    assert resolve_property_title([], None) == NO_PROPERTY
    assert resolve_property_title([prop("p1", 10, title="Cobertura")], "p1") == "Cobertura"


def test_dangling_contact_reference_renders_placeholder():
    contacts = [Contact(id="1", name="Ana")]

    assert resolve_contact_name(contacts, "1") == "Ana"
    assert resolve_contact_name(contacts, "2") == CONTACT_NOT_FOUND
    assert resolve_contact_name(contacts, None) == NO_CONTACT
