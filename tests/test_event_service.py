"""
Tests for event listing and management
"""

import pytest
from datetime import timedelta

from noravenolife.models import GiveawayEntry, UserTicket
from noravenolife.schemas.event import EventCreate, EventUpdate, Location
from noravenolife.services.event_service import EventService, distance_km
from noravenolife.services.repositories import GiveawayRepo

from conftest import NOW

def test_list_events_sorted_by_date(db_session, lineup):
    """Events come back in schedule order"""
    events = EventService.list_events(db_session)

    assert [e.id for e in events] == [
        "last-week", "open-giveaway", "free-show", "no-giveaway", "ended-giveaway"
    ]
    assert events[1].location.lat == pytest.approx(40.7128)

def test_list_events_near_location(db_session, lineup):
    """Radius filter keeps only nearby venues"""
    london = Location(lat=51.5, lng=-0.12)
    events = EventService.list_events(db_session, near=london, radius_km=50)

    assert [e.id for e in events] == ["free-show"]

def test_distance_km():
    nyc = Location(lat=40.7128, lng=-74.0060)
    london = Location(lat=51.5074, lng=-0.1278)

    assert distance_km(nyc, nyc) == pytest.approx(0.0)
    assert distance_km(nyc, london) == pytest.approx(5570, rel=0.01)

def test_get_event(db_session, lineup):
    event = EventService.get_event(db_session, "free-show")

    assert event is not None
    assert event.name == "Event free-show"
    assert event.ticket_price is None

def test_get_event_not_found(db_session, lineup):
    assert EventService.get_event(db_session, "missing") is None

def test_featured_event_is_first_upcoming(db_session, lineup):
    """Past events never become the artist of the week"""
    featured = EventService.featured_event(db_session, now=NOW)
    assert featured.id == "open-giveaway"

    upcoming = EventService.upcoming_events(db_session, now=NOW)
    assert "last-week" not in [e.id for e in upcoming]
    assert len(upcoming) == 4

def test_featured_event_none_when_nothing_upcoming(db_session, lineup):
    assert EventService.featured_event(db_session, now=NOW + timedelta(days=365)) is None

def test_create_event(db_session, lineup):
    event_data = EventCreate(
        id="new-night",
        name="New Night",
        artist="Fresh Face",
        venue="Basement",
        location=Location(lat=52.52, lng=13.405),
        date_time=NOW + timedelta(days=30),
        ticket_price=15
    )

    created = EventService.create_event(db_session, event_data)

    assert created.id == "new-night"
    assert created.location.lng == pytest.approx(13.405)
    assert EventService.get_event(db_session, "new-night") is not None

def test_create_event_duplicate_id(db_session, lineup):
    event_data = EventCreate(
        id="open-giveaway",
        name="Copy",
        artist="Copy",
        venue="Copy",
        location=Location(lat=0, lng=0),
        date_time=NOW
    )

    assert EventService.create_event(db_session, event_data) is None

def test_update_event_only_changes_given_fields(db_session, lineup):
    updated = EventService.update_event(
        db_session,
        "no-giveaway",
        EventUpdate(giveaway_active=True, giveaway_tickets=3)
    )

    assert updated.giveaway_active
    assert updated.giveaway_tickets == 3
    assert updated.name == "Event no-giveaway"

def test_update_missing_event(db_session, lineup):
    assert EventService.update_event(db_session, "missing", EventUpdate(name="x")) is None

def test_delete_event_removes_dependents(db_session, lineup):
    GiveawayRepo.add_entry_sql(db_session, "user-1", "open-giveaway")
    db_session.add(UserTicket(id="TKT-1", user_id="user-1", event_id="open-giveaway", type="purchased", qr_code_data="x"))
    db_session.commit()

    assert EventService.delete_event(db_session, "open-giveaway")
    assert EventService.get_event(db_session, "open-giveaway") is None
    assert db_session.query(GiveawayEntry).count() == 0
    assert db_session.query(UserTicket).count() == 0

    assert not EventService.delete_event(db_session, "open-giveaway")

def test_seed_events_only_when_empty(db_session):
    assert EventService.seed_events(db_session, now=NOW) == 4
    assert EventService.seed_events(db_session, now=NOW) == 0

    events = EventService.list_events(db_session)
    assert events[0].id == "techno-fest-01"
    assert events[0].giveaway_active
