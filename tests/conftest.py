"""
Shared fixtures: a throwaway SQLite database and a demo line-up
"""

import pytest
from datetime import datetime, timedelta
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from noravenolife.core.config import settings
from noravenolife.core.db import Base
from noravenolife.models import MusicEvent, UserProfile
from noravenolife.services.memory_store import memory_store

# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///./test_noravenolife.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

NOW = datetime.utcnow().replace(microsecond=0)


def make_event(event_id: str, days_ahead: int, **overrides) -> dict:
    data = {
        "id": event_id,
        "name": f"Event {event_id}",
        "artist": f"Artist {event_id}",
        "artist_bio": "Bio",
        "venue": f"Venue {event_id}",
        "venue_details": "Details",
        "latitude": 40.7128,
        "longitude": -74.0060,
        "date_time": NOW + timedelta(days=days_ahead),
        "ticket_price": 30.0,
        "description": "A night out",
        "image_url": "https://picsum.photos/seed/test/600/400",
        "giveaway_active": False,
        "giveaway_end_date": None,
        "giveaway_tickets": None,
    }
    data.update(overrides)
    return data


LINEUP = [
    make_event("open-giveaway", 7, giveaway_active=True, giveaway_end_date=NOW + timedelta(days=3), giveaway_tickets=5),
    make_event("no-giveaway", 14),
    make_event("ended-giveaway", 21, giveaway_active=True, giveaway_end_date=NOW - timedelta(days=1), giveaway_tickets=2),
    make_event("free-show", 10, ticket_price=None, latitude=51.5074, longitude=-0.1278),
    make_event("last-week", -7),
]


@pytest.fixture(autouse=True)
def sql_backend(monkeypatch):
    """Tests run against SQL unless they opt into another backend"""
    monkeypatch.setattr(settings, "STORAGE_BACKEND", "sql")
    memory_store.reset()
    yield
    memory_store.reset()


@pytest.fixture
def memory_backend(monkeypatch):
    monkeypatch.setattr(settings, "STORAGE_BACKEND", "memory")
    for data in LINEUP:
        memory_store.put_event(data)
    return memory_store


@pytest.fixture
def db_session():
    """Create test database session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def lineup(db_session):
    """Seed the SQL store with events covering every giveaway state"""
    for data in LINEUP:
        db_session.add(MusicEvent(**data))
    db_session.add(UserProfile(id="user-1", email="raver@example.com", display_name="raver", role="attendee"))
    db_session.add(UserProfile(id="user-2", email="dj@example.com", display_name="dj", role="attendee"))
    db_session.commit()
    return LINEUP
