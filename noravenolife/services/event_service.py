"""
Music event listing, lookup and management service
"""

import logging
import math
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from sqlalchemy.orm import Session

from noravenolife.models import MusicEvent
from noravenolife.schemas.event import EventCreate, EventUpdate, Location, MusicEventOut
from noravenolife.services.repositories import EventRepo, use_sql
from noravenolife.services.seed_data import get_mock_events
from noravenolife.utils.formatting import to_naive_utc

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0


def distance_km(a: Location, b: Location) -> float:
    """Great-circle distance between two coordinates (haversine)"""
    lat1, lat2 = math.radians(a.lat), math.radians(b.lat)
    d_lat = lat2 - lat1
    d_lng = math.radians(b.lng - a.lng)
    h = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lng / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(h))


def event_to_schema(event: Union[MusicEvent, Dict[str, Any]]) -> MusicEventOut:
    """Build the response schema from an ORM row or a document dict"""
    if isinstance(event, dict):
        get = event.get
    else:
        get = lambda field: getattr(event, field)  # noqa: E731

    return MusicEventOut(
        id=get("id"),
        name=get("name"),
        artist=get("artist"),
        artist_bio=get("artist_bio") or "",
        venue=get("venue"),
        venue_details=get("venue_details") or "",
        location=Location(lat=get("latitude"), lng=get("longitude")),
        date_time=to_naive_utc(get("date_time")),
        ticket_price=get("ticket_price"),
        ticket_url=get("ticket_url") or "#",
        description=get("description") or "",
        image_url=get("image_url") or "",
        giveaway_active=bool(get("giveaway_active")),
        giveaway_end_date=to_naive_utc(get("giveaway_end_date")),
        giveaway_tickets=get("giveaway_tickets"),
    )


def _flatten_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    """Map schema fields onto stored fields (location -> latitude/longitude)"""
    fields = dict(data)
    location = fields.pop("location", None)
    if location is not None:
        fields["latitude"] = location["lat"]
        fields["longitude"] = location["lng"]
    for key in ("date_time", "giveaway_end_date"):
        if key in fields:
            fields[key] = to_naive_utc(fields[key])
    return fields


class EventService:
    """Service for music event operations"""

    @staticmethod
    def list_events(
        db: Session,
        near: Optional[Location] = None,
        radius_km: Optional[float] = None
    ) -> List[MusicEventOut]:
        """All events by date ascending, optionally limited to a radius around ``near``"""
        if use_sql():
            events = [event_to_schema(e) for e in EventRepo.list_sql(db)]
        else:
            events = [event_to_schema(e) for e in EventRepo.list_doc()]

        events.sort(key=lambda e: e.date_time)

        if near is not None and radius_km is not None:
            events = [e for e in events if distance_km(near, e.location) <= radius_km]

        return events

    @staticmethod
    def get_event(db: Session, event_id: str) -> Optional[MusicEventOut]:
        if use_sql():
            event = EventRepo.get_by_id_sql(db, event_id)
        else:
            event = EventRepo.get_by_id_doc(event_id)
        return event_to_schema(event) if event else None

    @staticmethod
    def upcoming_events(db: Session, now: Optional[datetime] = None) -> List[MusicEventOut]:
        now = now or datetime.utcnow()
        return [e for e in EventService.list_events(db) if e.date_time > now]

    @staticmethod
    def featured_event(db: Session, now: Optional[datetime] = None) -> Optional[MusicEventOut]:
        """First upcoming event, shown as 'Artist of the Week'"""
        upcoming = EventService.upcoming_events(db, now=now)
        return upcoming[0] if upcoming else None

    @staticmethod
    def create_event(db: Session, event_data: EventCreate) -> Optional[MusicEventOut]:
        """Create an event; None if the id is taken"""
        if EventService.get_event(db, event_data.id):
            logger.warning(f"Event {event_data.id} already exists")
            return None

        fields = _flatten_fields(event_data.dict())
        if use_sql():
            event = EventRepo.create_sql(db, fields)
        else:
            event = EventRepo.create_doc(fields)

        logger.info(f"Created event {event_data.id}")
        return event_to_schema(event)

    @staticmethod
    def update_event(db: Session, event_id: str, event_update: EventUpdate) -> Optional[MusicEventOut]:
        changes = _flatten_fields(event_update.dict(exclude_unset=True))

        if use_sql():
            event = EventRepo.get_by_id_sql(db, event_id)
            if not event:
                return None
            event = EventRepo.update_sql(db, event, changes)
        else:
            event = EventRepo.update_doc(event_id, changes)
            if not event:
                return None

        logger.info(f"Updated event {event_id}: {', '.join(changes) or 'no changes'}")
        return event_to_schema(event)

    @staticmethod
    def delete_event(db: Session, event_id: str) -> bool:
        if use_sql():
            event = EventRepo.get_by_id_sql(db, event_id)
            if not event:
                return False
            EventRepo.delete_sql(db, event)
        elif not EventRepo.delete_doc(event_id):
            return False

        logger.info(f"Deleted event {event_id}")
        return True

    @staticmethod
    def seed_events(db: Session, now: Optional[datetime] = None) -> int:
        """Insert the demo line-up if the store has no events; returns the number created"""
        existing = EventRepo.count_sql(db) if use_sql() else EventRepo.count_doc()
        if existing > 0:
            logger.info(f"Store already seeded with {existing} events. Skipping seeding.")
            return 0

        created = 0
        for data in get_mock_events(now):
            if use_sql():
                EventRepo.create_sql(db, data)
            else:
                EventRepo.create_doc(data)
            created += 1

        logger.info(f"Seeded {created} events")
        return created
