"""
Repository layer abstracting storage (SQLAlchemy vs Firebase Firestore vs in-memory mock).

SQL methods take a Session and return ORM objects. Document methods
(``*_doc``) return plain dicts and route to Firestore or to the in-memory
store depending on STORAGE_BACKEND.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from google.api_core.exceptions import AlreadyExists
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from noravenolife.core.config import settings
from noravenolife.models import MusicEvent, UserProfile, UserTicket, GiveawayEntry, GiveawayWin
from noravenolife.services.firebase_client import get_firestore_client
from noravenolife.services.memory_store import memory_store

logger = logging.getLogger(__name__)

BACKENDS = ("sql", "firestore", "memory")


class DuplicateRecordError(Exception):
    """Raised when a write would break a uniqueness rule (one record per user and event, one profile per email)"""


def storage_backend() -> str:
    backend = settings.STORAGE_BACKEND
    if backend not in BACKENDS:
        raise RuntimeError(f"Unknown STORAGE_BACKEND '{backend}', expected one of {', '.join(BACKENDS)}")
    return backend


def use_sql() -> bool:
    return storage_backend() == "sql"


def use_firestore() -> bool:
    return storage_backend() == "firestore"


def _pair_id(user_id: str, event_id: str) -> str:
    return f"{user_id}__{event_id}"


def _snapshot_to_dict(doc) -> Dict[str, Any]:
    data = doc.to_dict()
    data["id"] = doc.id
    return data


# -------- Event repository --------

class EventRepo:
    @staticmethod
    def list_sql(db: Session) -> List[MusicEvent]:
        return db.query(MusicEvent).order_by(MusicEvent.date_time).all()

    @staticmethod
    def get_by_id_sql(db: Session, event_id: str) -> Optional[MusicEvent]:
        return db.query(MusicEvent).filter(MusicEvent.id == event_id).first()

    @staticmethod
    def count_sql(db: Session) -> int:
        return db.query(MusicEvent).count()

    @staticmethod
    def create_sql(db: Session, data: Dict[str, Any]) -> MusicEvent:
        event = MusicEvent(**data)
        db.add(event)
        db.commit()
        db.refresh(event)
        return event

    @staticmethod
    def update_sql(db: Session, event: MusicEvent, changes: Dict[str, Any]) -> MusicEvent:
        for field, value in changes.items():
            setattr(event, field, value)
        event.updated_at = datetime.utcnow()
        db.commit()
        db.refresh(event)
        return event

    @staticmethod
    def delete_sql(db: Session, event: MusicEvent) -> None:
        db.delete(event)
        db.commit()

    # Firestore shape: collection "events/{event_id}"
    @staticmethod
    def list_doc() -> List[Dict[str, Any]]:
        if not use_firestore():
            return sorted(memory_store.list_events(), key=lambda e: e["date_time"])
        fs = get_firestore_client()
        return [_snapshot_to_dict(d) for d in fs.collection("events").order_by("date_time").stream()]

    @staticmethod
    def get_by_id_doc(event_id: str) -> Optional[Dict[str, Any]]:
        if not use_firestore():
            return memory_store.get_event(event_id)
        fs = get_firestore_client()
        doc = fs.collection("events").document(event_id).get()
        return _snapshot_to_dict(doc) if doc.exists else None

    @staticmethod
    def count_doc() -> int:
        return len(EventRepo.list_doc())

    @staticmethod
    def create_doc(data: Dict[str, Any]) -> Dict[str, Any]:
        now = datetime.utcnow()
        record = {**data, "created_at": now, "updated_at": now}
        if not use_firestore():
            return memory_store.put_event(record)
        fs = get_firestore_client()
        body = {k: v for k, v in record.items() if k != "id"}
        fs.collection("events").document(data["id"]).set(body)
        return record

    @staticmethod
    def update_doc(event_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        existing = EventRepo.get_by_id_doc(event_id)
        if not existing:
            return None
        changes = {**changes, "updated_at": datetime.utcnow()}
        if not use_firestore():
            return memory_store.put_event({**existing, **changes})
        fs = get_firestore_client()
        fs.collection("events").document(event_id).set(changes, merge=True)
        return {**existing, **changes}

    @staticmethod
    def delete_doc(event_id: str) -> bool:
        if not use_firestore():
            return memory_store.delete_event(event_id)
        fs = get_firestore_client()
        ref = fs.collection("events").document(event_id)
        if not ref.get().exists:
            return False
        batch = fs.batch()
        for collection in ("tickets", "giveaway_entries", "giveaway_wins"):
            for doc in fs.collection(collection).where("event_id", "==", event_id).stream():
                batch.delete(doc.reference)
        batch.delete(ref)
        batch.commit()
        return True


# -------- User profile repository --------

class UserRepo:
    @staticmethod
    def get_sql(db: Session, uid: str) -> Optional[UserProfile]:
        return db.query(UserProfile).filter(UserProfile.id == uid).first()

    @staticmethod
    def get_by_email_sql(db: Session, email: str) -> Optional[UserProfile]:
        from sqlalchemy import func
        return db.query(UserProfile).filter(func.lower(UserProfile.email) == email.lower()).first()

    @staticmethod
    def list_sql(db: Session) -> List[UserProfile]:
        return db.query(UserProfile).order_by(UserProfile.created_at).all()

    @staticmethod
    def save_sql(db: Session, profile: UserProfile) -> UserProfile:
        db.add(profile)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise DuplicateRecordError(f"Email {profile.email} already belongs to another profile")
        db.refresh(profile)
        return profile

    # Firestore shape: collection "users/{uid}"
    @staticmethod
    def get_doc(uid: str) -> Optional[Dict[str, Any]]:
        if not use_firestore():
            return memory_store.get_profile(uid)
        fs = get_firestore_client()
        doc = fs.collection("users").document(uid).get()
        return _snapshot_to_dict(doc) if doc.exists else None

    @staticmethod
    def get_by_email_doc(email: str) -> Optional[Dict[str, Any]]:
        if not use_firestore():
            return memory_store.find_profile_by_email(email)
        fs = get_firestore_client()
        docs = fs.collection("users").where("email_lower", "==", email.lower()).limit(1).get()
        return _snapshot_to_dict(docs[0]) if docs else None

    @staticmethod
    def list_doc() -> List[Dict[str, Any]]:
        if not use_firestore():
            return memory_store.list_profiles()
        fs = get_firestore_client()
        return [_snapshot_to_dict(d) for d in fs.collection("users").stream()]

    @staticmethod
    def save_doc(data: Dict[str, Any]) -> Dict[str, Any]:
        if not use_firestore():
            return memory_store.put_profile(data)
        fs = get_firestore_client()
        body = {k: v for k, v in data.items() if k != "id"}
        body["email_lower"] = (data.get("email") or "").lower()
        fs.collection("users").document(data["id"]).set(body, merge=True)
        return data


# -------- Ticket repository --------

class TicketRepo:
    @staticmethod
    def add_sql(db: Session, ticket: UserTicket) -> UserTicket:
        db.add(ticket)
        db.commit()
        db.refresh(ticket)
        return ticket

    @staticmethod
    def get_sql(db: Session, ticket_id: str) -> Optional[UserTicket]:
        return db.query(UserTicket).filter(UserTicket.id == ticket_id).first()

    @staticmethod
    def list_for_user_sql(db: Session, user_id: str) -> List[UserTicket]:
        return db.query(UserTicket).filter(UserTicket.user_id == user_id).all()

    @staticmethod
    def count_for_user_sql(db: Session, user_id: str) -> int:
        return db.query(UserTicket).filter(UserTicket.user_id == user_id).count()

    # Firestore shape: collection "tickets/{ticket_id}" with a user_id field
    @staticmethod
    def add_doc(data: Dict[str, Any]) -> Dict[str, Any]:
        if not use_firestore():
            return memory_store.add_ticket(data)
        fs = get_firestore_client()
        body = {k: v for k, v in data.items() if k != "id"}
        fs.collection("tickets").document(data["id"]).set(body)
        return data

    @staticmethod
    def get_doc(ticket_id: str) -> Optional[Dict[str, Any]]:
        if not use_firestore():
            return memory_store.get_ticket(ticket_id)
        fs = get_firestore_client()
        doc = fs.collection("tickets").document(ticket_id).get()
        return _snapshot_to_dict(doc) if doc.exists else None

    @staticmethod
    def list_for_user_doc(user_id: str) -> List[Dict[str, Any]]:
        if not use_firestore():
            return memory_store.list_tickets(user_id)
        fs = get_firestore_client()
        return [_snapshot_to_dict(d) for d in fs.collection("tickets").where("user_id", "==", user_id).stream()]


# -------- Giveaway repository --------

class GiveawayRepo:
    @staticmethod
    def has_entry_sql(db: Session, user_id: str, event_id: str) -> bool:
        return db.query(GiveawayEntry).filter(
            GiveawayEntry.user_id == user_id,
            GiveawayEntry.event_id == event_id
        ).first() is not None

    @staticmethod
    def add_entry_sql(db: Session, user_id: str, event_id: str) -> GiveawayEntry:
        entry = GiveawayEntry(user_id=user_id, event_id=event_id, entered_at=datetime.utcnow())
        db.add(entry)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise DuplicateRecordError(f"{user_id} already entered {event_id}")
        db.refresh(entry)
        return entry

    @staticmethod
    def list_entries_sql(db: Session, event_id: str) -> List[GiveawayEntry]:
        return db.query(GiveawayEntry).filter(GiveawayEntry.event_id == event_id).order_by(GiveawayEntry.entered_at).all()

    @staticmethod
    def add_win_sql(db: Session, user_id: str, event_id: str) -> GiveawayWin:
        win = GiveawayWin(user_id=user_id, event_id=event_id, won_at=datetime.utcnow())
        db.add(win)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise DuplicateRecordError(f"{user_id} already won {event_id}")
        db.refresh(win)
        return win

    @staticmethod
    def list_wins_sql(db: Session, user_id: Optional[str] = None, event_id: Optional[str] = None) -> List[GiveawayWin]:
        query = db.query(GiveawayWin)
        if user_id is not None:
            query = query.filter(GiveawayWin.user_id == user_id)
        if event_id is not None:
            query = query.filter(GiveawayWin.event_id == event_id)
        return query.order_by(GiveawayWin.won_at).all()

    # Firestore shape: "giveaway_entries/{user}__{event}" and "giveaway_wins/{user}__{event}"
    @staticmethod
    def has_entry_doc(user_id: str, event_id: str) -> bool:
        if not use_firestore():
            return memory_store.has_entry(user_id, event_id)
        fs = get_firestore_client()
        return fs.collection("giveaway_entries").document(_pair_id(user_id, event_id)).get().exists

    @staticmethod
    def add_entry_doc(user_id: str, event_id: str) -> Dict[str, Any]:
        data = {"user_id": user_id, "event_id": event_id, "entered_at": datetime.utcnow()}
        if not use_firestore():
            if not memory_store.add_entry(user_id, event_id, data["entered_at"]):
                raise DuplicateRecordError(f"{user_id} already entered {event_id}")
            return data
        fs = get_firestore_client()
        try:
            # create() fails if the document exists
            fs.collection("giveaway_entries").document(_pair_id(user_id, event_id)).create(data)
        except AlreadyExists:
            raise DuplicateRecordError(f"{user_id} already entered {event_id}")
        return data

    @staticmethod
    def list_entries_doc(event_id: str) -> List[Dict[str, Any]]:
        if not use_firestore():
            entries = memory_store.list_entries(event_id)
        else:
            fs = get_firestore_client()
            entries = [d.to_dict() for d in fs.collection("giveaway_entries").where("event_id", "==", event_id).stream()]
        return sorted(entries, key=lambda e: e["entered_at"])

    @staticmethod
    def add_win_doc(user_id: str, event_id: str) -> Dict[str, Any]:
        data = {"user_id": user_id, "event_id": event_id, "won_at": datetime.utcnow()}
        if not use_firestore():
            if not memory_store.add_win(user_id, event_id, data["won_at"]):
                raise DuplicateRecordError(f"{user_id} already won {event_id}")
            return data
        fs = get_firestore_client()
        try:
            fs.collection("giveaway_wins").document(_pair_id(user_id, event_id)).create(data)
        except AlreadyExists:
            raise DuplicateRecordError(f"{user_id} already won {event_id}")
        return data

    @staticmethod
    def list_wins_doc(user_id: Optional[str] = None, event_id: Optional[str] = None) -> List[Dict[str, Any]]:
        if not use_firestore():
            wins = memory_store.list_wins(user_id=user_id, event_id=event_id)
        else:
            fs = get_firestore_client()
            query = fs.collection("giveaway_wins")
            if user_id is not None:
                query = query.where("user_id", "==", user_id)
            if event_id is not None:
                query = query.where("event_id", "==", event_id)
            wins = [d.to_dict() for d in query.stream()]
        return sorted(wins, key=lambda w: w["won_at"])
