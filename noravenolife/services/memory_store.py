"""
In-process mock backend used when STORAGE_BACKEND=memory.

Records are plain dicts shaped like the Firestore documents so the
document code path in the services handles both.
"""

from __future__ import annotations

import copy
import threading
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple


class MemoryStore:
    """Mock arrays for events, profiles, tickets and giveaway state"""

    def __init__(self):
        self._lock = threading.Lock()
        self.reset()

    def reset(self) -> None:
        self.events: Dict[str, Dict[str, Any]] = {}
        self.profiles: Dict[str, Dict[str, Any]] = {}
        self.tickets: Dict[str, Dict[str, Any]] = {}
        # (user_id, event_id) -> record
        self.entries: Dict[Tuple[str, str], Dict[str, Any]] = {}
        self.wins: Dict[Tuple[str, str], Dict[str, Any]] = {}

    # -------- events --------

    def list_events(self) -> List[Dict[str, Any]]:
        return [copy.deepcopy(e) for e in self.events.values()]

    def get_event(self, event_id: str) -> Optional[Dict[str, Any]]:
        event = self.events.get(event_id)
        return copy.deepcopy(event) if event else None

    def put_event(self, data: Dict[str, Any]) -> Dict[str, Any]:
        self.events[data["id"]] = copy.deepcopy(data)
        return copy.deepcopy(data)

    def delete_event(self, event_id: str) -> bool:
        with self._lock:
            if event_id not in self.events:
                return False
            del self.events[event_id]
            self.tickets = {k: t for k, t in self.tickets.items() if t["event_id"] != event_id}
            self.entries = {k: e for k, e in self.entries.items() if k[1] != event_id}
            self.wins = {k: w for k, w in self.wins.items() if k[1] != event_id}
            return True

    # -------- profiles --------

    def get_profile(self, uid: str) -> Optional[Dict[str, Any]]:
        profile = self.profiles.get(uid)
        return copy.deepcopy(profile) if profile else None

    def find_profile_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        for profile in self.profiles.values():
            if (profile.get("email") or "").lower() == email.lower():
                return copy.deepcopy(profile)
        return None

    def put_profile(self, data: Dict[str, Any]) -> Dict[str, Any]:
        self.profiles[data["id"]] = copy.deepcopy(data)
        return copy.deepcopy(data)

    def list_profiles(self) -> List[Dict[str, Any]]:
        return [copy.deepcopy(p) for p in self.profiles.values()]

    # -------- tickets --------

    def add_ticket(self, data: Dict[str, Any]) -> Dict[str, Any]:
        self.tickets[data["id"]] = copy.deepcopy(data)
        return copy.deepcopy(data)

    def get_ticket(self, ticket_id: str) -> Optional[Dict[str, Any]]:
        ticket = self.tickets.get(ticket_id)
        return copy.deepcopy(ticket) if ticket else None

    def list_tickets(self, user_id: str) -> List[Dict[str, Any]]:
        return [copy.deepcopy(t) for t in self.tickets.values() if t["user_id"] == user_id]

    # -------- giveaways --------

    def add_entry(self, user_id: str, event_id: str, entered_at: datetime) -> bool:
        """Record an entry; False when the pair already exists."""
        with self._lock:
            key = (user_id, event_id)
            if key in self.entries:
                return False
            self.entries[key] = {"user_id": user_id, "event_id": event_id, "entered_at": entered_at}
            return True

    def has_entry(self, user_id: str, event_id: str) -> bool:
        return (user_id, event_id) in self.entries

    def list_entries(self, event_id: str) -> List[Dict[str, Any]]:
        return [copy.deepcopy(e) for k, e in self.entries.items() if k[1] == event_id]

    def add_win(self, user_id: str, event_id: str, won_at: datetime) -> bool:
        with self._lock:
            key = (user_id, event_id)
            if key in self.wins:
                return False
            self.wins[key] = {"user_id": user_id, "event_id": event_id, "won_at": won_at}
            return True

    def list_wins(self, user_id: Optional[str] = None, event_id: Optional[str] = None) -> List[Dict[str, Any]]:
        return [
            copy.deepcopy(w)
            for (uid, eid), w in self.wins.items()
            if (user_id is None or uid == user_id) and (event_id is None or eid == event_id)
        ]


# Global store instance
memory_store = MemoryStore()
