"""
Tests for giveaway entry, win roll and notifications
"""

import asyncio
import json
import logging
import random

import pytest

from noravenolife.api.ws import WebSocketManager
from noravenolife.models import GiveawayEntry, GiveawayWin, UserTicket
from noravenolife.schemas.giveaway import GiveawayOutcome
from noravenolife.services.giveaway_service import GiveawayService, entry_message
from noravenolife.services.repositories import DuplicateRecordError, GiveawayRepo

class FakeWebSocket:
    """Collects frames sent by the manager"""

    def __init__(self):
        self.sent = []

    async def send_text(self, text):
        self.sent.append(json.loads(text))

class FixedRandom(random.Random):
    def __init__(self, value):
        super().__init__()
        self.value = value

    def random(self):
        return self.value

def make_service(roll: float, manager: WebSocketManager = None) -> GiveawayService:
    return GiveawayService(manager or WebSocketManager(), rng=FixedRandom(roll), win_chance=0.3)

def enter(service, user_id, event_id, db):
    return asyncio.run(service.enter_giveaway(user_id, event_id, db))

def test_enter_giveaway_success(db_session, lineup):
    result = enter(make_service(0.9), "user-1", "open-giveaway", db_session)

    assert result.outcome == GiveawayOutcome.ENTERED
    assert result.success
    assert not result.won
    assert GiveawayService.has_user_entered(db_session, "user-1", "open-giveaway")
    assert db_session.query(GiveawayWin).count() == 0

def test_one_entry_per_user_per_giveaway(db_session, lineup):
    service = make_service(0.9)

    first = enter(service, "user-1", "open-giveaway", db_session)
    second = enter(service, "user-1", "open-giveaway", db_session)
    other_user = enter(service, "user-2", "open-giveaway", db_session)

    assert first.outcome == GiveawayOutcome.ENTERED
    assert second.outcome == GiveawayOutcome.ALREADY_ENTERED
    assert other_user.outcome == GiveawayOutcome.ENTERED
    assert db_session.query(GiveawayEntry).count() == 2

def test_enter_missing_event(db_session, lineup):
    result = enter(make_service(0.0), "user-1", "missing", db_session)
    assert result.outcome == GiveawayOutcome.NOT_FOUND

def test_enter_inactive_giveaway(db_session, lineup):
    result = enter(make_service(0.0), "user-1", "no-giveaway", db_session)

    assert result.outcome == GiveawayOutcome.NOT_ACTIVE
    assert not GiveawayService.has_user_entered(db_session, "user-1", "no-giveaway")

def test_enter_ended_giveaway(db_session, lineup):
    result = enter(make_service(0.0), "user-1", "ended-giveaway", db_session)

    assert result.outcome == GiveawayOutcome.ENDED
    assert db_session.query(GiveawayEntry).count() == 0

def test_rejections_log_warnings(db_session, lineup, caplog):
    caplog.set_level(logging.INFO, logger="noravenolife.services.giveaway_service")
    service = make_service(0.9)

    for event_id in ("missing", "no-giveaway", "ended-giveaway", "open-giveaway", "open-giveaway"):
        enter(service, "user-1", event_id, db_session)

    rejections = [r for r in caplog.records if r.levelno >= logging.WARNING]
    assert len(rejections) == 4
    assert all(r.levelno == logging.WARNING for r in rejections)

def test_win_records_ticket_and_win(db_session, lineup):
    """A roll under the win chance issues a giveaway ticket"""
    result = enter(make_service(0.1), "user-1", "open-giveaway", db_session)

    assert result.won
    assert GiveawayService.check_giveaway_wins(db_session, "user-1") == ["open-giveaway"]

    ticket = db_session.query(UserTicket).one()
    assert ticket.type == "giveaway"
    assert ticket.qr_code_data == "GIVEAWAY-user-1-open-giveaway-1"

def test_roll_at_threshold_loses(db_session, lineup):
    result = enter(make_service(0.3), "user-1", "open-giveaway", db_session)

    assert result.outcome == GiveawayOutcome.ENTERED
    assert not result.won

def test_win_is_broadcast_to_user(db_session, lineup):
    manager = WebSocketManager()
    socket = FakeWebSocket()
    manager.active_connections["user-1"] = [socket]

    enter(make_service(0.0, manager), "user-1", "open-giveaway", db_session)

    assert len(socket.sent) == 1
    message = socket.sent[0]
    assert message["type"] == "giveaway_win"
    assert message["event"]["id"] == "open-giveaway"
    assert message["ticket_id"].startswith("TKT-")

def test_duplicate_entry_rejected_by_store(db_session, lineup):
    """The unique constraint backs up the pre-check"""
    GiveawayRepo.add_entry_sql(db_session, "user-1", "open-giveaway")

    with pytest.raises(DuplicateRecordError):
        GiveawayRepo.add_entry_sql(db_session, "user-1", "open-giveaway")

    assert db_session.query(GiveawayEntry).count() == 1

def test_notifications_skip_deleted_events(db_session, lineup):
    enter(make_service(0.0), "user-1", "open-giveaway", db_session)
    # Win row left behind for an event id that no longer resolves
    db_session.add(GiveawayWin(user_id="user-1", event_id="ghost-event"))
    db_session.commit()

    wins = GiveawayService.get_win_notifications(db_session, "user-1")

    assert [e.id for e in wins] == ["open-giveaway"]

def test_list_entries_flags_winners(db_session, lineup):
    enter(make_service(0.0), "user-1", "open-giveaway", db_session)
    enter(make_service(0.9), "user-2", "open-giveaway", db_session)

    entries = GiveawayService.list_entries(db_session, "open-giveaway")

    assert [(e.user_id, e.won) for e in entries] == [("user-1", True), ("user-2", False)]

def test_entry_messages(db_session, lineup):
    result = enter(make_service(0.9), "user-1", "ended-giveaway", db_session)
    assert entry_message(result) == "Could not enter giveaway. The entry period has ended."

    result = enter(make_service(0.9), "user-1", "open-giveaway", db_session)
    assert entry_message(result, "Warehouse Echoes") == "You're in the draw for Warehouse Echoes. Good luck!"
