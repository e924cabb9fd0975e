"""
Tests for ticket purchase and listing
"""

from noravenolife.models import UserTicket
from noravenolife.services.event_service import EventService
from noravenolife.services.ticket_service import TicketService

def test_purchase_ticket(db_session, lineup):
    ticket = TicketService.purchase_ticket(db_session, "user-1", "no-giveaway")

    assert ticket is not None
    assert ticket.type == "purchased"
    assert ticket.event_name == "Event no-giveaway"
    assert ticket.qr_code_data == "PURCHASE-user-1-no-giveaway-1"
    assert ticket.ticket_id.startswith("TKT-")

def test_purchase_rejects_event_without_price(db_session, lineup):
    assert TicketService.purchase_ticket(db_session, "user-1", "free-show") is None
    assert db_session.query(UserTicket).count() == 0

def test_purchase_rejects_missing_event(db_session, lineup):
    assert TicketService.purchase_ticket(db_session, "user-1", "missing") is None

def test_multiple_purchases_for_same_event(db_session, lineup):
    first = TicketService.purchase_ticket(db_session, "user-1", "no-giveaway")
    second = TicketService.purchase_ticket(db_session, "user-1", "no-giveaway")

    assert first.ticket_id != second.ticket_id
    assert second.qr_code_data.endswith("-2")
    assert len(TicketService.get_user_tickets(db_session, "user-1")) == 2

def test_user_tickets_reflect_stored_tickets(db_session, lineup):
    """Listing joins event details and sorts by event date, latest first"""
    TicketService.purchase_ticket(db_session, "user-1", "open-giveaway")
    TicketService.purchase_ticket(db_session, "user-1", "ended-giveaway")
    TicketService.purchase_ticket(db_session, "user-1", "last-week")
    TicketService.purchase_ticket(db_session, "user-2", "no-giveaway")

    tickets = TicketService.get_user_tickets(db_session, "user-1")

    assert [t.event_id for t in tickets] == ["ended-giveaway", "open-giveaway", "last-week"]
    assert tickets[0].venue == "Venue ended-giveaway"
    assert all(t.type == "purchased" for t in tickets)

def test_user_tickets_empty(db_session, lineup):
    assert TicketService.get_user_tickets(db_session, "nobody") == []

def test_user_tickets_skip_missing_events(db_session, lineup):
    TicketService.purchase_ticket(db_session, "user-1", "open-giveaway")
    db_session.add(UserTicket(id="TKT-ORPHAN", user_id="user-1", event_id="ghost-event", type="purchased", qr_code_data="x"))
    db_session.commit()

    tickets = TicketService.get_user_tickets(db_session, "user-1")

    assert [t.event_id for t in tickets] == ["open-giveaway"]

def test_get_ticket(db_session, lineup):
    issued = TicketService.issue_ticket(
        db_session, "user-2", EventService.get_event(db_session, "free-show"), "giveaway"
    )

    ticket = TicketService.get_ticket(db_session, issued.ticket_id)

    assert ticket["user_id"] == "user-2"
    assert ticket["qr_code_data"] == "GIVEAWAY-user-2-free-show-1"
    assert TicketService.get_ticket(db_session, "TKT-NOPE") is None
