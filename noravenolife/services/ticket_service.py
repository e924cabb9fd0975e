"""
Ticket issuing and listing service
"""

import logging
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from sqlalchemy.orm import Session

from noravenolife.models import UserTicket
from noravenolife.schemas.event import MusicEventOut
from noravenolife.schemas.ticket import TicketType, UserTicketOut
from noravenolife.services.event_service import EventService
from noravenolife.services.repositories import TicketRepo, use_sql

logger = logging.getLogger(__name__)

QR_PREFIXES = {"giveaway": "GIVEAWAY", "purchased": "PURCHASE"}


def _ticket_field(ticket: Union[UserTicket, Dict[str, Any]], field: str):
    return ticket.get(field) if isinstance(ticket, dict) else getattr(ticket, field)


class TicketService:
    """Service for user tickets, whether bought or won"""

    @staticmethod
    def build_qr_payload(ticket_type: TicketType, user_id: str, event_id: str, counter: int) -> str:
        """Opaque payload encoded in the ticket QR code"""
        return f"{QR_PREFIXES[ticket_type]}-{user_id}-{event_id}-{counter}"

    @staticmethod
    def issue_ticket(
        db: Session,
        user_id: str,
        event: MusicEventOut,
        ticket_type: TicketType
    ) -> UserTicketOut:
        """Store a new ticket for ``user_id`` and return it joined with the event"""
        ticket_id = f"TKT-{uuid.uuid4().hex[:12].upper()}"

        if use_sql():
            counter = TicketRepo.count_for_user_sql(db, user_id) + 1
            qr_code_data = TicketService.build_qr_payload(ticket_type, user_id, event.id, counter)
            TicketRepo.add_sql(db, UserTicket(
                id=ticket_id,
                user_id=user_id,
                event_id=event.id,
                type=ticket_type,
                qr_code_data=qr_code_data
            ))
        else:
            counter = len(TicketRepo.list_for_user_doc(user_id)) + 1
            qr_code_data = TicketService.build_qr_payload(ticket_type, user_id, event.id, counter)
            TicketRepo.add_doc({
                "id": ticket_id,
                "user_id": user_id,
                "event_id": event.id,
                "type": ticket_type,
                "qr_code_data": qr_code_data,
                "created_at": datetime.utcnow(),
            })

        logger.info(f"Issued {ticket_type} ticket {ticket_id} to user {user_id} for event {event.id}")
        return UserTicketOut(
            ticket_id=ticket_id,
            event_id=event.id,
            event_name=event.name,
            venue=event.venue,
            date_time=event.date_time,
            type=ticket_type,
            qr_code_data=qr_code_data
        )

    @staticmethod
    def purchase_ticket(db: Session, user_id: str, event_id: str) -> Optional[UserTicketOut]:
        """Issue a purchased ticket; None for a missing event or one without a ticket price"""
        event = EventService.get_event(db, event_id)
        if not event or event.ticket_price is None:
            logger.error(f"Cannot purchase ticket for free or non-existent event {event_id}")
            return None

        # Several purchases for the same event are allowed
        return TicketService.issue_ticket(db, user_id, event, "purchased")

    @staticmethod
    def get_user_tickets(db: Session, user_id: str) -> List[UserTicketOut]:
        """All tickets held by a user, most recent event first"""
        if use_sql():
            stored = TicketRepo.list_for_user_sql(db, user_id)
        else:
            stored = TicketRepo.list_for_user_doc(user_id)

        events: Dict[str, Optional[MusicEventOut]] = {}
        tickets: List[UserTicketOut] = []
        for ticket in stored:
            event_id = _ticket_field(ticket, "event_id")
            if event_id not in events:
                events[event_id] = EventService.get_event(db, event_id)
            event = events[event_id]
            if not event:
                logger.warning(f"Skipping ticket {_ticket_field(ticket, 'id')}: event {event_id} no longer exists")
                continue

            tickets.append(UserTicketOut(
                ticket_id=_ticket_field(ticket, "id"),
                event_id=event.id,
                event_name=event.name,
                venue=event.venue,
                date_time=event.date_time,
                type=_ticket_field(ticket, "type"),
                qr_code_data=_ticket_field(ticket, "qr_code_data")
            ))

        tickets.sort(key=lambda t: t.date_time, reverse=True)
        logger.info(f"Retrieved {len(tickets)} tickets for user {user_id}")
        return tickets

    @staticmethod
    def get_ticket(db: Session, ticket_id: str) -> Optional[Dict[str, Any]]:
        """Raw ticket fields (id, user_id, event_id, type, qr_code_data) or None"""
        ticket = TicketRepo.get_sql(db, ticket_id) if use_sql() else TicketRepo.get_doc(ticket_id)
        if not ticket:
            return None
        return {
            field: _ticket_field(ticket, field)
            for field in ("id", "user_id", "event_id", "type", "qr_code_data")
        }
