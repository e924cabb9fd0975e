"""
Giveaway entry and win service with real-time notifications
"""

import logging
import random
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from noravenolife.api.ws import WebSocketManager
from noravenolife.core.config import settings
from noravenolife.schemas.event import MusicEventOut
from noravenolife.schemas.giveaway import GiveawayEntryOut, GiveawayEntryResult, GiveawayOutcome
from noravenolife.services.event_service import EventService
from noravenolife.services.repositories import DuplicateRecordError, GiveawayRepo, use_sql
from noravenolife.services.ticket_service import TicketService
from noravenolife.utils.formatting import to_naive_utc

logger = logging.getLogger(__name__)

REJECTION_MESSAGES = {
    GiveawayOutcome.NOT_FOUND: "Event not found.",
    GiveawayOutcome.NOT_ACTIVE: "Could not enter giveaway. There is no giveaway running for this event.",
    GiveawayOutcome.ENDED: "Could not enter giveaway. The entry period has ended.",
    GiveawayOutcome.ALREADY_ENTERED: "Could not enter giveaway. You've already entered.",
}

def entry_message(result: GiveawayEntryResult, event_name: str = "this event") -> str:
    """User-facing text for an entry attempt"""
    if result.outcome != GiveawayOutcome.ENTERED:
        return REJECTION_MESSAGES[result.outcome]
    if result.won:
        return f"You're in the draw for {event_name} and you won a ticket! Check My Tickets."
    return f"You're in the draw for {event_name}. Good luck!"

class GiveawayService:
    """Service for entering giveaways and reporting wins"""

    def __init__(
        self,
        websocket_manager: WebSocketManager,
        rng: Optional[random.Random] = None,
        win_chance: Optional[float] = None
    ):
        self.websocket_manager = websocket_manager
        self.rng = rng or random.Random()
        self.win_chance = settings.GIVEAWAY_WIN_CHANCE if win_chance is None else win_chance

    async def enter_giveaway(
        self,
        user_id: str,
        event_id: str,
        db: Session,
        now: Optional[datetime] = None
    ) -> GiveawayEntryResult:
        """Enter a user into an event's giveaway and roll for a win"""
        now = now or datetime.utcnow()

        event = EventService.get_event(db, event_id)
        if not event:
            logger.warning(f"Giveaway entry rejected: event {event_id} not found")
            return GiveawayEntryResult(outcome=GiveawayOutcome.NOT_FOUND)

        if not event.giveaway_active:
            logger.warning(f"Giveaway not active for {event_id}")
            return GiveawayEntryResult(outcome=GiveawayOutcome.NOT_ACTIVE)

        if event.giveaway_end_date and now > event.giveaway_end_date:
            logger.warning(f"Giveaway ended for {event_id}")
            return GiveawayEntryResult(outcome=GiveawayOutcome.ENDED)

        if GiveawayService.has_user_entered(db, user_id, event_id):
            logger.warning(f"User {user_id} already entered giveaway for {event_id}")
            return GiveawayEntryResult(outcome=GiveawayOutcome.ALREADY_ENTERED)

        try:
            if use_sql():
                GiveawayRepo.add_entry_sql(db, user_id, event_id)
            else:
                GiveawayRepo.add_entry_doc(user_id, event_id)
        except DuplicateRecordError:
            # Lost a race against a concurrent entry for the same pair
            logger.warning(f"User {user_id} already entered giveaway for {event_id}")
            return GiveawayEntryResult(outcome=GiveawayOutcome.ALREADY_ENTERED)

        logger.info(f"User {user_id} successfully entered giveaway for {event_id}")

        won = self.rng.random() < self.win_chance
        if won:
            await self._award(db, user_id, event)

        return GiveawayEntryResult(outcome=GiveawayOutcome.ENTERED, won=won)

    async def _award(self, db: Session, user_id: str, event: MusicEventOut) -> None:
        """Record the win, issue the giveaway ticket and notify the user"""
        try:
            if use_sql():
                GiveawayRepo.add_win_sql(db, user_id, event.id)
            else:
                GiveawayRepo.add_win_doc(user_id, event.id)
        except DuplicateRecordError:
            logger.warning(f"User {user_id} already won the giveaway for {event.id}")
            return

        ticket = TicketService.issue_ticket(db, user_id, event, "giveaway")
        logger.info(f"User {user_id} won the giveaway for {event.id}")

        await self.broadcast_win(user_id, event, ticket.ticket_id)

    async def broadcast_win(self, user_id: str, event: MusicEventOut, ticket_id: str):
        """Push a win notification to the user's open connections"""
        message = {
            "type": "giveaway_win",
            "event": {
                "id": event.id,
                "name": event.name,
                "artist": event.artist,
                "venue": event.venue,
                "date_time": event.date_time.isoformat(),
            },
            "ticket_id": ticket_id,
            "timestamp": datetime.utcnow().isoformat()
        }

        await self.websocket_manager.broadcast_to_user(user_id, message)

    @staticmethod
    def has_user_entered(db: Session, user_id: str, event_id: str) -> bool:
        if use_sql():
            return GiveawayRepo.has_entry_sql(db, user_id, event_id)
        return GiveawayRepo.has_entry_doc(user_id, event_id)

    @staticmethod
    def check_giveaway_wins(db: Session, user_id: str) -> List[str]:
        """Event ids whose giveaway the user has won"""
        if use_sql():
            won_event_ids = [w.event_id for w in GiveawayRepo.list_wins_sql(db, user_id=user_id)]
        else:
            won_event_ids = [w["event_id"] for w in GiveawayRepo.list_wins_doc(user_id=user_id)]

        logger.info(f"User {user_id} found wins for events: {won_event_ids}")
        return won_event_ids

    @staticmethod
    def get_win_notifications(db: Session, user_id: str) -> List[MusicEventOut]:
        """Events the user has won, skipping ids that no longer resolve"""
        wins = []
        for event_id in GiveawayService.check_giveaway_wins(db, user_id):
            event = EventService.get_event(db, event_id)
            if event:
                wins.append(event)
            else:
                logger.warning(f"Could not fetch details for won event ID: {event_id}")
        return wins

    @staticmethod
    def list_entries(db: Session, event_id: str) -> List[GiveawayEntryOut]:
        """Entrants of an event's giveaway in entry order, with their win flag"""
        if use_sql():
            entries = [(e.user_id, e.entered_at) for e in GiveawayRepo.list_entries_sql(db, event_id)]
            winners = {w.user_id for w in GiveawayRepo.list_wins_sql(db, event_id=event_id)}
        else:
            entries = [(e["user_id"], e["entered_at"]) for e in GiveawayRepo.list_entries_doc(event_id)]
            winners = {w["user_id"] for w in GiveawayRepo.list_wins_doc(event_id=event_id)}

        return [
            GiveawayEntryOut(
                user_id=user_id,
                event_id=event_id,
                entered_at=to_naive_utc(entered_at),
                won=user_id in winners
            )
            for user_id, entered_at in entries
        ]
