"""
Server-rendered pages: home, event detail, my tickets, notifications
"""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, Request, HTTPException
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from noravenolife.core.db import get_db
from noravenolife.api.ws import websocket_manager
from noravenolife.services.event_service import EventService
from noravenolife.services.giveaway_service import GiveawayService, entry_message
from noravenolife.services.ticket_service import TicketService
from noravenolife.utils.security import flash, get_session_user, rate_limit_check, get_client_ip
from noravenolife.utils.templating import render

logger = logging.getLogger(__name__)

router = APIRouter()

giveaway_service = GiveawayService(websocket_manager)

def _login_redirect(request: Request, message: str) -> RedirectResponse:
    flash(request, message, "error")
    return RedirectResponse(url="/login", status_code=303)

@router.get("/")
async def home(request: Request, db: Session = Depends(get_db)):
    """Hero, artist of the week and the event list"""
    events = []
    featured_event = None
    fetch_error = None

    try:
        events = EventService.list_events(db)
        featured_event = EventService.featured_event(db)
    except Exception as e:
        logger.error(f"Failed to fetch events for Home Page: {e}")
        fetch_error = "Could not load event data. Please try again later."

    return render(
        request,
        "home.html",
        events=events,
        featured_event=featured_event,
        fetch_error=fetch_error
    )

@router.get("/events/{event_id}")
async def event_detail(event_id: str, request: Request, db: Session = Depends(get_db)):
    """Event details, venue map and giveaway section"""
    event = EventService.get_event(db, event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")

    user = get_session_user(request)
    now = datetime.utcnow()
    giveaway_open = event.giveaway_end_date is None or now < event.giveaway_end_date

    entered = False
    if user and event.giveaway_active:
        try:
            entered = GiveawayService.has_user_entered(db, user["id"], event.id)
        except Exception as e:
            logger.error(f"Failed to check giveaway status: {e}")

    return render(
        request,
        "event_detail.html",
        event=event,
        giveaway_open=giveaway_open,
        entered=entered,
        now=now
    )

@router.post("/events/{event_id}/giveaway")
async def enter_giveaway(event_id: str, request: Request, db: Session = Depends(get_db)):
    """Giveaway entry form submit"""
    user = get_session_user(request)
    if not user:
        return _login_redirect(request, "You need to be logged in to enter the giveaway.")

    if not rate_limit_check(get_client_ip(request)):
        flash(request, "Too many attempts. Please try again later.", "error")
        return RedirectResponse(url=f"/events/{event_id}", status_code=303)

    try:
        result = await giveaway_service.enter_giveaway(user["id"], event_id, db)
    except Exception as e:
        logger.error(f"Failed to enter giveaway: {e}")
        flash(request, "An error occurred while entering the giveaway. Please try again.", "error")
        return RedirectResponse(url=f"/events/{event_id}", status_code=303)

    event = EventService.get_event(db, event_id)
    flash(request, entry_message(result, event.name if event else event_id), "success" if result.success else "error")
    return RedirectResponse(url=f"/events/{event_id}", status_code=303)

@router.post("/events/{event_id}/purchase")
async def purchase_ticket(event_id: str, request: Request, db: Session = Depends(get_db)):
    """Buy-ticket form submit"""
    user = get_session_user(request)
    if not user:
        return _login_redirect(request, "You need to be logged in to buy tickets.")

    ticket = TicketService.purchase_ticket(db, user["id"], event_id)
    if not ticket:
        flash(request, "Tickets for this event are not available for purchase.", "error")
        return RedirectResponse(url=f"/events/{event_id}", status_code=303)

    flash(request, f"Ticket for {ticket.event_name} added to My Tickets.", "success")
    return RedirectResponse(url="/my-tickets", status_code=303)

@router.get("/my-tickets")
async def my_tickets(request: Request, db: Session = Depends(get_db)):
    """Purchased and won tickets with QR codes"""
    user = get_session_user(request)
    if not user:
        return _login_redirect(request, "Please log in to see your tickets.")

    tickets = []
    error = None
    try:
        tickets = TicketService.get_user_tickets(db, user["id"])
    except Exception as e:
        logger.error(f"Failed to fetch user tickets: {e}")
        error = "Could not load your tickets. Please try again later."

    return render(request, "my_tickets.html", tickets=tickets, error=error)

@router.get("/notifications")
async def notifications(request: Request, db: Session = Depends(get_db)):
    """Giveaway wins for the signed-in user"""
    user = get_session_user(request)
    wins = []
    error = None

    if user:
        try:
            wins = GiveawayService.get_win_notifications(db, user["id"])
        except Exception as e:
            logger.error(f"Failed to fetch giveaway wins: {e}")
            error = "Could not load notifications. Please try again later."

    return render(request, "notifications.html", wins=wins, error=error)
