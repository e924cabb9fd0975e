"""
JSON API routes for events, giveaways and tickets
"""

from typing import Optional

from fastapi import APIRouter, Depends, Request, HTTPException, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from noravenolife.core.db import get_db
from noravenolife.api.ws import websocket_manager
from noravenolife.schemas.event import Location
from noravenolife.schemas.giveaway import GiveawayOutcome
from noravenolife.services.event_service import EventService
from noravenolife.services.giveaway_service import GiveawayService, entry_message
from noravenolife.services.qr_service import QRService
from noravenolife.services.ticket_service import TicketService
from noravenolife.services.user_service import UserService
from noravenolife.utils.security import rate_limit_check, get_client_ip, require_user
from noravenolife.utils.responses import success_response, error_response, rate_limit_error, not_found_error

router = APIRouter()

giveaway_service = GiveawayService(websocket_manager)

ENTRY_STATUS_CODES = {
    GiveawayOutcome.ENTERED: 201,
    GiveawayOutcome.NOT_FOUND: 404,
    GiveawayOutcome.NOT_ACTIVE: 409,
    GiveawayOutcome.ENDED: 409,
    GiveawayOutcome.ALREADY_ENTERED: 409,
}

@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok"}

@router.get("/api/events")
async def list_events(
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lng: Optional[float] = Query(None, ge=-180, le=180),
    radius_km: Optional[float] = Query(None, gt=0),
    db: Session = Depends(get_db)
):
    """List events by date, optionally near a location"""
    near = Location(lat=lat, lng=lng) if lat is not None and lng is not None else None
    events = EventService.list_events(db, near=near, radius_km=radius_km)

    return success_response(
        message="Events retrieved successfully",
        data=[event.dict() for event in events]
    )

@router.get("/api/events/{event_id}")
async def get_event(event_id: str, db: Session = Depends(get_db)):
    """Get a single event"""
    event = EventService.get_event(db, event_id)
    if not event:
        raise not_found_error("Event")

    return success_response(message="Event retrieved successfully", data=event.dict())

@router.get("/api/events/{event_id}/giveaway")
async def giveaway_status(
    event_id: str,
    user: dict = Depends(require_user),
    db: Session = Depends(get_db)
):
    """Whether the signed-in user has entered the event's giveaway"""
    entered = GiveawayService.has_user_entered(db, user["id"], event_id)
    return success_response(
        message="Giveaway status retrieved",
        data={"event_id": event_id, "entered": entered}
    )

@router.post("/api/events/{event_id}/giveaway")
async def enter_giveaway(
    event_id: str,
    request: Request,
    user: dict = Depends(require_user),
    db: Session = Depends(get_db)
):
    """Enter the signed-in user into the event's giveaway"""
    client_ip = get_client_ip(request)
    if not rate_limit_check(client_ip):
        raise rate_limit_error()

    result = await giveaway_service.enter_giveaway(user["id"], event_id, db)
    event = EventService.get_event(db, event_id)
    message = entry_message(result, event.name if event else event_id)

    if not result.success:
        return error_response(
            message=message,
            error_code=result.outcome.value,
            status_code=ENTRY_STATUS_CODES[result.outcome]
        )

    return success_response(
        message=message,
        data={"event_id": event_id, "outcome": result.outcome.value, "won": result.won},
        status_code=ENTRY_STATUS_CODES[result.outcome]
    )

@router.post("/api/events/{event_id}/purchase")
async def purchase_ticket(
    event_id: str,
    user: dict = Depends(require_user),
    db: Session = Depends(get_db)
):
    """Buy a ticket for the signed-in user"""
    ticket = TicketService.purchase_ticket(db, user["id"], event_id)
    if not ticket:
        return error_response(
            message="Tickets for this event are not available for purchase.",
            error_code="not_purchasable",
            status_code=400
        )

    return success_response(message="Ticket purchased", data=ticket.dict(), status_code=201)

@router.get("/api/me")
async def get_profile(user: dict = Depends(require_user), db: Session = Depends(get_db)):
    """Profile of the signed-in user"""
    profile = UserService.get_user_profile(db, user["id"])
    if not profile:
        raise not_found_error("User profile")
    return success_response(message="Profile retrieved", data=profile.dict())

@router.get("/api/me/tickets")
async def my_tickets(user: dict = Depends(require_user), db: Session = Depends(get_db)):
    """Tickets held by the signed-in user"""
    tickets = TicketService.get_user_tickets(db, user["id"])
    return success_response(
        message="Tickets retrieved successfully",
        data=[ticket.dict() for ticket in tickets]
    )

@router.get("/api/me/notifications")
async def my_notifications(user: dict = Depends(require_user), db: Session = Depends(get_db)):
    """Giveaways the signed-in user has won"""
    wins = GiveawayService.get_win_notifications(db, user["id"])
    return success_response(
        message="Notifications retrieved successfully",
        data=[event.dict() for event in wins]
    )

@router.get("/tickets/{ticket_id}/qr.png")
async def ticket_qr_code(
    ticket_id: str,
    user: dict = Depends(require_user),
    db: Session = Depends(get_db)
):
    """QR code image for one of the signed-in user's tickets"""
    ticket = TicketService.get_ticket(db, ticket_id)
    if not ticket or ticket["user_id"] != user["id"]:
        raise not_found_error("Ticket")

    return Response(
        content=QRService.generate_ticket_qr(ticket["qr_code_data"]),
        media_type="image/png",
        headers={"Content-Disposition": f"inline; filename=ticket_{ticket_id}.png"}
    )

@router.get("/events/{event_id}/qr.png")
async def event_qr_code(event_id: str, db: Session = Depends(get_db)):
    """Shareable QR code linking to the event page"""
    if not EventService.get_event(db, event_id):
        raise HTTPException(status_code=404, detail="Event not found")

    return Response(
        content=QRService.generate_event_qr(event_id),
        media_type="image/png",
        headers={"Content-Disposition": f"inline; filename=event_{event_id}.png"}
    )
