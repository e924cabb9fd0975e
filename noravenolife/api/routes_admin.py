"""
Admin API routes - requires authentication
"""

from fastapi import APIRouter, Depends, UploadFile, File
from fastapi.responses import Response
from sqlalchemy.orm import Session

from noravenolife.core.config import settings
from noravenolife.core.db import get_db
from noravenolife.schemas.event import EventCreate, EventUpdate
from noravenolife.schemas.user import RoleUpdate
from noravenolife.services.event_service import EventService
from noravenolife.services.excel_service import ExcelService, XLSX_MEDIA_TYPE
from noravenolife.services.giveaway_service import GiveawayService
from noravenolife.services.user_service import UserService
from noravenolife.utils.security import verify_admin_token
from noravenolife.utils.responses import success_response, error_response, not_found_error

router = APIRouter()

@router.post("/events")
async def create_event(
    event_data: EventCreate,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Create a new event"""
    event = EventService.create_event(db, event_data)
    if not event:
        return error_response(
            message=f"Event '{event_data.id}' already exists",
            error_code="duplicate_event",
            status_code=409
        )

    return success_response(message="Event created successfully", data=event.dict(), status_code=201)

@router.patch("/events/{event_id}")
async def update_event(
    event_id: str,
    event_update: EventUpdate,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Update event details or giveaway settings"""
    event = EventService.update_event(db, event_id, event_update)
    if not event:
        raise not_found_error("Event")

    return success_response(message="Event updated successfully", data=event.dict())

@router.delete("/events/{event_id}")
async def delete_event(
    event_id: str,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Delete an event with its tickets and giveaway records"""
    if not EventService.delete_event(db, event_id):
        raise not_found_error("Event")

    return success_response(
        message="Event deleted successfully",
        data={"deleted_event_id": event_id}
    )

@router.get("/events/{event_id}/entries")
async def list_entries(
    event_id: str,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Giveaway entrants for an event"""
    if not EventService.get_event(db, event_id):
        raise not_found_error("Event")

    entries = GiveawayService.list_entries(db, event_id)
    return success_response(
        message="Giveaway entries retrieved",
        data={
            "entries": [entry.dict() for entry in entries],
            "total": len(entries),
            "winners": sum(1 for entry in entries if entry.won)
        }
    )

@router.get("/events/{event_id}/entries.xlsx")
async def export_entries(
    event_id: str,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Export giveaway entrants to Excel"""
    if not EventService.get_event(db, event_id):
        raise not_found_error("Event")

    return Response(
        content=ExcelService.export_entries(db, event_id),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename=giveaway_entries_{event_id}.xlsx"}
    )

@router.get("/events-template.xlsx")
async def download_template(token: str = Depends(verify_admin_token)):
    """Download the Excel template for line-up imports"""
    return Response(
        content=ExcelService.create_template(),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": "attachment; filename=events_template.xlsx"}
    )

@router.post("/events/import")
async def import_events(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Create or update events from an uploaded Excel file"""
    if not file.filename.endswith(('.xlsx', '.xls')):
        return error_response(
            message="Invalid file format. Please upload an Excel file (.xlsx or .xls)",
            status_code=400
        )

    file_content = await file.read()
    if len(file_content) > settings.MAX_UPLOAD_SIZE:
        return error_response(message="File too large", status_code=413)

    success, errors, processed_count = ExcelService.process_excel_upload(file_content, db)
    if not success:
        return error_response(
            message="Excel file validation failed",
            details=errors,
            status_code=422
        )

    return success_response(
        message=f"Excel file processed successfully. {processed_count} events imported.",
        data={
            "processed_count": processed_count,
            "filename": file.filename
        }
    )

@router.get("/users")
async def list_users(
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """List user profiles"""
    profiles = UserService.list_user_profiles(db)
    return success_response(message="Users retrieved", data=[p.dict() for p in profiles])

@router.patch("/users/{uid}/role")
async def update_user_role(
    uid: str,
    role_update: RoleUpdate,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Promote a user to producer or demote to attendee"""
    profile = UserService.update_user_role(db, uid, role_update.role)
    if not profile:
        raise not_found_error("User")

    return success_response(message="User role updated", data=profile.dict())
