"""
Tests for the Excel line-up import and giveaway entrant export
"""

import asyncio
import io
import random

import pandas as pd

from noravenolife.api.ws import WebSocketManager
from noravenolife.services.event_service import EventService
from noravenolife.services.excel_service import ExcelService
from noravenolife.services.giveaway_service import GiveawayService

def workbook(rows):
    return ExcelService._write(pd.DataFrame(rows), 'Events')

def lineup_row(event_id="warehouse-01", **overrides):
    row = {
        'ID': event_id,
        'Name': 'Warehouse Rave',
        'Artist': 'DJ Test',
        'Venue': 'Warehouse',
        'Date Time': '2030-03-01T23:00:00',
        'Latitude': 52.52,
        'Longitude': 13.405,
        'Ticket Price': 20,
    }
    row.update(overrides)
    return row

def test_template_imports_cleanly(db_session):
    success, errors, count = ExcelService.process_excel_upload(ExcelService.create_template(), db_session)

    assert (success, errors, count) == (True, [], 1)
    event = EventService.get_event(db_session, "sample-night-01")
    assert event.artist == "Sample Artist"
    assert event.giveaway_active is True
    assert event.giveaway_tickets == 3
    assert event.ticket_price == 25

def test_import_creates_then_updates(db_session):
    ExcelService.process_excel_upload(workbook([lineup_row()]), db_session)
    success, _, count = ExcelService.process_excel_upload(
        workbook([lineup_row(Name='Warehouse Rave II')]), db_session
    )

    assert success and count == 1
    assert len(EventService.list_events(db_session)) == 1
    assert EventService.get_event(db_session, "warehouse-01").name == "Warehouse Rave II"

def test_reimport_keeps_fields_without_columns(db_session, lineup):
    row = {
        'ID': 'open-giveaway',
        'Name': 'Renamed Night',
        'Artist': 'Artist open-giveaway',
        'Venue': 'Venue open-giveaway',
        'Date Time': '2030-03-01T23:00:00',
        'Latitude': 40.7128,
        'Longitude': -74.006,
    }

    success, _, _ = ExcelService.process_excel_upload(workbook([row]), db_session)

    event = EventService.get_event(db_session, "open-giveaway")
    assert success
    assert event.name == "Renamed Night"
    assert event.artist_bio == "Bio"
    assert event.venue_details == "Details"
    assert event.ticket_price == 30.0
    assert event.giveaway_active is True
    assert event.giveaway_tickets == 5

def test_missing_columns():
    df = pd.DataFrame([{'ID': 'x', 'Name': 'X'}])

    valid, errors = ExcelService.validate_excel_structure(df)

    assert not valid
    assert errors == ["Missing required columns: artist, venue, date time, latitude, longitude"]

def test_duplicate_ids(db_session):
    success, errors, count = ExcelService.process_excel_upload(
        workbook([lineup_row(), lineup_row()]), db_session
    )

    assert not success
    assert count == 0
    assert "Duplicate event id 'warehouse-01' (2 times)" in errors
    assert EventService.list_events(db_session) == []

def test_non_numeric_coordinates(db_session):
    success, errors, _ = ExcelService.process_excel_upload(
        workbook([lineup_row(Latitude='north')]), db_session
    )

    assert not success
    assert errors == ["Column 'Latitude' must be numeric"]

def test_unreadable_file(db_session):
    success, errors, _ = ExcelService.process_excel_upload(b"not a spreadsheet", db_session)

    assert not success
    assert errors[0].startswith("Error reading Excel file")

def test_export_entries(db_session, lineup):
    service = GiveawayService(WebSocketManager(), rng=random.Random(0), win_chance=1.0)
    asyncio.run(service.enter_giveaway("user-1", "open-giveaway", db_session))

    df = pd.read_excel(io.BytesIO(ExcelService.export_entries(db_session, "open-giveaway")))

    assert list(df.columns) == ['User ID', 'Email', 'Display Name', 'Entered At', 'Won']
    assert df.iloc[0]['Email'] == "raver@example.com"
    assert df.iloc[0]['Won'] == "Yes"
