"""
Excel processing service for event line-up import and giveaway entrant export
"""

import io
from typing import Any, Dict, List, Optional, Tuple
import pandas as pd
from pydantic import ValidationError
from sqlalchemy.orm import Session

from noravenolife.schemas.event import EventCreate, EventUpdate
from noravenolife.services.event_service import EventService
from noravenolife.services.giveaway_service import GiveawayService
from noravenolife.services.user_service import UserService
from noravenolife.utils.formatting import parse_datetime

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# Normalized header -> event field
COLUMNS = {
    'id': 'id',
    'name': 'name',
    'artist': 'artist',
    'venue': 'venue',
    'date time': 'date_time',
    'latitude': 'latitude',
    'longitude': 'longitude',
    'ticket price': 'ticket_price',
    'giveaway tickets': 'giveaway_tickets',
    'giveaway end date': 'giveaway_end_date',
    'image url': 'image_url',
    'description': 'description',
}

class ExcelService:
    """Service for handling Excel operations"""

    REQUIRED_COLUMNS = ['id', 'name', 'artist', 'venue', 'date time', 'latitude', 'longitude']

    @staticmethod
    def _write(df: pd.DataFrame, sheet_name: str) -> bytes:
        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
            df.to_excel(writer, index=False, sheet_name=sheet_name)
        return buffer.getvalue()

    @staticmethod
    def create_template() -> bytes:
        """Create Excel template for importing a line-up"""
        df = pd.DataFrame(columns=[
            'ID', 'Name', 'Artist', 'Venue', 'Date Time', 'Latitude', 'Longitude',
            'Ticket Price', 'Giveaway Tickets', 'Giveaway End Date', 'Image URL', 'Description'
        ])

        # Sample row for guidance
        df.loc[len(df)] = [
            'sample-night-01', 'Sample Night', 'Sample Artist', 'Sample Venue', '2030-06-15T22:00:00',
            40.7128, -74.0060, 25, 3, '2030-06-10T12:00:00', '', 'A sample event'
        ]

        return ExcelService._write(df, 'Events')

    @staticmethod
    def _column_mapping(df: pd.DataFrame) -> Dict[str, str]:
        mapping = {}
        for col in df.columns:
            key = str(col).lower().strip()
            if key in COLUMNS:
                mapping[COLUMNS[key]] = col
        return mapping

    @staticmethod
    def validate_excel_structure(df: pd.DataFrame) -> Tuple[bool, List[str]]:
        """Validate Excel file structure"""
        errors = []

        normalized_columns = [str(col).lower().strip() for col in df.columns]
        missing_columns = [col for col in ExcelService.REQUIRED_COLUMNS if col not in normalized_columns]

        if missing_columns:
            errors.append(f"Missing required columns: {', '.join(missing_columns)}")

        return len(errors) == 0, errors

    @staticmethod
    def validate_data_constraints(df: pd.DataFrame) -> Tuple[bool, List[str]]:
        """Validate cross-row constraints like unique ids and numeric coordinates"""
        errors = []
        column_mapping = ExcelService._column_mapping(df)

        if 'id' in column_mapping:
            ids = df[column_mapping['id']].dropna().astype(str).str.strip()
            for event_id, count in ids.value_counts().items():
                if count > 1:
                    errors.append(f"Duplicate event id '{event_id}' ({count} times)")

        for field in ('latitude', 'longitude', 'ticket_price', 'giveaway_tickets'):
            if field in column_mapping:
                try:
                    pd.to_numeric(df[column_mapping[field]], errors='raise')
                except (ValueError, TypeError):
                    errors.append(f"Column '{column_mapping[field]}' must be numeric")

        return len(errors) == 0, errors

    @staticmethod
    def _cell(row: pd.Series, column_mapping: Dict[str, str], field: str) -> Optional[Any]:
        if field not in column_mapping:
            return None
        value = row[column_mapping[field]]
        if pd.isna(value):
            return None
        if isinstance(value, str):
            value = value.strip()
            return value or None
        if isinstance(value, pd.Timestamp):
            return value.to_pydatetime()
        return value

    @staticmethod
    def row_to_event(row: pd.Series, column_mapping: Dict[str, str]) -> EventCreate:
        """Build an event from a row; optional fields are set only when the sheet has their column"""
        cell = lambda field: ExcelService._cell(row, column_mapping, field)  # noqa: E731
        text = lambda field: None if cell(field) is None else str(cell(field))  # noqa: E731

        data = {
            'id': text('id'),
            'name': text('name'),
            'artist': text('artist'),
            'venue': text('venue'),
            'location': {"lat": float(cell('latitude')), "lng": float(cell('longitude'))},
            'date_time': parse_datetime(cell('date_time')),
        }
        if 'ticket_price' in column_mapping:
            ticket_price = cell('ticket_price')
            data['ticket_price'] = float(ticket_price) if ticket_price is not None else None
        if 'description' in column_mapping:
            data['description'] = text('description') or ""
        if 'image_url' in column_mapping:
            data['image_url'] = text('image_url') or ""
        if 'giveaway_tickets' in column_mapping:
            giveaway_tickets = cell('giveaway_tickets')
            data['giveaway_active'] = bool(giveaway_tickets)
            data['giveaway_tickets'] = int(giveaway_tickets) if giveaway_tickets else None
        if 'giveaway_end_date' in column_mapping:
            data['giveaway_end_date'] = parse_datetime(cell('giveaway_end_date'))

        return EventCreate(**data)

    @staticmethod
    def process_excel_upload(file_content: bytes, db: Session) -> Tuple[bool, List[str], int]:
        """Import a line-up; existing event ids are updated, new ones created"""
        try:
            df = pd.read_excel(io.BytesIO(file_content))
        except Exception as e:
            return False, [f"Error reading Excel file: {str(e)}"], 0

        valid_structure, structure_errors = ExcelService.validate_excel_structure(df)
        if not valid_structure:
            return False, structure_errors, 0

        valid_data, data_errors = ExcelService.validate_data_constraints(df)
        if not valid_data:
            return False, data_errors, 0

        column_mapping = ExcelService._column_mapping(df)

        events = []
        errors = []
        for index, row in df.iterrows():
            # Skip empty rows
            if ExcelService._cell(row, column_mapping, 'id') is None:
                continue
            try:
                events.append(ExcelService.row_to_event(row, column_mapping))
            except (ValidationError, ValueError, TypeError) as e:
                # Header is row 1
                errors.append(f"Row {index + 2}: {e}")

        if errors:
            return False, errors, 0

        for event in events:
            if EventService.get_event(db, event.id):
                EventService.update_event(db, event.id, EventUpdate(**event.dict(exclude={'id'}, exclude_unset=True)))
            else:
                EventService.create_event(db, event)

        return True, [], len(events)

    @staticmethod
    def export_entries(db: Session, event_id: str) -> bytes:
        """Export an event's giveaway entrants to Excel"""
        data = []
        for entry in GiveawayService.list_entries(db, event_id):
            profile = UserService.get_user_profile(db, entry.user_id)
            data.append({
                'User ID': entry.user_id,
                'Email': profile.email if profile else '',
                'Display Name': profile.display_name if profile else '',
                'Entered At': entry.entered_at,
                'Won': 'Yes' if entry.won else 'No',
            })

        df = pd.DataFrame(data, columns=['User ID', 'Email', 'Display Name', 'Entered At', 'Won'])
        return ExcelService._write(df, 'Giveaway Entries')
