"""
Ticket Pydantic schemas
"""

from datetime import datetime
from typing import Literal
from pydantic import BaseModel

TicketType = Literal["purchased", "giveaway"]

class UserTicketOut(BaseModel):
    """A ticket joined with the event it admits to"""
    ticket_id: str
    event_id: str
    event_name: str
    venue: str
    date_time: datetime
    type: TicketType
    qr_code_data: str
