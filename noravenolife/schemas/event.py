"""
Music event Pydantic schemas
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

class Location(BaseModel):
    """Venue coordinates"""
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)

class MusicEventOut(BaseModel):
    """Music event as shown to users"""
    id: str
    name: str
    artist: str
    artist_bio: str = ""
    venue: str
    venue_details: str = ""
    location: Location
    date_time: datetime
    ticket_price: Optional[float] = None
    ticket_url: str = "#"
    description: str = ""
    image_url: str = ""
    giveaway_active: bool = False
    giveaway_end_date: Optional[datetime] = None
    giveaway_tickets: Optional[int] = None

class EventCreate(BaseModel):
    """Schema for creating an event"""
    id: str = Field(..., min_length=1, max_length=100)
    name: str
    artist: str
    artist_bio: str = ""
    venue: str
    venue_details: str = ""
    location: Location
    date_time: datetime
    ticket_price: Optional[float] = Field(None, ge=0)
    ticket_url: str = "#"
    description: str = ""
    image_url: str = ""
    giveaway_active: bool = False
    giveaway_end_date: Optional[datetime] = None
    giveaway_tickets: Optional[int] = Field(None, ge=1)

class EventUpdate(BaseModel):
    """Schema for updating an event"""
    name: Optional[str] = None
    artist: Optional[str] = None
    artist_bio: Optional[str] = None
    venue: Optional[str] = None
    venue_details: Optional[str] = None
    location: Optional[Location] = None
    date_time: Optional[datetime] = None
    ticket_price: Optional[float] = Field(None, ge=0)
    ticket_url: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    giveaway_active: Optional[bool] = None
    giveaway_end_date: Optional[datetime] = None
    giveaway_tickets: Optional[int] = Field(None, ge=1)
