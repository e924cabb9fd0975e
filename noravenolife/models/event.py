"""
Music event model
"""

from datetime import datetime
from sqlalchemy import Column, String, Text, Float, Integer, Boolean, DateTime
from sqlalchemy.orm import relationship

from noravenolife.core.db import Base

class MusicEvent(Base):
    __tablename__ = "music_events"

    id = Column(String(100), primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    artist = Column(String(255), nullable=False)
    artist_bio = Column(Text, default="")
    venue = Column(String(255), nullable=False)
    venue_details = Column(Text, default="")
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    date_time = Column(DateTime, nullable=False, index=True)
    ticket_price = Column(Float, nullable=True)  # null means not for sale
    ticket_url = Column(String(500), default="#")
    description = Column(Text, default="")
    image_url = Column(String(500), default="")
    giveaway_active = Column(Boolean, default=False)
    giveaway_end_date = Column(DateTime, nullable=True)
    giveaway_tickets = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    tickets = relationship("UserTicket", back_populates="event", cascade="all, delete-orphan")
    giveaway_entries = relationship("GiveawayEntry", back_populates="event", cascade="all, delete-orphan")
    giveaway_wins = relationship("GiveawayWin", back_populates="event", cascade="all, delete-orphan")
