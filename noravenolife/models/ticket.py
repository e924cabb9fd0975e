"""
User ticket model
"""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from noravenolife.core.db import Base

class UserTicket(Base):
    __tablename__ = "user_tickets"

    id = Column(String(64), primary_key=True, index=True)
    user_id = Column(String(128), ForeignKey("user_profiles.id"), nullable=False, index=True)
    event_id = Column(String(100), ForeignKey("music_events.id"), nullable=False)
    type = Column(String(20), nullable=False)  # purchased, giveaway
    qr_code_data = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    user = relationship("UserProfile", back_populates="tickets")
    event = relationship("MusicEvent", back_populates="tickets")
