"""
User profile model
"""

from datetime import datetime
from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship

from noravenolife.core.db import Base

class UserProfile(Base):
    __tablename__ = "user_profiles"

    id = Column(String(128), primary_key=True, index=True)  # auth provider subject
    email = Column(String(255), unique=True, nullable=True, index=True)
    display_name = Column(String(255), nullable=True)
    photo_url = Column(String(500), nullable=True)
    role = Column(String(20), nullable=False, default="attendee")  # attendee, producer
    password_hash = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    tickets = relationship("UserTicket", back_populates="user", cascade="all, delete-orphan")
