"""
Giveaway entry and win models
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from noravenolife.core.db import Base

class GiveawayEntry(Base):
    __tablename__ = "giveaway_entries"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(128), nullable=False, index=True)
    event_id = Column(String(100), ForeignKey("music_events.id"), nullable=False)
    entered_at = Column(DateTime, default=datetime.utcnow)

    event = relationship("MusicEvent", back_populates="giveaway_entries")

    # One entry per user per giveaway
    __table_args__ = (UniqueConstraint("user_id", "event_id", name="uq_giveaway_entry_user_event"),)

class GiveawayWin(Base):
    __tablename__ = "giveaway_wins"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(128), nullable=False, index=True)
    event_id = Column(String(100), ForeignKey("music_events.id"), nullable=False)
    won_at = Column(DateTime, default=datetime.utcnow)

    event = relationship("MusicEvent", back_populates="giveaway_wins")

    __table_args__ = (UniqueConstraint("user_id", "event_id", name="uq_giveaway_win_user_event"),)
