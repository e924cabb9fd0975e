"""
Giveaway Pydantic schemas
"""

from datetime import datetime
from enum import Enum
from pydantic import BaseModel

class GiveawayOutcome(str, Enum):
    """Result of a giveaway entry attempt"""
    ENTERED = "entered"
    ALREADY_ENTERED = "already_entered"
    NOT_FOUND = "not_found"
    NOT_ACTIVE = "not_active"
    ENDED = "ended"

class GiveawayEntryResult(BaseModel):
    """Outcome of enter_giveaway"""
    outcome: GiveawayOutcome
    won: bool = False

    @property
    def success(self) -> bool:
        return self.outcome == GiveawayOutcome.ENTERED

class GiveawayEntryOut(BaseModel):
    """A recorded giveaway entry"""
    user_id: str
    event_id: str
    entered_at: datetime
    won: bool = False
