"""
Pydantic schemas package
"""

from .common import *
from .event import *
from .giveaway import *
from .ticket import *
from .user import *

__all__ = [
    "StandardResponse",
    "ErrorResponse",
    "Location",
    "MusicEventOut",
    "EventCreate",
    "EventUpdate",
    "GiveawayOutcome",
    "GiveawayEntryResult",
    "GiveawayEntryOut",
    "TicketType",
    "UserTicketOut",
    "UserProfileOut",
    "AuthForm",
    "FirebaseSessionRequest",
    "RoleUpdate",
]
