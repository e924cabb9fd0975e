"""
Database models package
"""

from .event import MusicEvent
from .user import UserProfile
from .ticket import UserTicket
from .giveaway import GiveawayEntry, GiveawayWin

__all__ = ["MusicEvent", "UserProfile", "UserTicket", "GiveawayEntry", "GiveawayWin"]
