"""
Portal SQLAlchemy Models
"""

from .base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from .parts import PartRecord
from .roster import Admin, RosterPair

__all__ = [
    # Base
    "Base",
    "UUIDPrimaryKeyMixin",
    "TimestampMixin",
    # Roster
    "RosterPair",
    "Admin",
    # Parts
    "PartRecord",
]
