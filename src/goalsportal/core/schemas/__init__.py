"""Pydantic schemas for API validation."""

from .auth import (
    AdminCheckResponse,
    MeResponse,
    OneTimeCodeRequest,
    OneTimeCodeVerify,
    SessionResponse,
)
from .parts import (
    GOAL_SLOT_COUNT,
    READ_ONLY_NOTICE,
    Attainment,
    GoalOutcome,
    GoalReview,
    GoalSlot,
    P2Choice,
    PartFields,
    PartRecordSchema,
    PartView,
    StatusBanner,
)
from .roster import RosterEntry, RosterPairSchema

__all__ = [
    # Auth
    "OneTimeCodeRequest",
    "OneTimeCodeVerify",
    "SessionResponse",
    "MeResponse",
    "AdminCheckResponse",
    # Parts
    "GOAL_SLOT_COUNT",
    "READ_ONLY_NOTICE",
    "Attainment",
    "P2Choice",
    "GoalSlot",
    "GoalReview",
    "GoalOutcome",
    "PartFields",
    "PartRecordSchema",
    "PartView",
    "StatusBanner",
    # Roster
    "RosterPairSchema",
    "RosterEntry",
]
