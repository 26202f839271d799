"""
Role-to-Part Authorization

Each Part of a pair's record is edited by exactly one role. The mapping is
fixed; membership is decided by comparing the session email with the
matching email on the roster pair, case-insensitively.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Protocol


class PartName(StrEnum):
    """The four sequential sections of an evaluation record."""

    PART1 = "Part1"
    PART2 = "Part2"
    PART3 = "Part3"
    PART4 = "Part4"


class Role(StrEnum):
    """Participant roles on a roster pair."""

    EDUCATOR = "educator"
    EVALUATOR = "evaluator"
    RESOLUTION = "resolution"


PART_ROLES: dict[PartName, Role] = {
    PartName.PART1: Role.EDUCATOR,
    PartName.PART2: Role.EVALUATOR,
    PartName.PART3: Role.RESOLUTION,
    PartName.PART4: Role.EVALUATOR,
}


class HasRoleEmails(Protocol):
    """Anything carrying the three role emails (ORM row or schema)."""

    educator_email: str | None
    evaluator_email: str | None
    resolution_email: str | None


def _fold(email: str | None) -> str:
    return (email or "").strip().lower()


def role_email(pair: HasRoleEmails, role: Role) -> str | None:
    """Email of whoever holds `role` on the pair."""
    if role is Role.EDUCATOR:
        return pair.educator_email
    if role is Role.EVALUATOR:
        return pair.evaluator_email
    return pair.resolution_email


def roles_for(pair: HasRoleEmails, email: str | None) -> set[Role]:
    """All roles `email` holds on the pair (empty when signed out)."""
    me = _fold(email)
    if not me:
        return set()
    return {role for role in Role if _fold(role_email(pair, role)) == me}


def can_edit(pair: HasRoleEmails | None, part: PartName | str, email: str | None) -> bool:
    """Whether `email` may edit `part` of the pair.

    True iff the email matches, case-insensitively, the roster email of the
    role that owns the part. A missing pair, a signed-out user or an unset
    roster email never grants access.
    """
    if pair is None:
        return False
    me = _fold(email)
    owner = _fold(role_email(pair, PART_ROLES[PartName(part)]))
    return bool(me) and me == owner


def editable_parts(pair: HasRoleEmails, email: str | None) -> list[PartName]:
    """Parts of the pair that `email` may edit, in Part order."""
    return [part for part in PartName if can_edit(pair, part, email)]
