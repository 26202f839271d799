"""
Input validation functions for the portal.

All validation functions follow the pattern:
1. Accept raw user input
2. Normalize/clean the input
3. Validate against business rules
4. Return cleaned value or raise ValidationError
"""

import re

from goalsportal.access.roles import PartName


class ValidationError(Exception):
    """Raised when user input fails validation."""

    pass


# ============================================================================
# Email Validation
# ============================================================================

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def normalize_email(email: str | None) -> str:
    """
    Validate and normalize an email address.

    Emails are compared case-insensitively everywhere in the portal, so the
    canonical form is stripped and lower-cased.

    Args:
        email: Raw email input

    Returns:
        Lower-cased email

    Raises:
        ValidationError: If email is empty or malformed
    """
    if email is None or not email.strip():
        raise ValidationError("Email cannot be empty")

    cleaned = email.strip().lower()

    if len(cleaned) > 320:
        raise ValidationError("Email is too long")

    if not EMAIL_PATTERN.match(cleaned):
        raise ValidationError(f"Invalid email address: {email.strip()}")

    return cleaned


# ============================================================================
# Pair / Part Validation
# ============================================================================

PAIR_ID_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.\-]{0,63}$")


def validate_pair_id(pair_id: str | None) -> str:
    """
    Validate a roster pair identifier.

    Accepts letters, digits, dot, dash and underscore (max 64 chars).

    Raises:
        ValidationError: If pair id is empty or contains other characters
    """
    if pair_id is None or not pair_id.strip():
        raise ValidationError("Pair id cannot be empty")

    cleaned = pair_id.strip()

    if not PAIR_ID_PATTERN.match(cleaned):
        raise ValidationError(f"Invalid pair id: {cleaned}")

    return cleaned


def parse_part_name(raw: str | None) -> PartName:
    """
    Parse a part name.

    Accepts: "Part1", "part1", "Part 1", "1"

    Raises:
        ValidationError: If the value doesn't name one of the four parts
    """
    if raw is None or not raw.strip():
        raise ValidationError("Part name cannot be empty")

    cleaned = re.sub(r"\s+", "", raw.strip().lower())
    if cleaned.startswith("part"):
        cleaned = cleaned[4:]

    if cleaned not in {"1", "2", "3", "4"}:
        raise ValidationError(f"Unknown part: {raw.strip()} (expected Part1-Part4)")

    return PartName(f"Part{cleaned}")
