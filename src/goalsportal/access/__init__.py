"""
Access Control

Role-to-part authorization and the explicit session context.
"""

from .roles import PART_ROLES, PartName, Role, can_edit, editable_parts, role_email, roles_for
from .session import SessionContext

__all__ = [
    "PART_ROLES",
    "PartName",
    "Role",
    "can_edit",
    "editable_parts",
    "role_email",
    "roles_for",
    "SessionContext",
]
