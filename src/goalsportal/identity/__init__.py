"""
Identity Provider Integration
"""

from .client import AuthSession, IdentityClient, IdentityError, IdentityUser

__all__ = [
    "AuthSession",
    "IdentityClient",
    "IdentityError",
    "IdentityUser",
]
