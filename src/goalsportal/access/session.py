"""
Session Context

Explicit holder of the signed-in user's email. Components receive it at
construction and subscribe to changes instead of reading shared state.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)

SessionListener = Callable[[str | None], None]


class SessionContext:
    """Current identity of one portal user.

    The email is stored lower-cased; `None` means signed out.
    """

    def __init__(self, email: str | None = None):
        self._email = email.strip().lower() if email else None
        self._listeners: list[SessionListener] = []

    @property
    def email(self) -> str | None:
        return self._email

    @property
    def is_authenticated(self) -> bool:
        return self._email is not None

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register a callback for session changes.

        Returns:
            A function that removes the callback again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def sign_in(self, email: str) -> None:
        self._set(email.strip().lower())

    def sign_out(self) -> None:
        self._set(None)

    def _set(self, email: str | None) -> None:
        if email == self._email:
            return
        self._email = email
        logger.info("Session changed", extra={"signed_in": email is not None})
        for listener in list(self._listeners):
            listener(email)
