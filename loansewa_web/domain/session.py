"""Browser session context - the one place that reads and writes signed-in identities"""

import logging
from typing import Any, MutableMapping, Optional

from pydantic import ValidationError

from loansewa_web.infrastructure.clients.schemas import Identity

USER_KEY = "user"
ADMIN_KEY = "admin"
REMEMBER_KEY = "remember_me"
FLASH_KEY = "flash"

logger = logging.getLogger(__name__)


class SessionContext:
    """
    Typed view over the cookie session.

    User and admin identities are stored independently; either may be present
    without the other. A stored value that no longer decodes is dropped and
    treated as signed out.
    """

    def __init__(self, store: MutableMapping[str, Any]):
        self._store = store

    def _identity(self, key: str) -> Optional[Identity]:
        raw = self._store.get(key)
        if raw is None:
            return None
        try:
            return Identity.model_validate(raw)
        except ValidationError:
            logger.warning("Discarding malformed session identity", extra={"session_key": key})
            self._store.pop(key, None)
            return None

    @property
    def user(self) -> Optional[Identity]:
        return self._identity(USER_KEY)

    @property
    def admin(self) -> Optional[Identity]:
        return self._identity(ADMIN_KEY)

    @property
    def remember_me(self) -> bool:
        return bool(self._store.get(REMEMBER_KEY, False))

    def sign_in_user(self, identity: Identity, remember: bool = False) -> None:
        self._store[USER_KEY] = identity.model_dump(mode="json")
        if remember:
            self._store[REMEMBER_KEY] = True

    def sign_in_admin(self, identity: Identity) -> None:
        self._store[ADMIN_KEY] = identity.model_dump(mode="json")

    def sign_out_user(self) -> None:
        self._store.pop(USER_KEY, None)
        self._store.pop(REMEMBER_KEY, None)

    def sign_out_admin(self) -> None:
        self._store.pop(ADMIN_KEY, None)

    def flash(self, message: str, kind: str = "info") -> None:
        """Queue a one-shot message for the next rendered page"""
        self._store[FLASH_KEY] = {"message": message, "kind": kind}

    def pop_flash(self) -> Optional[dict]:
        return self._store.pop(FLASH_KEY, None)
