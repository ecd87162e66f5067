"""Session provider backed by the local key-value store.

Stands in for the hosted identity provider: it remembers who is signed
in between CLI invocations and announces the guest -> signed-in
transition to subscribers.
"""

from __future__ import annotations

import logging

from storefront.application.ports import IdentityCallback, SessionProvider
from storefront.domain.model.identity import Identity
from storefront.infrastructure.persistence.key_value_store import JsonKeyValueStore

logger = logging.getLogger(__name__)

SESSION_KEY = "session_identity"


class LocalSessionProvider(SessionProvider):

    def __init__(self, kv_store: JsonKeyValueStore) -> None:
        self._kv = kv_store
        self._callbacks: list[IdentityCallback] = []

    def current_identity(self) -> Identity | None:
        raw = self._kv.get(SESSION_KEY)
        if not raw:
            return None
        if not isinstance(raw, dict) or not raw.get("id"):
            logger.warning("Ignoring malformed session entry %r", raw)
            return None
        return Identity(id=raw["id"], email=raw.get("email", ""), name=raw.get("name", ""))

    def on_identity_acquired(self, callback: IdentityCallback) -> None:
        self._callbacks.append(callback)

    def sign_in(self, identity: Identity) -> None:
        """Record ``identity`` as signed in.

        Coming from a guest session, subscribers run first and the session
        is recorded only once they all succeed; if one fails the shopper
        stays a guest and can sign in again to retry.
        """
        if self.current_identity() is None:
            for callback in self._callbacks:
                callback(identity)
        self._kv.set(
            SESSION_KEY,
            {"id": identity.id, "email": identity.email, "name": identity.name},
        )
        logger.info("Signed in as %s", identity.id)

    def sign_out(self) -> None:
        self._kv.delete(SESSION_KEY)
