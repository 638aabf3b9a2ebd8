"""
In-memory registry of open import sessions.
"""
import hashlib
import logging
from datetime import timedelta
from typing import Dict, Optional

from wacontacts.core.config import settings
from wacontacts.core.exceptions import NotFoundError
from wacontacts.services.imports.orchestrator import ImportSession
from wacontacts.utils.datetime import utc_now

logger = logging.getLogger("wacontacts.imports.store")


def owner_key(token: str) -> str:
    """Stable, non-reversible key for the token that owns a session."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class ImportSessionStore:
    """
    Holds sessions by ID. Each session is visible only to its owner and
    is dropped after sitting idle longer than the TTL.
    """

    def __init__(self, ttl_seconds: Optional[int] = None):
        self.ttl = timedelta(seconds=ttl_seconds or settings.IMPORT_SESSION_TTL_SECONDS)
        self._sessions: Dict[str, ImportSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self, owner: str) -> ImportSession:
        self.purge_expired()
        session = ImportSession(owner=owner)
        self._sessions[session.id] = session
        logger.debug(f"Opened import session {session.id}")
        return session

    def get(self, session_id: str, owner: str) -> ImportSession:
        """
        Look up a session owned by the caller.

        Raises:
            NotFoundError: If the session is unknown, expired or owned by someone else
        """
        self.purge_expired()
        session = self._sessions.get(session_id)
        if session is None or session.owner != owner:
            raise NotFoundError(
                message=f"Import session {session_id} not found",
                details={"session_id": session_id},
            )
        return session

    def discard(self, session_id: str, owner: str) -> None:
        """Close a session. A submission still in flight is left to finish."""
        session = self.get(session_id, owner)
        del self._sessions[session.id]
        logger.debug(f"Closed import session {session_id}")

    def purge_expired(self) -> int:
        cutoff = utc_now() - self.ttl
        expired = [
            sid for sid, session in self._sessions.items()
            if session.updated_at < cutoff and not session.submitting
        ]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.info(f"Purged {len(expired)} idle import sessions")
        return len(expired)

    def clear(self) -> None:
        self._sessions.clear()


_store: Optional[ImportSessionStore] = None


def get_session_store() -> ImportSessionStore:
    """Get the process-wide session store."""
    global _store
    if _store is None:
        _store = ImportSessionStore()
    return _store
