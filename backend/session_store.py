"""Per-session AudienceAssistant instances with idle expiry."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional
from uuid import uuid4

from audience import AudienceAssistant

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class SessionRecord:
    assistant: AudienceAssistant
    created_at: datetime = field(default_factory=_utcnow)
    last_activity: datetime = field(default_factory=_utcnow)

    def is_idle(self, cutoff: datetime) -> bool:
        return self.last_activity < cutoff


class InMemorySessionStore:
    """One assistant, and so one audience state, per session id; records are never shared."""

    def __init__(self, factory: Callable[[], AudienceAssistant], ttl_minutes: int = 90) -> None:
        self._factory = factory
        self._ttl = timedelta(minutes=ttl_minutes)
        self._records: Dict[str, SessionRecord] = {}

    def __len__(self) -> int:
        return len(self._records)

    def create(self) -> str:
        self.expire_idle()
        session_id = uuid4().hex
        self._records[session_id] = SessionRecord(assistant=self._factory())
        return session_id

    def get(self, session_id: str) -> Optional[SessionRecord]:
        """Return the live record, dropping it instead when it has sat idle past the TTL."""
        record = self._records.get(session_id)
        if record is None:
            return None
        now = _utcnow()
        if record.is_idle(now - self._ttl):
            del self._records[session_id]
            logger.info(f"Session {session_id} expired after {self._ttl}")
            return None
        record.last_activity = now
        return record

    def delete(self, session_id: str) -> bool:
        return self._records.pop(session_id, None) is not None

    def expire_idle(self) -> List[str]:
        cutoff = _utcnow() - self._ttl
        expired = [session_id for session_id, record in self._records.items() if record.is_idle(cutoff)]
        for session_id in expired:
            del self._records[session_id]
        if expired:
            logger.info(f"Expired {len(expired)} idle sessions")
        return expired
