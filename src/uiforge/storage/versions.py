"""
Version Store - per-session, append-only history of generated UIs.

History lives in memory for the life of the process. Rollback never rewrites
the past: it appends a new entry carrying the target's code and plan.
"""

import threading
import weakref
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from uiforge.core import get_logger
from uiforge.core.id import new_version_id
from uiforge.agents.models import Plan


logger = get_logger(__name__)


class VersionType(str, Enum):
    """How a version came to be."""

    GENERATE = "generate"
    MODIFY = "modify"
    ROLLBACK = "rollback"


class Version(BaseModel):
    """One immutable, timestamped artifact in a session's history."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str = Field(default_factory=new_version_id)
    code: str
    plan: Plan | None = None
    explanation: str = ""
    user_prompt: str = ""
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    type: VersionType


class VersionSummary(BaseModel):
    """History listing entry without code or plan."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    user_prompt: str
    timestamp: datetime
    type: VersionType
    code_length: int

    @classmethod
    def of(cls, version: Version) -> "VersionSummary":
        return cls(
            id=version.id,
            user_prompt=version.user_prompt,
            timestamp=version.timestamp,
            type=version.type,
            code_length=len(version.code),
        )


class VersionStore:
    """
    In-memory version history keyed by session.

    Every session has its own re-entrant mutation lock; all writes to a
    session's history happen under it, so "latest" always reflects one total
    order of completed writes. Callers that read the latest version and
    append a successor (modify) hold ``lock(session_id)`` across both.

    Reads never take a session lock. They only hold the short internal guard
    around the history dict, so they return while a long edit is in flight.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, list[Version]] = {}
        # Entries vanish once no caller holds or waits on the lock.
        self._locks: weakref.WeakValueDictionary[str, threading.RLock] = weakref.WeakValueDictionary()
        self._guard = threading.Lock()

    def lock(self, session_id: str) -> threading.RLock:
        """The mutation lock for ``session_id``, created on demand."""
        with self._guard:
            lock = self._locks.get(session_id)
            if lock is None:
                lock = threading.RLock()
                self._locks[session_id] = lock
            return lock

    def add_version(
        self,
        session_id: str,
        code: str,
        plan: Plan | None,
        explanation: str,
        user_prompt: str,
        type: VersionType,
    ) -> Version:
        """Append a new version; creates the session on first call."""
        version = Version(
            code=code,
            plan=plan,
            explanation=explanation,
            user_prompt=user_prompt,
            type=VersionType(type),
        )
        with self.lock(session_id), self._guard:
            history = self._sessions.setdefault(session_id, [])
            history.append(version)
            count = len(history)

        logger.info(
            "version_added",
            session_id=session_id,
            version_id=version.id,
            type=version.type.value,
            versions=count,
        )
        return version

    def get_versions(self, session_id: str) -> list[Version]:
        """Full history, oldest first. The returned list is a copy."""
        with self._guard:
            return list(self._sessions.get(session_id, ()))

    def get_version(self, session_id: str, version_id: str) -> Version | None:
        for version in self.get_versions(session_id):
            if version.id == version_id:
                return version
        return None

    def get_latest_version(self, session_id: str) -> Version | None:
        with self._guard:
            history = self._sessions.get(session_id)
            return history[-1] if history else None

    def rollback_to(self, session_id: str, version_id: str) -> Version | None:
        """Append a copy of ``version_id``'s code and plan as a rollback entry."""
        with self.lock(session_id):
            target = self.get_version(session_id, version_id)
            if target is None:
                logger.warning("rollback_target_missing", session_id=session_id, version_id=version_id)
                return None

            return self.add_version(
                session_id,
                target.code,
                target.plan,
                f"Rolled back to version from {target.timestamp.isoformat()}",
                f"Rollback to version {version_id}",
                VersionType.ROLLBACK,
            )

    def clear_session(self, session_id: str) -> None:
        """Administrative: drop a session's entire history."""
        with self.lock(session_id), self._guard:
            removed = len(self._sessions.pop(session_id, ()))
        logger.info("session_cleared", session_id=session_id, versions=removed)

    def session_count(self) -> int:
        with self._guard:
            return len(self._sessions)

    def lock_count(self) -> int:
        """Session locks currently alive."""
        with self._guard:
            return len(self._locks)
