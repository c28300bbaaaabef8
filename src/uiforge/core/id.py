"""ID Generation.

ULID-based identifiers with short type prefixes so logs stay readable:
``ver_01J…`` for versions, ``req_01J…`` for pipeline runs and ``sess_01J…``
for server-issued session keys. ULIDs sort by creation time.
"""

from typing import NewType
from ulid import ULID

VersionID = NewType("VersionID", str)
"""Version history entry identifier"""

RequestID = NewType("RequestID", str)
"""Pipeline run identifier"""

SessionID = NewType("SessionID", str)
"""Editor session identifier"""


class Prefix:
    """ID prefix constants."""

    VERSION = "ver"
    REQUEST = "req"
    SESSION = "sess"


def _generate(prefix: str) -> str:
    return f"{prefix}_{ULID()}"


def new_version_id() -> VersionID:
    """Generate new version ID."""
    return VersionID(_generate(Prefix.VERSION))


def new_request_id() -> RequestID:
    """Generate new request ID."""
    return RequestID(_generate(Prefix.REQUEST))


def new_session_id() -> SessionID:
    """Generate new session ID."""
    return SessionID(_generate(Prefix.SESSION))
