"""In-memory session history."""

from .versions import Version, VersionStore, VersionSummary, VersionType

__all__ = ["Version", "VersionStore", "VersionSummary", "VersionType"]
