"""Serialization contracts for planning sessions."""

from quickplan.shared.contracts.session_snapshot import SessionSnapshot, SNAPSHOT_VERSION

__all__ = ["SessionSnapshot", "SNAPSHOT_VERSION"]
