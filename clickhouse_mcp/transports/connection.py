"""
Single-slot connection registry for the SSE transport.

The SSE transport serves exactly one client stream at a time. The slot is
either empty or holds the session ID of the active stream; acquiring an
occupied slot fails fast instead of queueing.
"""

from typing import Optional

from clickhouse_mcp.core.exceptions import ClickHouseMCPError


class ConnectionBusyError(ClickHouseMCPError):
    """Raised when a second SSE stream is opened while one is active."""

    def __init__(self, active_session: str) -> None:
        super().__init__("Connection already established.")
        self.active_session = active_session


class ConnectionSlot:
    """
    Holds at most one active SSE session.

    States: Empty (session is None) and Active(session).
    """

    def __init__(self) -> None:
        self._session: Optional[str] = None

    @property
    def session(self) -> Optional[str]:
        """Session ID of the active stream, or None when empty."""
        return self._session

    @property
    def is_active(self) -> bool:
        return self._session is not None

    def acquire(self, session: str) -> None:
        """
        Occupy the slot with a new session.

        Raises:
            ConnectionBusyError: If another session is active.
        """
        if self._session is not None:
            raise ConnectionBusyError(self._session)
        self._session = session

    def release(self, session: str) -> None:
        """Empty the slot if it is held by the given session."""
        if self._session == session:
            self._session = None
