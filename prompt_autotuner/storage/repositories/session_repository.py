"""Repository for SessionLog data access."""

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from prompt_autotuner.storage.models import SessionLog


class SessionRepository:
    """Data access layer for session logs."""

    def __init__(self, session: Session):
        """Initialize repository with database session."""
        self.session = session

    def save(self, log: SessionLog) -> SessionLog:
        """
        Persist a session log.

        Args:
            log: Session log to save

        Returns:
            Saved log with ID assigned
        """
        self.session.add(log)
        self.session.flush()
        return log

    def get_by_id(self, log_id: int) -> SessionLog | None:
        """Get a session log by ID."""
        return self.session.get(SessionLog, log_id)

    def list_recent(self, limit: int = 50, action: str | None = None) -> list[SessionLog]:
        """
        List the most recent session logs, newest first.

        Args:
            limit: Maximum number of logs to return
            action: Only return logs of this action if given

        Returns:
            Session logs ordered by creation time descending
        """
        query = select(SessionLog)
        if action is not None:
            query = query.where(SessionLog.action == action)
        query = query.order_by(SessionLog.created_at.desc(), SessionLog.id.desc()).limit(limit)
        return list(self.session.scalars(query))

    def count(self, action: str | None = None) -> int:
        """Count session logs, optionally for one action."""
        query = select(func.count()).select_from(SessionLog)
        if action is not None:
            query = query.where(SessionLog.action == action)
        return self.session.scalar(query) or 0
