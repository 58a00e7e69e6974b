"""SQLite engine, schema setup and transactional sessions for session logs."""

import logging
import os
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.orm import Session, sessionmaker

from prompt_autotuner.storage.models import Base

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = {"id", "action", "inputs", "outputs", "status", "created_at"}


class Database:
    """Database connection and session management."""

    def __init__(self, db_path: str | Path = "prompt_autotuner/data/sessions.db"):
        """
        Initialize database connection.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self._create_engine()
        self._init_db()

        logger.info(f"Database initialized at {self.db_path}")

    def _create_engine(self) -> None:
        """Create the engine and session factory."""
        self.engine = create_engine(
            f"sqlite:///{self.db_path}",
            echo=False,
            connect_args={"check_same_thread": False},  # Sessions are written from worker threads
        )
        self.SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self.engine,
        )

    def _check_schema_compatible(self) -> bool:
        """
        Check if the existing database schema is compatible with current models.

        Returns:
            True if schema is compatible or the table doesn't exist yet
        """
        inspector = inspect(self.engine)
        if "session_logs" not in inspector.get_table_names():
            return True

        columns = {col["name"] for col in inspector.get_columns("session_logs")}
        if not REQUIRED_COLUMNS.issubset(columns):
            logger.warning(
                f"Schema incompatible: session_logs missing {REQUIRED_COLUMNS - columns}"
            )
            return False
        return True

    def _init_db(self) -> None:
        """Create all tables, moving an incompatible database aside first."""
        if not self._check_schema_compatible():
            self.engine.dispose()
            backup_path = self.db_path.with_suffix(".db.old")
            logger.warning(f"Backing up incompatible database to {backup_path}")
            os.replace(self.db_path, backup_path)
            self._create_engine()

        Base.metadata.create_all(bind=self.engine)
        with self.engine.begin() as conn:
            conn.execute(
                text(
                    "CREATE INDEX IF NOT EXISTS idx_session_logs_action "
                    "ON session_logs(action, created_at)"
                )
            )

    def get_session(self) -> Session:
        """Open a session bound to the session log database."""
        return self.SessionLocal()

    @contextmanager
    def session_scope(self) -> Generator[Session]:
        """
        Transactional scope that commits on success and rolls back on error.

        Usage:
            with db.session_scope() as session:
                SessionRepository(session).save(log)
        """
        session = self.get_session()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def close(self) -> None:
        """Dispose of pooled connections."""
        self.engine.dispose()
