"""Storage layer for session logs using SQLAlchemy."""

from prompt_autotuner.storage.converters import SessionConverter
from prompt_autotuner.storage.database import Database
from prompt_autotuner.storage.models import Base, SessionLog
from prompt_autotuner.storage.repositories import SessionRepository
from prompt_autotuner.storage.session_recorder import SessionRecorder

__all__ = [
    "Database",
    "Base",
    "SessionLog",
    "SessionRepository",
    "SessionConverter",
    "SessionRecorder",
]
