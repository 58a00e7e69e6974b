"""Repositories for data access."""

from prompt_autotuner.storage.repositories.session_repository import SessionRepository

__all__ = ["SessionRepository"]
