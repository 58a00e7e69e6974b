"""Fire-and-forget recording of optimization sessions."""

import asyncio
import logging

from prompt_autotuner.storage.converters import SessionConverter
from prompt_autotuner.storage.database import Database
from prompt_autotuner.storage.repositories import SessionRepository
from prompt_autotuner.types import SessionRecord

logger = logging.getLogger(__name__)


class SessionRecorder:
    """Writes session records to the database without blocking the caller.

    Writes run in a worker thread. A failed write is logged and dropped; it
    never reaches the code that requested it.
    """

    def __init__(self, database: Database):
        """
        Initialize the recorder.

        Args:
            database: Database to write session logs to
        """
        self.database = database
        self._pending: set[asyncio.Future] = set()

    def record(
        self, action: str, inputs: dict, outputs: dict, status: str | None = None
    ) -> None:
        """
        Schedule a session write and return immediately.

        Args:
            action: What was done (optimize, evaluate, auto_optimize)
            inputs: JSON-serializable inputs of the call
            outputs: JSON-serializable outputs of the call
            status: Outcome status of the call
        """
        record = SessionRecord(action=action, inputs=inputs, outputs=outputs, status=status)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._write(record)
            return

        future = loop.run_in_executor(None, self._write, record)
        self._pending.add(future)
        future.add_done_callback(self._pending.discard)

    def _write(self, record: SessionRecord) -> None:
        """Persist one record, logging instead of raising on failure."""
        try:
            with self.database.session_scope() as session:
                SessionRepository(session).save(SessionConverter.to_db(record))
            logger.debug(f"Recorded {record.action} session")
        except Exception as e:
            logger.warning(f"Failed to record {record.action} session: {e}")

    async def flush(self) -> None:
        """Wait for all scheduled writes to finish."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def list_recent(self, limit: int = 50, action: str | None = None) -> list[SessionRecord]:
        """Read back the most recent session records, newest first."""
        with self.database.session_scope() as session:
            logs = SessionRepository(session).list_recent(limit=limit, action=action)
            return [SessionConverter.from_db(log) for log in logs]
