"""Converters between session records and ORM models."""

import json

from prompt_autotuner.storage.models import SessionLog
from prompt_autotuner.types import SessionRecord


class SessionConverter:
    """Convert between SessionRecord and SessionLog."""

    @staticmethod
    def to_db(record: SessionRecord) -> SessionLog:
        """Convert a session record to its ORM model."""
        return SessionLog(
            action=record.action,
            inputs=json.dumps(record.inputs, default=str),
            outputs=json.dumps(record.outputs, default=str),
            status=record.status,
            created_at=record.created_at,
        )

    @staticmethod
    def from_db(log: SessionLog) -> SessionRecord:
        """Convert an ORM model back to a session record."""
        return SessionRecord(
            id=log.id,
            action=log.action,
            inputs=json.loads(log.inputs),
            outputs=json.loads(log.outputs),
            status=log.status,
            created_at=log.created_at,
        )
