"""Tests for session storage and the background recorder."""

import logging
import sqlite3

import pytest

from prompt_autotuner.storage import Database, SessionConverter, SessionRepository
from prompt_autotuner.types import SessionRecord


def test_repository_save_and_list(test_database):
    """Saved logs come back newest first and can be filtered by action."""
    with test_database.session_scope() as session:
        repo = SessionRepository(session)
        for action in ["optimize", "evaluate", "optimize"]:
            repo.save(
                SessionConverter.to_db(
                    SessionRecord(action=action, inputs={"prompt": "p"}, outputs={})
                )
            )

    with test_database.session_scope() as session:
        repo = SessionRepository(session)
        assert repo.count() == 3
        assert repo.count("optimize") == 2
        recent = repo.list_recent(limit=2)
        assert len(recent) == 2
        assert recent[0].id > recent[1].id
        assert [log.action for log in repo.list_recent(action="evaluate")] == ["evaluate"]


def test_converter_round_trip_keeps_payload(test_database):
    record = SessionRecord(
        action="evaluate", inputs={"threshold": 70}, outputs={"scores": [1.5, 2]}, status="ok"
    )

    with test_database.session_scope() as session:
        saved = SessionRepository(session).save(SessionConverter.to_db(record))
        log_id = saved.id

    with test_database.session_scope() as session:
        restored = SessionConverter.from_db(SessionRepository(session).get_by_id(log_id))

    assert restored.inputs == {"threshold": 70}
    assert restored.outputs == {"scores": [1.5, 2]}
    assert restored.status == "ok"


@pytest.mark.asyncio
async def test_recorder_writes_in_background(recorder):
    recorder.record("optimize", {"prompt": "p"}, {"optimized": "q"}, "llm")
    await recorder.flush()

    records = recorder.list_recent()
    assert len(records) == 1
    assert records[0].action == "optimize"
    assert records[0].outputs == {"optimized": "q"}


def test_recorder_without_event_loop_writes_inline(recorder):
    recorder.record("evaluate", {}, {}, "completed")

    assert recorder.list_recent()[0].status == "completed"


@pytest.mark.asyncio
async def test_recorder_failures_are_logged_not_raised(recorder, monkeypatch, caplog):
    """A failing write never reaches the caller."""

    def broken_scope():
        raise RuntimeError("disk full")

    monkeypatch.setattr(recorder.database, "session_scope", broken_scope)

    with caplog.at_level(logging.WARNING):
        recorder.record("evaluate", {}, {}, "completed")
        await recorder.flush()

    assert "Failed to record evaluate session" in caplog.text


def test_incompatible_database_is_backed_up(temp_db_path):
    """A database with an old schema is moved aside and recreated."""
    conn = sqlite3.connect(temp_db_path)
    conn.execute("CREATE TABLE session_logs (id INTEGER PRIMARY KEY, payload TEXT)")
    conn.commit()
    conn.close()

    db = Database(temp_db_path)
    try:
        assert temp_db_path.with_suffix(".db.old").exists()
        with db.session_scope() as session:
            assert SessionRepository(session).count() == 0
    finally:
        db.close()
