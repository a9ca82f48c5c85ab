"""Unit tests for the trash retention purge job."""

from datetime import datetime, timedelta, timezone

from notes_app.background.trash_purge import PURGE_JOB_ID, init_scheduler, purge_expired_trash, scheduler
from notes_app.config import get_settings

NOW = datetime(2025, 6, 30, 12, 0, tzinfo=timezone.utc)


def _trash(db, days_ago: int, title: str):
    db.table("trashed_notes").insert({
        "note_id": 1,
        "user_id": 1,
        "title": title,
        "content": title,
        "trashed_at": (NOW - timedelta(days=days_ago)).isoformat(),
    }).execute()


class TestPurgeExpiredTrash:
    def test_removes_only_expired(self, fake_db):
        _trash(fake_db, 40, "old")
        _trash(fake_db, 31, "older than window")
        _trash(fake_db, 2, "recent")

        removed = purge_expired_trash(fake_db, retention_days=30, now=NOW)

        assert removed == 2
        assert [row["title"] for row in fake_db.tables["trashed_notes"]] == ["recent"]

    def test_nothing_to_purge(self, fake_db):
        _trash(fake_db, 1, "fresh")
        assert purge_expired_trash(fake_db, retention_days=30, now=NOW) == 0
        assert len(fake_db.tables["trashed_notes"]) == 1


class TestInitScheduler:
    def test_disabled_retention_registers_nothing(self, monkeypatch):
        monkeypatch.setattr(get_settings(), "TRASH_RETENTION_DAYS", 0)
        init_scheduler()
        assert scheduler.get_job(PURGE_JOB_ID) is None
        assert not scheduler.running
