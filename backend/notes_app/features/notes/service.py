"""
Notes feature: Service layer for notes and the trash bucket.

A logical note lives in exactly one of `notes` or `trashed_notes`.
Moving between them is insert-then-delete, so a failure part-way leaves
at worst a duplicate (never a lost note); clients resync on errors.
"""

import logging
from datetime import datetime, timedelta, timezone
from supabase import Client

from notes_app.core.exceptions import NoteNotFoundError

logger = logging.getLogger(__name__)

NOTES_TABLE = "notes"
TRASH_TABLE = "trashed_notes"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _parse_timestamp(value: str | datetime | None) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def next_updated_at(previous: str | datetime | None, now: datetime | None = None) -> datetime:
    """Timestamp for a write that is strictly later than the previous one."""
    now = now or _now()
    previous = _parse_timestamp(previous)
    if previous is not None and now <= previous:
        return previous + timedelta(microseconds=1)
    return now


class NotesService:
    """CRUD operations for a user's notes, plus trash/restore/hard delete."""

    def __init__(self, db: Client):
        self.db = db

    def _get_note(self, user_id: str, note_id: int) -> dict:
        result = (
            self.db.table(NOTES_TABLE)
            .select("*")
            .eq("id", note_id)
            .eq("user_id", user_id)
            .execute()
        )
        if not result.data:
            raise NoteNotFoundError(note_id)
        return result.data[0]

    def _get_trashed(self, user_id: str, trashed_id: int) -> dict:
        result = (
            self.db.table(TRASH_TABLE)
            .select("*")
            .eq("id", trashed_id)
            .eq("user_id", user_id)
            .execute()
        )
        if not result.data:
            raise NoteNotFoundError(trashed_id, trashed=True)
        return result.data[0]

    # ── Active notes ─────────────────────────────────────

    def create_note(self, user_id: str, title: str, content: str) -> dict:
        """Create a new note."""
        now = _now().isoformat()
        result = self.db.table(NOTES_TABLE).insert({
            "user_id": user_id,
            "title": title,
            "content": content,
            "created_at": now,
            "updated_at": now,
        }).execute()
        note = result.data[0]
        logger.info(f"📝 Note {note['id']} created for user {user_id}")
        return note

    def list_notes(self, user_id: str) -> list[dict]:
        """List active notes, most recently updated first."""
        result = (
            self.db.table(NOTES_TABLE)
            .select("*")
            .eq("user_id", user_id)
            .order("updated_at", desc=True)
            .execute()
        )
        return result.data

    def update_note(self, user_id: str, note_id: int, title: str, content: str) -> dict:
        """Overwrite title and content; updated_at always moves forward.

        Raises:
            NoteNotFoundError: If the note is missing or owned by someone else.
        """
        existing = self._get_note(user_id, note_id)
        updated_at = next_updated_at(existing.get("updated_at"))

        result = (
            self.db.table(NOTES_TABLE)
            .update({
                "title": title,
                "content": content,
                "updated_at": updated_at.isoformat(),
            })
            .eq("id", note_id)
            .eq("user_id", user_id)
            .execute()
        )
        if not result.data:
            raise NoteNotFoundError(note_id)
        return result.data[0]

    # ── Trash ────────────────────────────────────────────

    def trash_note(self, user_id: str, note_id: int) -> dict:
        """Soft delete: move the note into the trash bucket.

        Raises:
            NoteNotFoundError: If the note is missing or owned by someone else.
        """
        note = self._get_note(user_id, note_id)
        result = self.db.table(TRASH_TABLE).insert({
            "note_id": note["id"],
            "user_id": note["user_id"],
            "title": note["title"],
            "content": note["content"],
            "trashed_at": _now().isoformat(),
            "original_updated_at": note.get("updated_at"),
        }).execute()
        self.db.table(NOTES_TABLE).delete().eq("id", note_id).eq("user_id", user_id).execute()

        logger.info(f"🗑️ Note {note_id} moved to trash (user {user_id})")
        return result.data[0]

    def list_trashed(self, user_id: str) -> list[dict]:
        """List trashed notes, most recently trashed first."""
        result = (
            self.db.table(TRASH_TABLE)
            .select("*")
            .eq("user_id", user_id)
            .order("trashed_at", desc=True)
            .execute()
        )
        return result.data

    def restore_note(self, user_id: str, trashed_id: int) -> dict:
        """Re-create a trashed note as an active one (new id).

        The note keeps its pre-trash updated_at when it is known.

        Raises:
            NoteNotFoundError: If the trashed note is missing or not owned.
        """
        trashed = self._get_trashed(user_id, trashed_id)
        now = _now().isoformat()
        result = self.db.table(NOTES_TABLE).insert({
            "user_id": trashed["user_id"],
            "title": trashed["title"],
            "content": trashed["content"],
            "created_at": now,
            "updated_at": trashed.get("original_updated_at") or now,
        }).execute()
        self.db.table(TRASH_TABLE).delete().eq("id", trashed_id).eq("user_id", user_id).execute()

        restored = result.data[0]
        logger.info(f"♻️ Trashed note {trashed_id} restored as note {restored['id']}")
        return restored

    def delete_forever(self, user_id: str, trashed_id: int) -> None:
        """Permanently delete a trashed note.

        Raises:
            NoteNotFoundError: If the trashed note is missing or not owned.
        """
        result = (
            self.db.table(TRASH_TABLE)
            .delete()
            .eq("id", trashed_id)
            .eq("user_id", user_id)
            .execute()
        )
        if not result.data:
            raise NoteNotFoundError(trashed_id, trashed=True)
        logger.info(f"Trashed note {trashed_id} permanently deleted")
