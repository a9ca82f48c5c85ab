"""
Client: list/filter view over the note collection.
"""

from datetime import datetime
from typing import Iterable

from notes_app.core.markup import strip_markup
from notes_app.features.notes.schemas import Note

UNTITLED = "(Untitled)"


def sort_by_recent(notes: Iterable[Note]) -> list[Note]:
    """Most recently updated first."""
    return sorted(notes, key=lambda n: n.updated_at, reverse=True)


def matches(note: Note, query: str) -> bool:
    """Case-insensitive substring match on plain-text title or content."""
    needle = query.strip().lower()
    if not needle:
        return True
    return (
        needle in strip_markup(note.title).lower()
        or needle in strip_markup(note.content).lower()
    )


def filter_notes(notes: Iterable[Note], query: str = "") -> list[Note]:
    """Notes matching `query`, most recently updated first."""
    return sort_by_recent(n for n in notes if matches(n, query))


def display_title(note: Note) -> str:
    return strip_markup(note.title) or UNTITLED


def format_timestamp(value: datetime) -> str:
    """24h time then day/month/year, e.g. "14:05, 03/07/2025"."""
    return value.strftime("%H:%M, %d/%m/%Y")
