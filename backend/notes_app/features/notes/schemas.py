"""
Notes feature: Schemas for request/response models.

Note and TrashedNote are shared with the editing client, which parses
server responses into them.
"""

from pydantic import BaseModel, Field
from datetime import datetime


class NoteWrite(BaseModel):
    """Request body for creating or updating a note."""
    model_config = {"str_strip_whitespace": True}

    title: str = Field(min_length=1)
    content: str = Field(min_length=1)


class Note(BaseModel):
    """An active note."""
    id: int
    user_id: int
    title: str = ""
    content: str = ""
    created_at: datetime | None = None
    updated_at: datetime


class TrashedNote(BaseModel):
    """A note moved to the trash bucket."""
    id: int
    note_id: int | None = None  # id the note had while active
    user_id: int
    title: str = ""
    content: str = ""
    trashed_at: datetime
    original_updated_at: datetime | None = None
