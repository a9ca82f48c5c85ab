"""
Notes feature: API routes for notes and the trash.
"""

from fastapi import APIRouter, Depends, Response, status
from supabase import Client

from notes_app.core.dependencies import get_db, get_current_user_id
from notes_app.core.exceptions import NoteNotFoundError, app_error_to_http
from notes_app.features.notes.schemas import Note, NoteWrite, TrashedNote
from notes_app.features.notes.service import NotesService

router = APIRouter()


@router.get("/notes", response_model=list[Note])
async def list_notes(
    user_id: str = Depends(get_current_user_id),
    db: Client = Depends(get_db),
):
    """List active notes for the current user."""
    return NotesService(db).list_notes(user_id)


@router.post("/notes", response_model=Note, status_code=status.HTTP_201_CREATED)
async def create_note(
    data: NoteWrite,
    user_id: str = Depends(get_current_user_id),
    db: Client = Depends(get_db),
):
    """Create a new note."""
    return NotesService(db).create_note(user_id, data.title, data.content)


@router.put("/notes/{note_id}", response_model=Note)
async def update_note(
    note_id: int,
    data: NoteWrite,
    user_id: str = Depends(get_current_user_id),
    db: Client = Depends(get_db),
):
    """Update an existing note."""
    try:
        return NotesService(db).update_note(user_id, note_id, data.title, data.content)
    except NoteNotFoundError as e:
        raise app_error_to_http(e, status.HTTP_404_NOT_FOUND)


@router.delete("/notes/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def trash_note(
    note_id: int,
    user_id: str = Depends(get_current_user_id),
    db: Client = Depends(get_db),
):
    """Move a note to the trash (soft delete)."""
    try:
        NotesService(db).trash_note(user_id, note_id)
    except NoteNotFoundError as e:
        raise app_error_to_http(e, status.HTTP_404_NOT_FOUND)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/trashed-notes", response_model=list[TrashedNote])
async def list_trashed_notes(
    user_id: str = Depends(get_current_user_id),
    db: Client = Depends(get_db),
):
    """List trashed notes for the current user."""
    return NotesService(db).list_trashed(user_id)


@router.post("/trashed-notes/{trashed_id}/restore", response_model=Note)
async def restore_note(
    trashed_id: int,
    user_id: str = Depends(get_current_user_id),
    db: Client = Depends(get_db),
):
    """Restore a trashed note as an active note."""
    try:
        return NotesService(db).restore_note(user_id, trashed_id)
    except NoteNotFoundError as e:
        raise app_error_to_http(e, status.HTTP_404_NOT_FOUND)


@router.delete("/trashed-notes/{trashed_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_forever(
    trashed_id: int,
    user_id: str = Depends(get_current_user_id),
    db: Client = Depends(get_db),
):
    """Permanently delete a trashed note."""
    try:
        NotesService(db).delete_forever(user_id, trashed_id)
    except NoteNotFoundError as e:
        raise app_error_to_http(e, status.HTTP_404_NOT_FOUND)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
