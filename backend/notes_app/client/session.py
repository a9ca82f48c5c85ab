"""
Client: the note editing session.

SessionStateMachine owns what the user is currently editing and decides
when to persist it:

  Idle        no note selected, empty draft
  Composing   no note selected, draft has text (not saved yet)
  Editing     note selected, draft differs from the last saved snapshot
  Clean       note selected, draft equals the last saved snapshot
  PendingTrash  the selected note was emptied; it has been pulled out of the
              active list and waits to be trashed (navigation away) or
              forgotten (typing again starts a new note)

All transitions run on one asyncio loop. The only races are store responses
arriving after the user moved on: every request carries the generation it
was issued in, and a response from an older generation updates the note
collections but never the draft.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Protocol

from notes_app.config import get_client_settings
from notes_app.core.markup import derive_title, is_blank, strip_markup
from notes_app.client.api import AuthError, NotFoundError, StoreError
from notes_app.client.debounce import Debouncer
from notes_app.client.editor import EditorAdapter
from notes_app.client.listing import filter_notes, sort_by_recent
from notes_app.features.notes.schemas import Note, TrashedNote

logger = logging.getLogger(__name__)


class NoteStore(Protocol):
    async def create(self, title: str, content: str) -> Note: ...
    async def update(self, note_id: int, title: str, content: str) -> Note: ...
    async def soft_delete(self, note_id: int) -> None: ...
    async def list_active(self) -> list[Note]: ...
    async def list_trashed(self) -> list[TrashedNote]: ...
    async def restore(self, trashed_id: int) -> Note: ...
    async def hard_delete(self, trashed_id: int) -> None: ...


class SessionState(str, Enum):
    IDLE = "idle"
    COMPOSING = "composing"
    EDITING = "editing"
    CLEAN = "clean"
    PENDING_TRASH = "pending_trash"


@dataclass
class EditingSession:
    """The draft bound to the editor. Never persisted."""
    selected_note_id: int | None = None
    draft_content: str = ""
    draft_title: str = ""
    original_content: str = ""
    original_title: str = ""
    title_is_manual: bool = False
    pending_trash: Note | None = None

    @classmethod
    def for_note(cls, note: Note) -> "EditingSession":
        return cls(
            selected_note_id=note.id,
            draft_content=note.content,
            draft_title=note.title,
            original_content=note.content,
            original_title=note.title,
        )

    def outgoing_title(self) -> str:
        """Title sent to the store: the draft title, else one derived from content."""
        return strip_markup(self.draft_title) or derive_title(self.draft_content)

    @property
    def dirty(self) -> bool:
        return (
            self.draft_content != self.original_content
            or self.outgoing_title() != self.original_title
        )


@dataclass(frozen=True)
class _Snapshot:
    """What one persistence request sends, and the context it was issued in."""
    generation: int
    note_id: int | None
    title: str
    content: str


ErrorCallback = Callable[[StoreError], None]


class SessionStateMachine:
    """Reconciles editor content, titles, autosave and trash for one user.

    Args:
        store: Note Store Client (see notes_app.client.api.NoteStoreClient).
        editor: Editing surface; the machine subscribes to its changes.
        notes: Active note collection, shared by reference with the list view.
        autosave_delay: Quiet period in seconds before a commit fires.
            None reads AUTOSAVE_DELAY_MS from client settings; 0 disables autosave.
        notify: Non-blocking error notification for the user.
        on_auth_error: Called when the token is rejected. Without it the
            AuthError propagates to the caller.
    """

    def __init__(
        self,
        store: NoteStore,
        editor: EditorAdapter,
        notes: list[Note] | None = None,
        autosave_delay: float | None = None,
        notify: ErrorCallback | None = None,
        on_auth_error: ErrorCallback | None = None,
    ):
        self.store = store
        self.editor = editor
        self.notes: list[Note] = notes if notes is not None else []
        self.trashed: list[TrashedNote] = []
        self.session = EditingSession()
        self.notify = notify
        self.on_auth_error = on_auth_error

        if autosave_delay is None:
            autosave_delay = get_client_settings().AUTOSAVE_DELAY_MS / 1000
        self._autosave = (
            Debouncer(self.commit, autosave_delay, on_error=self._autosave_failed)
            if autosave_delay > 0 else None
        )

        self._generation = 0
        self._commit_lock = asyncio.Lock()
        self._commit_queued = False
        self._background: set[asyncio.Task] = set()

        editor.on_change(self.on_editor_change)

    # ── Introspection ────────────────────────────────────

    @property
    def state(self) -> SessionState:
        s = self.session
        if s.pending_trash is not None:
            return SessionState.PENDING_TRASH
        if s.selected_note_id is None:
            return SessionState.IDLE if is_blank(s.draft_content) else SessionState.COMPOSING
        return SessionState.EDITING if s.dirty else SessionState.CLEAN

    @property
    def generation(self) -> int:
        return self._generation

    def filtered_notes(self, query: str = "") -> list[Note]:
        return filter_notes(self.notes, query)

    # ── Navigation ───────────────────────────────────────

    def select_note(self, note: Note) -> None:
        """Bind the editor to `note`. Re-selecting the current note does nothing."""
        if self.session.selected_note_id == note.id:
            return
        self._leave_context()
        self.session = EditingSession.for_note(note)
        self.editor.set_content(note.content)
        self.editor.focus()
        logger.debug(f"Selected note {note.id} (generation {self._generation})")

    def start_new(self) -> None:
        """Clear the editor to compose a new note."""
        self._leave_context()
        self.session = EditingSession()
        self.editor.set_content("")
        self.editor.focus()
        logger.debug(f"Started new note (generation {self._generation})")

    def _leave_context(self) -> None:
        """Invalidate in-flight responses for the current draft.

        Edits still waiting for the autosave timer are saved in the
        background rather than dropped.
        """
        if self._autosave is not None and self._autosave.pending:
            self._autosave.cancel()
            s = self.session
            if not is_blank(s.draft_content) and (s.selected_note_id is None or s.dirty):
                self._spawn(self._save_snapshot(self._snapshot()))
        self._generation += 1

    # ── Editor events ────────────────────────────────────

    def on_editor_change(self, markup: str) -> None:
        s = self.session
        s.draft_content = markup
        blank = is_blank(markup)

        if blank and s.selected_note_id is not None and s.pending_trash is None:
            self._stash_selected()
        elif not blank and s.pending_trash is not None:
            logger.debug(f"Pending trash of note {s.pending_trash.id} cancelled by new text")
            s.pending_trash = None

        if not s.title_is_manual:
            s.draft_title = derive_title(markup)

        self._schedule_autosave()

    def on_title_edited(self, title: str) -> None:
        self.session.draft_title = title
        self.session.title_is_manual = True
        self._schedule_autosave()

    def _stash_selected(self) -> None:
        """Empty-content rule: pull the selected note out of the active list."""
        s = self.session
        note = self._find_active(s.selected_note_id)
        if note is None:
            return
        self.notes.remove(note)
        s.pending_trash = note
        s.selected_note_id = None
        logger.debug(f"Note {note.id} emptied, pending trash")

    def _schedule_autosave(self) -> None:
        """Restart the quiet period. A blank draft is never autosaved."""
        if self._autosave is None:
            return
        if is_blank(self.session.draft_content):
            self._autosave.cancel()
        else:
            self._autosave.trigger()

    # ── Persistence ──────────────────────────────────────

    async def commit(self) -> None:
        """Persist the draft if needed.

        Serialized queue-of-one: while a commit is in flight at most one more
        waits, and it reads the latest draft when it runs.
        """
        if self._commit_queued:
            return
        self._commit_queued = True
        try:
            await self._commit_lock.acquire()
        finally:
            self._commit_queued = False
        try:
            await self._commit_current()
        finally:
            self._commit_lock.release()

    async def flush(self) -> None:
        """Explicit save: skip the quiet period, wait for the save and for background saves."""
        if self._autosave is not None:
            self._autosave.cancel()
        async with self._commit_lock:
            await self._commit_current()
        await self.drain()

    async def drain(self) -> None:
        """Wait for background saves started by navigation."""
        while self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    async def _commit_current(self) -> None:
        s = self.session
        if is_blank(s.draft_content):
            if s.pending_trash is not None:
                logger.debug(f"Discarding emptied note {s.pending_trash.id}")
                self.session = EditingSession()
            return
        if s.selected_note_id is None or s.dirty:
            await self._persist(self._snapshot())

    async def _save_snapshot(self, snapshot: _Snapshot) -> None:
        async with self._commit_lock:
            await self._persist(snapshot)

    def _snapshot(self) -> _Snapshot:
        s = self.session
        return _Snapshot(
            generation=self._generation,
            note_id=s.selected_note_id,
            title=s.outgoing_title(),
            content=s.draft_content,
        )

    async def _persist(self, snap: _Snapshot) -> None:
        try:
            if snap.note_id is None:
                note = await self.store.create(snap.title, snap.content)
            else:
                note = await self.store.update(snap.note_id, snap.title, snap.content)
        except NotFoundError as e:
            self._report(e)
            if self._is_current(snap):
                self._detach()
            await self.resync()
            return
        except StoreError as e:
            self._report(e)
            return
        self._reconcile(snap, note)

    def _is_current(self, snap: _Snapshot) -> bool:
        return (
            snap.generation == self._generation
            and snap.note_id == self.session.selected_note_id
        )

    def _reconcile(self, snap: _Snapshot, note: Note) -> None:
        created = snap.note_id is None
        current = self._is_current(snap)
        self._store_active(note, insert=created)

        if not current:
            logger.debug(f"Ignoring stale response for note {note.id} (generation {snap.generation})")
            return

        s = self.session
        s.selected_note_id = note.id
        s.original_content = snap.content
        s.original_title = note.title

        if created:
            logger.debug(f"Created note {note.id}")
            # The user may have cleared the text while the create was in flight
            if is_blank(s.draft_content) and s.pending_trash is None:
                self._stash_selected()
        elif self.editor.get_content() != s.draft_content:
            self.editor.set_content(s.draft_content, preserve_cursor=True)

    def _detach(self) -> None:
        """The selected note is gone server-side; keep the draft as a new note."""
        s = self.session
        logger.warning(f"Note {s.selected_note_id} no longer exists, draft kept as a new note")
        self._remove_active(s.selected_note_id)
        s.selected_note_id = None
        s.original_content = ""
        s.original_title = ""

    # ── Trash ────────────────────────────────────────────

    async def delete_note(self, note_id: int | None = None) -> bool:
        """Move a note to the trash (defaults to the selected note).

        Returns:
            True when the store accepted the delete.
        """
        target = note_id if note_id is not None else self.session.selected_note_id
        if target is None:
            return False
        selected = target == self.session.selected_note_id
        if selected and self._autosave is not None:
            self._autosave.cancel()
        try:
            await self.store.soft_delete(target)
        except StoreError as e:
            self._report(e)
            await self.resync()
            if selected:
                self._schedule_autosave()
            return False

        self._remove_active(target)
        await self._refresh_trash()
        if self.session.selected_note_id == target:
            self.start_new()
        return True

    async def trash_pending(self) -> bool:
        """Navigation away from an emptied note: trash it on the server."""
        note = self.session.pending_trash
        if note is None:
            return False
        try:
            await self.store.soft_delete(note.id)
        except NotFoundError as e:
            self._report(e)
            self.session.pending_trash = None
            await self.resync()
            return False
        except StoreError as e:
            self._report(e)
            return False

        self.session.pending_trash = None
        await self._refresh_trash()
        return True

    async def restore(self, trashed_id: int) -> Note | None:
        try:
            note = await self.store.restore(trashed_id)
        except StoreError as e:
            self._report(e)
            if isinstance(e, NotFoundError):
                await self.resync()
            return None

        self._store_active(note, insert=True)
        await self._refresh_trash()
        return note

    async def delete_forever(self, trashed_id: int) -> bool:
        try:
            await self.store.hard_delete(trashed_id)
        except StoreError as e:
            self._report(e)
            if isinstance(e, NotFoundError):
                await self.resync()
            return False

        self.trashed[:] = [t for t in self.trashed if t.id != trashed_id]
        await self._refresh_trash()
        return True

    # ── Collections ──────────────────────────────────────

    async def load(self) -> None:
        """Fresh start: empty draft, collections fetched from the store."""
        self._leave_context()
        self.session = EditingSession()
        await self.resync()

    async def resync(self) -> None:
        """Re-list active and trashed notes from the store."""
        try:
            active = await self.store.list_active()
            trashed = await self.store.list_trashed()
        except StoreError as e:
            self._report(e)
            return

        pending = self.session.pending_trash
        self.notes[:] = sort_by_recent(
            n for n in active if pending is None or n.id != pending.id
        )
        self.trashed[:] = trashed

    async def _refresh_trash(self) -> None:
        try:
            self.trashed[:] = await self.store.list_trashed()
        except StoreError as e:
            self._report(e)

    def _find_active(self, note_id: int | None) -> Note | None:
        for note in self.notes:
            if note.id == note_id:
                return note
        return None

    def _remove_active(self, note_id: int | None) -> None:
        self.notes[:] = [n for n in self.notes if n.id != note_id]

    def _store_active(self, note: Note, insert: bool) -> None:
        """Replace the note in the active list (or add it) and re-sort."""
        pending = self.session.pending_trash
        if pending is not None and pending.id == note.id:
            self.session.pending_trash = note
            return
        for i, existing in enumerate(self.notes):
            if existing.id == note.id:
                self.notes[i] = note
                break
        else:
            if not insert:
                return
            self.notes.append(note)
        self.notes.sort(key=lambda n: n.updated_at, reverse=True)

    # ── Errors & tasks ───────────────────────────────────

    def _report(self, error: StoreError) -> None:
        """Surface a failed store call. The draft is never touched here."""
        logger.warning(f"⚠️ {type(error).__name__}: {error.message}")
        if self.notify is not None:
            self.notify(error)
        if isinstance(error, AuthError):
            if self.on_auth_error is None:
                raise error
            self.on_auth_error(error)

    def _autosave_failed(self, error: Exception) -> None:
        logger.error(f"❌ Autosave stopped: {error}")

    def _spawn(self, coro) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._background.add(task)
        task.add_done_callback(self._background_done)

    def _background_done(self, task: asyncio.Task) -> None:
        self._background.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error(f"❌ Background save failed: {task.exception()}")
