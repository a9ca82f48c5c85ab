"""
Client: the rich-text editing surface seen by the editing session.

The session only needs get/set content, change notifications and focus.
BufferEditor is a headless surface that keeps the markup in memory; a real
UI wraps its own widget behind the same four methods.
"""

from typing import Callable, Protocol

ChangeCallback = Callable[[str], None]


class EditorAdapter(Protocol):
    def get_content(self) -> str: ...

    def set_content(self, markup: str, preserve_cursor: bool = False) -> None: ...

    def on_change(self, callback: ChangeCallback) -> None: ...

    def focus(self) -> None: ...


class BufferEditor:
    """In-memory editor surface.

    `set_content` is a programmatic load and does not notify listeners.
    `type` stands in for user input: it replaces the content and notifies.
    """

    def __init__(self, markup: str = ""):
        self._markup = markup
        self._callbacks: list[ChangeCallback] = []
        self.cursor = len(markup)
        self.focus_count = 0
        self.load_count = 0

    def get_content(self) -> str:
        return self._markup

    def set_content(self, markup: str, preserve_cursor: bool = False) -> None:
        self._markup = markup
        self.load_count += 1
        if preserve_cursor:
            self.cursor = min(self.cursor, len(markup))
        else:
            self.cursor = len(markup)

    def on_change(self, callback: ChangeCallback) -> None:
        self._callbacks.append(callback)

    def focus(self) -> None:
        self.focus_count += 1

    def type(self, markup: str) -> None:
        """Replace the content as if the user edited it."""
        self._markup = markup
        self.cursor = len(markup)
        for callback in list(self._callbacks):
            callback(markup)
