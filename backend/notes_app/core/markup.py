"""
Markup helpers: turn rich-text editor HTML into plain text.

Used for search filtering, list previews and auto-generated titles.
Stored markup is never modified, only the derived plain text.
"""

import re

TITLE_WORD_LIMIT = 5
ELLIPSIS = "..."

# Block-level boundaries become a space so "<p>a</p><p>b</p>" reads "a b"
_BLOCK_TAG_RE = re.compile(
    r"</?(?:p|div|br|li|ul|ol|h[1-6]|blockquote|pre|tr|td|th)\b[^>]*>",
    re.IGNORECASE,
)
_TAG_RE = re.compile(r"<[^>]*>")
_NBSP_RE = re.compile("&nbsp;|&#160;|\\u00a0", re.IGNORECASE)


def strip_markup(markup: str | None) -> str:
    """Remove tags from editor markup and trim the result.

    Idempotent: strip_markup(strip_markup(x)) == strip_markup(x).
    Character entities other than non-breaking spaces are left as-is.
    """
    if not markup:
        return ""
    text = _BLOCK_TAG_RE.sub(" ", markup)
    text = _TAG_RE.sub("", text)
    text = _NBSP_RE.sub(" ", text)
    return text.strip()


def is_blank(markup: str | None) -> bool:
    """True when the markup carries no visible text."""
    return strip_markup(markup) == ""


def derive_title(markup: str | None, word_limit: int = TITLE_WORD_LIMIT) -> str:
    """Build a title from the first words of the content.

    "Hello world" -> "Hello world"
    "one two three four five six" -> "one two three four five..."
    """
    words = strip_markup(markup).split()
    if not words:
        return ""
    title = " ".join(words[:word_limit])
    if len(words) > word_limit:
        title += ELLIPSIS
    return title
