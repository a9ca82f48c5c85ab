"""
Supabase connections for the users, notes and trashed_notes tables.
"""

from functools import lru_cache
from supabase import create_client, Client

from notes_app.config import get_settings


@lru_cache
def get_supabase_client() -> Client:
    """Per-request queries; row ownership is enforced by the services."""
    settings = get_settings()
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)


@lru_cache
def get_supabase_admin_client() -> Client:
    """Cross-user maintenance (trash purge). Uses the anon key when no service key is set."""
    settings = get_settings()
    key = settings.SUPABASE_SERVICE_KEY or settings.SUPABASE_KEY
    return create_client(settings.SUPABASE_URL, key)
