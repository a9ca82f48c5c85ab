"""
Client: HTTP clients for the notes and user services.

NoteStoreClient is the Note Store Client the editing session persists
through. Every failure is raised as one of four StoreError kinds:

  400 / 422          -> ValidationError
  401 / 403          -> AuthError
  404                -> NotFoundError
  anything else      -> TransportError (incl. timeouts, connection errors)
"""

import logging
import httpx

from notes_app.config import get_client_settings
from notes_app.features.notes.schemas import Note, TrashedNote

logger = logging.getLogger(__name__)


# ── Errors ───────────────────────────────────────────────

class StoreError(Exception):
    """Base class for failures talking to the notes/user services."""
    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class ValidationError(StoreError):
    """Request rejected by the server (e.g. empty title or content)."""


class AuthError(StoreError):
    """Missing, invalid or expired token. The user must sign in again."""


class NotFoundError(StoreError):
    """The note no longer exists or is not owned by the user."""


class TransportError(StoreError):
    """Network failure, timeout or unexpected server error."""


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    detail = body.get("detail", body) if isinstance(body, dict) else body
    if isinstance(detail, dict):
        return detail.get("error") or str(detail)
    if isinstance(detail, list):  # pydantic validation errors
        return "; ".join(str(item.get("msg", item)) for item in detail if isinstance(item, dict)) or str(detail)
    return str(detail)


def raise_for_status(response: httpx.Response) -> None:
    """Map an HTTP error response to a StoreError."""
    code = response.status_code
    if code < 400:
        return
    message = _error_message(response)
    if code in (400, 422):
        raise ValidationError(message, code)
    if code in (401, 403):
        raise AuthError(message, code)
    if code == 404:
        raise NotFoundError(message, code)
    raise TransportError(message, code)


class _BaseClient:
    """Shared httpx.AsyncClient plumbing."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        headers: dict | None = None,
    ):
        settings = get_client_settings()
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=float(timeout if timeout is not None else settings.API_TIMEOUT),
            transport=transport,
            headers={
                "Accept": "application/json",
                **(headers or {}),
            },
        )

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            raise TransportError(f"{method} {path} timed out") from e
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {path} failed: {e}") from e

        if response.status_code >= 400:
            logger.debug(f"{method} {path} -> {response.status_code}")
        raise_for_status(response)
        return response

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


class AuthClient(_BaseClient):
    """Client for the user service (register / login)."""

    async def register(self, username: str, password: str) -> int:
        """Create an account. Returns the new user id."""
        response = await self._request(
            "POST", "/api/users/register",
            json={"username": username, "password": password},
        )
        return response.json()["id"]

    async def login(self, username: str, password: str) -> str:
        """Sign in. Returns the bearer token for NoteStoreClient."""
        response = await self._request(
            "POST", "/api/users/login",
            json={"username": username, "password": password},
        )
        return response.json()["access_token"]


class NoteStoreClient(_BaseClient):
    """Client for the notes service; authenticated with a bearer token."""

    def __init__(
        self,
        token: str,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={"Authorization": f"Bearer {token}"},
        )

    # ── Active notes ─────────────────────────────────────

    async def create(self, title: str, content: str) -> Note:
        response = await self._request(
            "POST", "/api/notes", json={"title": title, "content": content}
        )
        return Note.model_validate(response.json())

    async def update(self, note_id: int, title: str, content: str) -> Note:
        response = await self._request(
            "PUT", f"/api/notes/{note_id}", json={"title": title, "content": content}
        )
        return Note.model_validate(response.json())

    async def soft_delete(self, note_id: int) -> None:
        await self._request("DELETE", f"/api/notes/{note_id}")

    async def list_active(self) -> list[Note]:
        response = await self._request("GET", "/api/notes")
        return [Note.model_validate(item) for item in response.json()]

    # ── Trash ────────────────────────────────────────────

    async def list_trashed(self) -> list[TrashedNote]:
        response = await self._request("GET", "/api/trashed-notes")
        return [TrashedNote.model_validate(item) for item in response.json()]

    async def restore(self, trashed_id: int) -> Note:
        response = await self._request("POST", f"/api/trashed-notes/{trashed_id}/restore")
        return Note.model_validate(response.json())

    async def hard_delete(self, trashed_id: int) -> None:
        await self._request("DELETE", f"/api/trashed-notes/{trashed_id}")
