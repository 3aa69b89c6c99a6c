"""
Gistbook - API Client
=====================

What:  Async HTTP client for the Gistbook API that also keeps the grouped
       board in sync, the way the browser page does.
How:   httpx.AsyncClient for transport. refresh() fetches subjects first and
       snippets second (the grouping needs the complete subject list), then
       rebuilds the Board. Every mutation is followed by a full refresh.

Failure behavior:
    - Local checks (blank fields, duplicate name, subject still in use) raise
      the same exceptions the server would, before any request is sent.
    - HTTP errors and transport failures raise ApiError with the server's
      message. The previous board stays in place; nothing is retried.

Example:
    async with GistbookClient("http://localhost:3000") as client:
        board = await client.refresh()
        await client.add_subject("Rust")
        await client.add_snippet("hi", "Rust", "fn main(){}")
        for name, items in client.board.sections:
            print(name, len(items))
"""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from gistbook.exceptions import DuplicateNameError, SubjectInUseError
from gistbook.presentation import Board, build_board
from gistbook.validation import (
    can_delete_subject,
    count_referencing,
    is_duplicate_subject,
    validate_snippet_input,
    validate_subject_name,
)

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """
    Raised when the API answers with an error status or cannot be reached.

    Attributes:
        status_code: HTTP status, or None for transport failures
        message:     The server's `message` field, or a generic description
        payload:     Decoded error body (may be empty)
    """

    def __init__(self, message: str, status_code: Optional[int] = None, payload: Optional[dict] = None):
        self.message = message
        self.status_code = status_code
        self.payload = payload or {}
        super().__init__(message)


class GistbookClient:

    def __init__(
        self,
        base_url: str = "http://localhost:3000",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._http = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)
        self.board = Board()

    async def __aenter__(self) -> "GistbookClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # ── Raw API calls ─────────────────────────────────────────────────────

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            response = await self._http.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise ApiError(f"Request failed: {e}") from e

        if response.is_error:
            try:
                payload = response.json()
            except ValueError:
                payload = {}
            message = payload.get("message") or f"HTTP error! status: {response.status_code}"
            raise ApiError(message, status_code=response.status_code, payload=payload)
        return response.json()

    async def list_subjects(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/api/subjects")

    async def list_snippets(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/api/snippets")

    async def snippets_by_subject(self, subject_name: str) -> List[Dict[str, Any]]:
        return await self._request("GET", f"/api/snippets/by-subject/{quote(subject_name, safe='')}")

    async def get_snippet(self, snippet_id: int) -> Dict[str, Any]:
        return await self._request("GET", f"/api/snippets/{snippet_id}")

    async def create_snippet(self, title: str, category: str, content: str) -> Dict[str, Any]:
        return await self._request(
            "POST", "/api/snippets",
            json={"title": title, "category": category, "content": content},
        )

    async def create_subject(self, name: str) -> Dict[str, Any]:
        return await self._request("POST", "/api/subjects", json={"name": name})

    async def delete_subject(self, subject_id: int) -> Dict[str, Any]:
        return await self._request("DELETE", f"/api/subjects/{subject_id}")

    # ── Board ─────────────────────────────────────────────────────────────

    async def refresh(self) -> Board:
        """
        Fetch subjects, then snippets, and rebuild the board.

        On failure the previous board is kept and ApiError propagates.
        """
        subjects = await self.list_subjects()
        snippets = await self.list_snippets()
        self.board = build_board(subjects, snippets)
        return self.board

    async def add_subject(self, name: str) -> Dict[str, Any]:
        clean = validate_subject_name(name)
        if is_duplicate_subject(clean, self.board.subject_names):
            raise DuplicateNameError(clean)
        created = await self.create_subject(clean)
        logger.info("Subject '%s' added", clean)
        await self.refresh()
        return created

    async def remove_subject(self, subject_id: int) -> str:
        """
        Delete a subject after checking the local board for snippets that
        still refer to it. The server repeats the check atomically.
        """
        subject = next((s for s in self.board.subjects if s["id"] == subject_id), None)
        if subject is not None and not can_delete_subject(subject["name"], self.board.snippets):
            raise SubjectInUseError(
                name=subject["name"],
                snippet_count=count_referencing(subject["name"], self.board.snippets),
            )
        result = await self.delete_subject(subject_id)
        await self.refresh()
        return result["message"]

    async def add_snippet(self, title: str, category: str, content: str) -> Dict[str, Any]:
        validate_snippet_input(title, category, content)
        created = await self.create_snippet(title, category, content)
        logger.info("Snippet %s saved under '%s'", created["id"], category)
        await self.refresh()
        return created
