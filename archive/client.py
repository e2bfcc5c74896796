"""HTTP client for the community archive store (a PostgREST API)."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, List, Optional, Tuple

import requests
from django.conf import settings
from requests import RequestException

logger = logging.getLogger(__name__)

Record = Dict[str, Any]


class ArchiveStoreError(Exception):
    """Raised when the archive store cannot be reached or answers unexpectedly."""


def message_text(record: Record) -> str:
    text = record.get("full_text") or record.get("text") or ""
    return text if isinstance(text, str) else str(text)


class ArchiveStoreClient:
    page_order = "tweet_id.asc"

    def __init__(
        self,
        base_url: Optional[str],
        api_key: Optional[str],
        *,
        page_size: int = 1000,
        timeout: int = 30,
        session: Optional[requests.Session] = None,
    ):
        if page_size < 1:
            raise ValueError("page_size must be a positive integer.")
        self.base_url = base_url
        self.api_key = api_key
        self.page_size = page_size
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls) -> "ArchiveStoreClient":
        return cls(
            getattr(settings, "ARCHIVE_STORE_URL", None),
            getattr(settings, "ARCHIVE_STORE_KEY", None),
            page_size=getattr(settings, "ARCHIVE_PAGE_SIZE", 1000),
            timeout=getattr(settings, "ARCHIVE_TIMEOUT", 30),
        )

    @property
    def configured(self) -> bool:
        return bool(self.base_url and self.api_key)

    def _select(self, table: str, params: Dict[str, Any]) -> List[Record]:
        if not self.configured:
            raise ArchiveStoreError("Archive store connection is not configured.")

        url = f"{self.base_url.rstrip('/')}/rest/v1/{table}"
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
        }
        try:
            response = self.session.get(url, params=params, headers=headers, timeout=self.timeout)
            response.raise_for_status()
            rows = response.json()
        except RequestException as exc:
            logger.exception("HTTP error when reaching archive store (%s): %s", table, exc)
            raise ArchiveStoreError(f"Failed to reach archive store ({exc}).") from exc
        except ValueError as exc:
            logger.exception("Failed to decode archive store response JSON: %s", exc)
            raise ArchiveStoreError(f"Invalid response from archive store ({exc}).") from exc

        if not isinstance(rows, list):
            raise ArchiveStoreError(f"Unexpected archive store response for {table}.")
        return rows

    def resolve_account(self, username: str) -> Optional[str]:
        rows = self._select(
            "account",
            {"select": "account_id", "username": f"eq.{username.lower()}", "limit": 1},
        )
        if not rows or rows[0].get("account_id") in (None, ""):
            return None
        return str(rows[0]["account_id"])

    def get_profile(self, username: str) -> Optional[Record]:
        rows = self._select("profile", {"select": "*", "username": f"eq.{username.lower()}", "limit": 1})
        return rows[0] if rows else None

    def fetch_page(self, account_id: str, offset: int, limit: Optional[int] = None) -> List[Record]:
        return self._select(
            "tweets",
            {
                "select": "*",
                "account_id": f"eq.{account_id}",
                "order": self.page_order,
                "offset": offset,
                "limit": limit or self.page_size,
            },
        )

    def iter_pages(self, account_id: str, start_offset: int = 0) -> Iterator[Tuple[int, List[Record]]]:
        """Yield ``(offset, records)`` batches until the store returns an empty page."""

        offset = start_offset
        while True:
            page = self.fetch_page(account_id, offset)
            if not page:
                return
            logger.info("Got %d archive records for %s at offset %d", len(page), account_id, offset)
            yield offset, page
            offset += len(page)

    def fetch_all_messages(self, account_id: str) -> List[Record]:
        records: List[Record] = []
        for _, page in self.iter_pages(account_id):
            records.extend(page)
        return records
