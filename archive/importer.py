from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from dataclasses import dataclass
from typing import List, Optional

from django.db import transaction

from burnernet.errors import NotFound, UpstreamServiceError, ValidationError
from burners import services as burner_services
from burners.models import BurnerProfile

from .client import ArchiveStoreClient, ArchiveStoreError, Record, message_text
from .models import ArchiveImport

logger = logging.getLogger(__name__)

HANDLE_PATTERN = re.compile(r"^@?([A-Za-z0-9_]{1,50})$")
ARCHIVE_BACKGROUND = "Imported from Community Archive"


@dataclass(slots=True)
class ImportResult:
    job: ArchiveImport
    imported: int
    skipped: int
    resumed_from: int

    @property
    def total_imported(self) -> int:
        return self.job.imported_count


def normalize_handle(username) -> str:
    match = HANDLE_PATTERN.match(username.strip()) if isinstance(username, str) else None
    if not match:
        raise ValidationError.for_field("username", "username must be a valid archive handle.")
    return match.group(1)


@contextmanager
def _upstream(action: str):
    try:
        yield
    except ArchiveStoreError as exc:
        logger.error("Archive store failure while %s: %s", action, exc)
        raise UpstreamServiceError(f"Archive store error while {action}: {exc}") from exc


class ArchiveImporter:
    """Replays an external account's message history as posts of a burner profile."""

    def __init__(self, client: ArchiveStoreClient):
        self.client = client

    @classmethod
    def from_settings(cls) -> "ArchiveImporter":
        return cls(ArchiveStoreClient.from_settings())

    def resolve_external_account(self, username: str) -> Optional[str]:
        handle = normalize_handle(username)
        with _upstream(f"resolving {handle}"):
            return self.client.resolve_account(handle)

    def require_external_account(self, username: str) -> str:
        account_id = self.resolve_external_account(username)
        if account_id is None:
            raise NotFound(f"Archive account {normalize_handle(username)} not found.")
        return account_id

    def fetch_all_messages(self, account_id: str) -> List[Record]:
        with _upstream(f"fetching messages for {account_id}"):
            return self.client.fetch_all_messages(account_id)

    def fetch_first_page(self, account_id: str, limit: int) -> List[Record]:
        with _upstream(f"previewing messages for {account_id}"):
            return self.client.fetch_page(account_id, 0, limit=limit)

    def fetch_profile_info(self, username: str) -> Optional[Record]:
        handle = normalize_handle(username)
        try:
            return self.client.get_profile(handle)
        except ArchiveStoreError as exc:
            logger.warning("Archive profile lookup for %s failed: %s", handle, exc)
            return None

    @staticmethod
    def derive_codename(username: str) -> str:
        """``ARCHIVE_<HANDLE>``, suffixed ``_2``, ``_3``... while the codename is taken."""

        base = f"ARCHIVE_{normalize_handle(username).upper()}"
        codename = base
        suffix = 2
        while burner_services.codename_taken(codename):
            codename = f"{base}_{suffix}"
            suffix += 1
        return codename

    def create_profile_from_archive(self, user, username: str) -> BurnerProfile:
        handle = normalize_handle(username)
        account_id = self.require_external_account(handle)
        info = self.fetch_profile_info(handle) or {}
        avatar = info.get("avatar_media_url") or info.get("profile_image_url")

        profile = burner_services.create_profile(
            user,
            codename=self.derive_codename(handle),
            personality=f"Archive of {handle}'s posts",
            background=ARCHIVE_BACKGROUND,
            avatar=avatar if isinstance(avatar, str) else None,
            is_archive=True,
            archive_account_id=account_id,
        )
        logger.info("Created archive profile %s for account %s", profile.codename, account_id)
        return profile

    def _open_job(self, burner: BurnerProfile, account_id: str, username: str) -> ArchiveImport:
        job = (
            ArchiveImport.objects.filter(burner=burner, account_id=account_id)
            .exclude(status=ArchiveImport.Status.COMPLETED)
            .order_by("-id")
            .first()
        )
        if job is None:
            return ArchiveImport.objects.create(burner=burner, account_id=account_id, username=username)
        job.status = ArchiveImport.Status.RUNNING
        job.error = ""
        job.save(update_fields=["status", "error", "updated_at"])
        logger.info("Resuming import %s for %s from offset %d", job.pk, account_id, job.next_offset)
        return job

    def import_messages(self, burner: BurnerProfile, account_id: str, username: str = "") -> ImportResult:
        """Import every non-blank message, checkpointing the cursor after each page.

        An unfinished run for the same profile and account resumes from its
        checkpoint. Posts from pages already committed stay in place on failure.
        """

        job = self._open_job(burner, account_id, username)
        resumed_from = job.next_offset
        imported = skipped = 0

        try:
            for offset, records in self.client.iter_pages(account_id, start_offset=job.next_offset):
                page_imported = page_skipped = 0
                with transaction.atomic():
                    for record in records:
                        text = message_text(record)
                        if not text.strip():
                            page_skipped += 1
                            continue
                        burner_services.record_post(burner, text, text)
                        page_imported += 1
                    job.next_offset = offset + len(records)
                    job.imported_count += page_imported
                    job.skipped_count += page_skipped
                    job.save(update_fields=["next_offset", "imported_count", "skipped_count", "updated_at"])
                imported += page_imported
                skipped += page_skipped
        except ArchiveStoreError as exc:
            job.status = ArchiveImport.Status.FAILED
            job.error = str(exc)
            job.save(update_fields=["status", "error", "updated_at"])
            logger.error("Import %s for %s failed at offset %d: %s", job.pk, account_id, job.next_offset, exc)
            raise UpstreamServiceError(f"Archive store error while importing {account_id}: {exc}") from exc

        job.status = ArchiveImport.Status.COMPLETED
        job.save(update_fields=["status", "updated_at"])
        logger.info("Imported %d messages (%d skipped) into %s", imported, skipped, burner.codename)
        return ImportResult(job=job, imported=imported, skipped=skipped, resumed_from=resumed_from)
