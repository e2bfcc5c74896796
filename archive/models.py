from django.db import models


class ArchiveImport(models.Model):
    """Progress of one external account's messages being replayed into a burner profile."""

    class Status(models.TextChoices):
        RUNNING = "running", "Running"
        COMPLETED = "completed", "Completed"
        FAILED = "failed", "Failed"

    burner = models.ForeignKey(
        "burners.BurnerProfile",
        on_delete=models.CASCADE,
        related_name="archive_imports",
    )
    account_id = models.CharField(max_length=64, db_index=True)
    username = models.CharField(max_length=150, blank=True)
    next_offset = models.PositiveIntegerField(
        default=0,
        help_text="Offset of the first archive record not yet imported.",
    )
    imported_count = models.PositiveIntegerField(default=0)
    skipped_count = models.PositiveIntegerField(default=0)
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.RUNNING)
    error = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "archive_imports"
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:  # pragma: no cover - trivial representation
        return f"Import of {self.account_id} into {self.burner_id} ({self.status})"

    def to_payload(self) -> dict:
        return {
            "id": self.id,
            "burnerId": self.burner_id,
            "accountId": self.account_id,
            "username": self.username,
            "nextOffset": self.next_offset,
            "importedCount": self.imported_count,
            "skippedCount": self.skipped_count,
            "status": self.status,
            "error": self.error or None,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
