from __future__ import annotations

from django.conf import settings
from django.db import models
from django.db.models.functions import Lower

from burnernet.errors import ImmutableRecordError

DEFAULT_AVATAR = "default_avatar.png"


class BurnerProfile(models.Model):
    """A pseudonymous persona a user posts under."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="burner_profiles",
    )
    codename = models.CharField(
        max_length=64,
        help_text="Public handle of the persona; unique regardless of case.",
    )
    personality = models.TextField()
    background = models.TextField()
    avatar = models.CharField(max_length=512, default=DEFAULT_AVATAR)
    is_active = models.BooleanField(default=True)
    is_ai = models.BooleanField(default=False)
    is_archive = models.BooleanField(
        default=False,
        help_text="Created by importing an external message archive.",
    )
    archive_account_id = models.CharField(max_length=64, blank=True)
    post_count = models.PositiveIntegerField(default=0)
    last_post_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "burner_profiles"
        ordering = ["-created_at", "-id"]
        constraints = [
            models.UniqueConstraint(Lower("codename"), name="burner_profiles_codename_ci_uniq"),
        ]

    def __str__(self) -> str:
        return self.codename

    def to_payload(self) -> dict:
        return {
            "id": self.id,
            "userId": self.user_id,
            "codename": self.codename,
            "personality": self.personality,
            "background": self.background,
            "avatar": self.avatar,
            "isActive": self.is_active,
            "isAI": self.is_ai,
            "isArchive": self.is_archive,
            "archiveAccountId": self.archive_account_id or None,
            "postCount": self.post_count,
            "lastPostAt": self.last_post_at.isoformat() if self.last_post_at else None,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


class Post(models.Model):
    """A message published through a burner profile. Write-once."""

    burner = models.ForeignKey(
        BurnerProfile,
        on_delete=models.CASCADE,
        related_name="posts",
    )
    original_content = models.TextField(help_text="Text as submitted by the author.")
    transformed_content = models.TextField(help_text="Text rewritten in the persona's voice.")
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = "posts"
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:  # pragma: no cover - trivial representation
        return f"Post #{self.pk} by {self.burner_id}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ImmutableRecordError("Posts cannot be modified once created.")
        super().save(*args, **kwargs)

    def to_payload(self, viewer=None) -> dict:
        burner = self.burner
        payload = {
            "id": self.id,
            "burnerId": self.burner_id,
            "codename": burner.codename,
            "avatar": burner.avatar,
            "isAI": burner.is_ai,
            "transformedContent": self.transformed_content,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
        if viewer is not None and viewer.is_authenticated and burner.user_id == viewer.id:
            payload["originalContent"] = self.original_content
        return payload
