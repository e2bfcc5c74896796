from __future__ import annotations

from django.conf import settings
from django.contrib.auth.base_user import AbstractBaseUser, BaseUserManager
from django.db import models


class UserManager(BaseUserManager):
    use_in_migrations = True

    def create_user(self, username: str, password: str | None = None, **extra_fields) -> "User":
        if not username:
            raise ValueError("Username must be set.")
        user = self.model(username=username, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, username: str, password: str | None = None, **extra_fields) -> "User":
        extra_fields.setdefault("is_admin", True)
        extra_fields.setdefault("has_post_access", True)
        return self.create_user(username, password, **extra_fields)


class User(AbstractBaseUser):
    """A real account; everything it posts goes out through burner profiles."""

    username = models.CharField(max_length=150, unique=True)
    is_admin = models.BooleanField(default=False)
    has_post_access = models.BooleanField(
        default=False,
        help_text="Granted by redeeming an invite code; required to publish posts.",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    objects = UserManager()

    USERNAME_FIELD = "username"
    REQUIRED_FIELDS: list[str] = []

    class Meta:
        db_table = "users"
        ordering = ["id"]

    def __str__(self) -> str:
        return self.username

    @property
    def is_staff(self) -> bool:
        return self.is_admin

    @property
    def can_post(self) -> bool:
        return self.is_admin or self.has_post_access

    def has_perm(self, perm, obj=None) -> bool:
        return self.is_admin

    def has_module_perms(self, app_label) -> bool:
        return self.is_admin

    def to_payload(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "isAdmin": self.is_admin,
            "hasPostAccess": self.has_post_access,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "lastLogin": self.last_login.isoformat() if self.last_login else None,
        }


class InviteCode(models.Model):
    """Single-use registration token that unlocks post access."""

    code = models.CharField(max_length=32, unique=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="invite_codes_created",
    )
    used_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="invite_codes_used",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    used_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "invite_codes"
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:
        return f"{self.code} ({'used' if self.is_used else 'unused'})"

    @property
    def is_used(self) -> bool:
        return self.used_by_id is not None or self.used_at is not None

    def to_payload(self) -> dict:
        return {
            "id": self.id,
            "code": self.code,
            "createdById": self.created_by_id,
            "createdBy": self.created_by.username if self.created_by else None,
            "usedById": self.used_by_id,
            "usedBy": self.used_by.username if self.used_by else None,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "usedAt": self.used_at.isoformat() if self.used_at else None,
        }
