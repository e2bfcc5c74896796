from __future__ import annotations

import logging
import secrets
from typing import Optional

from django.contrib.auth import authenticate
from django.db import IntegrityError, transaction
from django.utils import timezone

from burnernet.errors import AuthenticationError, ConflictError, ValidationError

from .models import InviteCode, User

logger = logging.getLogger(__name__)

INVITE_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZ"
INVITE_LENGTH = 8
USERNAME_MAX_LENGTH = 150


def normalize_invite_code(raw: Optional[str]) -> Optional[str]:
    if raw is None:
        return None
    if not isinstance(raw, str):
        raise ValidationError.for_field("inviteCode", "inviteCode must be a string.")
    code = raw.strip().upper()
    return code or None


def _consume_invite_code(code: str, user: User) -> None:
    """Mark ``code`` as redeemed by ``user``; only an unused code can transition."""

    updated = InviteCode.objects.filter(
        code=code, used_by__isnull=True, used_at__isnull=True
    ).update(used_by=user, used_at=timezone.now())
    if updated != 1:
        raise ConflictError("Invalid or used invite code.")


def _ensure_invite_available(code: str) -> None:
    if not InviteCode.objects.filter(
        code=code, used_by__isnull=True, used_at__isnull=True
    ).exists():
        raise ConflictError("Invalid or used invite code.")


def register_user(username: str, password: str, invite_code: Optional[str] = None) -> User:
    """Create an account, redeeming ``invite_code`` for post access when given."""

    username = username.strip() if isinstance(username, str) else ""
    if not username:
        raise ValidationError.for_field("username", "username must not be empty.")
    if len(username) > USERNAME_MAX_LENGTH:
        raise ValidationError.for_field(
            "username", f"username must be at most {USERNAME_MAX_LENGTH} characters."
        )
    if not isinstance(password, str) or not password:
        raise ValidationError.for_field("password", "password must not be empty.")

    code = normalize_invite_code(invite_code)
    if User.objects.filter(username=username).exists():
        raise ConflictError("Username already exists.")
    if code:
        _ensure_invite_available(code)

    try:
        with transaction.atomic():
            user = User.objects.create_user(
                username, password, has_post_access=bool(code)
            )
            if code:
                _consume_invite_code(code, user)
    except IntegrityError as exc:
        logger.info("Concurrent registration for %s rejected: %s", username, exc)
        raise ConflictError("Username already exists.") from exc

    logger.info("Registered user %s (post access: %s)", user.username, user.has_post_access)
    return user


def authenticate_user(request, username: str, password: str) -> User:
    """Check credentials; unknown users and wrong passwords fail identically."""

    if not isinstance(username, str) or not isinstance(password, str):
        raise AuthenticationError("Invalid credentials.")
    user = authenticate(request, username=username.strip(), password=password)
    if user is None:
        raise AuthenticationError("Invalid credentials.")
    return user


def upgrade_access(user: User, invite_code: Optional[str]) -> User:
    code = normalize_invite_code(invite_code)
    if not code:
        raise ValidationError.for_field("inviteCode", "Invite code required.")
    if user.has_post_access:
        raise ConflictError("Post access already granted.")
    with transaction.atomic():
        _consume_invite_code(code, user)
        User.objects.filter(pk=user.pk).update(has_post_access=True)
    user.refresh_from_db(fields=["has_post_access"])
    return user


def generate_invite_code(created_by: User, length: int = INVITE_LENGTH) -> InviteCode:
    for _ in range(10):
        code = "".join(secrets.choice(INVITE_ALPHABET) for _ in range(length))
        if InviteCode.objects.filter(code=code).exists():
            continue
        try:
            with transaction.atomic():
                return InviteCode.objects.create(code=code, created_by=created_by)
        except IntegrityError:
            continue
    raise ConflictError("Failed to generate a unique invite code. Please try again later.")


def list_invite_codes():
    return InviteCode.objects.select_related("created_by", "used_by").order_by("-created_at", "-id")
