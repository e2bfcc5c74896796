from __future__ import annotations

import logging
from typing import Optional

from django.db import IntegrityError, transaction
from django.db.models import F, QuerySet

from burnernet.errors import ConflictError, NotFound, PermissionDenied, ValidationError

from .models import DEFAULT_AVATAR, BurnerProfile, Post
from .transformer import MessageTransformer, Persona

logger = logging.getLogger(__name__)

CODENAME_MAX_LENGTH = 64
POST_MAX_LENGTH = 5000


def list_profiles(user) -> QuerySet:
    return BurnerProfile.objects.filter(user=user).order_by("-created_at", "-id")


def codename_taken(codename: str) -> bool:
    return BurnerProfile.objects.filter(codename__iexact=codename).exists()


def create_profile(
    user,
    *,
    codename: str,
    personality: str,
    background: str,
    avatar: Optional[str] = None,
    is_ai: bool = False,
    is_archive: bool = False,
    archive_account_id: str = "",
) -> BurnerProfile:
    """Create a persona for ``user``; codenames are unique regardless of case."""

    if len(codename) > CODENAME_MAX_LENGTH:
        raise ValidationError.for_field(
            "codename", f"codename must be at most {CODENAME_MAX_LENGTH} characters."
        )
    if codename_taken(codename):
        raise ConflictError("Codename already in use.", fields={"codename": "Codename already in use."})

    try:
        with transaction.atomic():
            profile = BurnerProfile.objects.create(
                user=user,
                codename=codename,
                personality=personality,
                background=background,
                avatar=avatar or DEFAULT_AVATAR,
                is_ai=is_ai,
                is_archive=is_archive,
                archive_account_id=archive_account_id,
            )
    except IntegrityError as exc:
        logger.info("Codename %s lost a creation race: %s", codename, exc)
        raise ConflictError(
            "Codename already in use.", fields={"codename": "Codename already in use."}
        ) from exc

    logger.info("User %s created burner profile %s", user.pk, profile.codename)
    return profile


def deactivate_profile(user, profile_id: int) -> BurnerProfile:
    profile = BurnerProfile.objects.filter(pk=profile_id).first()
    if profile is None or (profile.user_id != user.id and not user.is_admin):
        raise NotFound("Burner profile not found.")
    if profile.is_active:
        BurnerProfile.objects.filter(pk=profile.pk).update(is_active=False)
        profile.is_active = False
    return profile


def record_post(burner: BurnerProfile, original_content: str, transformed_content: str) -> Post:
    """Persist a post and bump the profile's counters in one transaction."""

    with transaction.atomic():
        post = Post.objects.create(
            burner=burner,
            original_content=original_content,
            transformed_content=transformed_content,
        )
        BurnerProfile.objects.filter(pk=burner.pk).update(
            post_count=F("post_count") + 1,
            last_post_at=post.created_at,
        )
    return post


def create_post(user, burner_id: int, original_text: str, *, transformer: MessageTransformer) -> Post:
    text = original_text.strip() if isinstance(original_text, str) else ""
    if not text:
        raise ValidationError.for_field("originalContent", "originalContent must not be empty.")
    if len(text) > POST_MAX_LENGTH:
        raise ValidationError.for_field(
            "originalContent", f"originalContent must be at most {POST_MAX_LENGTH} characters."
        )
    if not user.can_post:
        raise PermissionDenied("Posting requires an invite code.")

    burner = BurnerProfile.objects.filter(pk=burner_id, user=user).first()
    if burner is None:
        raise NotFound("Burner profile not found.")
    if not burner.is_active:
        raise ValidationError.for_field("burnerId", "Burner profile is deactivated.")

    transformed = transformer.transform(text, Persona.from_profile(burner))
    return record_post(burner, text, transformed)


def list_posts(show_ai_only: Optional[bool] = None) -> QuerySet:
    """Feed newest first; ``True`` keeps AI profiles only, ``False`` human ones only."""

    posts = Post.objects.select_related("burner")
    if show_ai_only is not None:
        posts = posts.filter(burner__is_ai=show_ai_only)
    return posts.order_by("-created_at", "-id")
