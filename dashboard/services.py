from __future__ import annotations

import logging
from typing import Optional

from django.db.models import Count, Q, QuerySet

from accounts.models import User
from burnernet.errors import NotFound, ValidationError

logger = logging.getLogger(__name__)


def annotated_users() -> QuerySet:
    return User.objects.annotate(
        profile_count=Count("burner_profiles", distinct=True),
        post_count=Count("burner_profiles__posts", distinct=True),
    ).order_by("id")


def user_summary(user: User) -> dict:
    payload = user.to_payload()
    payload["profileCount"] = getattr(user, "profile_count", 0)
    payload["postCount"] = getattr(user, "post_count", 0)
    return payload


def get_user(user_id: int) -> User:
    user = annotated_users().filter(pk=user_id).first()
    if user is None:
        raise NotFound("User not found.")
    return user


def user_detail(user: User) -> dict:
    guesses = user.guesses_made.aggregate(
        total=Count("id"),
        correct=Count("id", filter=Q(is_correct=True)),
    )
    payload = user_summary(user)
    payload["burnerProfiles"] = [
        profile.to_payload() for profile in user.burner_profiles.order_by("-created_at", "-id")
    ]
    payload["guesses"] = {"total": guesses["total"], "correct": guesses["correct"]}
    payload["timesGuessed"] = user.guesses_received.count()
    return payload


def set_admin_role(actor: User, user_id: int, is_admin: Optional[bool] = None) -> User:
    """Set ``is_admin`` explicitly, or flip it when ``is_admin`` is None."""

    target = get_user(user_id)
    if target.pk == actor.pk:
        raise ValidationError.for_field("userId", "You cannot change your own role.")
    new_value = (not target.is_admin) if is_admin is None else is_admin
    User.objects.filter(pk=target.pk).update(is_admin=new_value)
    target.is_admin = new_value
    logger.info("Admin %s set is_admin=%s for user %s", actor.pk, new_value, target.pk)
    return target
