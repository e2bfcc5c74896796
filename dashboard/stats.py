"""Read models behind the admin statistics endpoint."""

from __future__ import annotations

from datetime import timedelta
from typing import Any, Dict, Protocol

from django.db.models import Count, Q
from django.utils import timezone

from accounts.models import InviteCode, User
from burners.models import BurnerProfile, Post
from guesses.models import IdentityGuess

TOP_PROFILES = 5


class StatsReadModel(Protocol):
    def collect(self) -> Dict[str, Any]:
        ...


class OrmStatsReadModel:
    """Aggregates counts with the Django ORM against the primary database."""

    def __init__(self, now=None):
        self._now = now

    def collect(self) -> Dict[str, Any]:
        now = self._now or timezone.now()

        users = User.objects.aggregate(
            total=Count("id"),
            admins=Count("id", filter=Q(is_admin=True)),
            with_post_access=Count("id", filter=Q(has_post_access=True)),
        )
        profiles = BurnerProfile.objects.aggregate(
            total=Count("id"),
            active=Count("id", filter=Q(is_active=True)),
            inactive=Count("id", filter=Q(is_active=False)),
            ai=Count("id", filter=Q(is_ai=True)),
            archive=Count("id", filter=Q(is_archive=True)),
        )
        posts = Post.objects.aggregate(
            total=Count("id"),
            last_24h=Count("id", filter=Q(created_at__gte=now - timedelta(hours=24))),
        )
        guesses = IdentityGuess.objects.aggregate(
            total=Count("id"),
            correct=Count("id", filter=Q(is_correct=True)),
        )
        invites = InviteCode.objects.aggregate(
            total=Count("id"),
            used=Count("id", filter=Q(used_by__isnull=False)),
        )

        top_profiles = [
            {"id": profile.id, "codename": profile.codename, "postCount": profile.post_count}
            for profile in BurnerProfile.objects.filter(post_count__gt=0).order_by("-post_count", "id")[:TOP_PROFILES]
        ]

        return {
            "users": {
                "total": users["total"],
                "admins": users["admins"],
                "withPostAccess": users["with_post_access"],
            },
            "burnerProfiles": profiles,
            "posts": {"total": posts["total"], "last24Hours": posts["last_24h"]},
            "guesses": {
                "total": guesses["total"],
                "correct": guesses["correct"],
                "accuracy": round(guesses["correct"] / guesses["total"], 4) if guesses["total"] else None,
            },
            "inviteCodes": {
                "total": invites["total"],
                "used": invites["used"],
                "unused": invites["total"] - invites["used"],
            },
            "topProfiles": top_profiles,
        }
