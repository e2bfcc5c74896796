from __future__ import annotations

import logging

from django.contrib.auth import get_user_model
from django.db.models import QuerySet

from burnernet.errors import NotFound, ValidationError
from burners.models import Post

from .models import IdentityGuess

logger = logging.getLogger(__name__)


def create_guess(guesser, post_id: int, guessed_user_id: int) -> IdentityGuess:
    """Record a guess; correctness is decided once, against the post's profile owner."""

    post = Post.objects.select_related("burner").filter(pk=post_id).first()
    if post is None:
        raise NotFound("Post not found.")
    guessed_user = get_user_model().objects.filter(pk=guessed_user_id).first()
    if guessed_user is None:
        raise NotFound("Guessed user not found.")
    if post.burner.user_id == guesser.id:
        raise ValidationError.for_field("postId", "You cannot guess the author of your own post.")

    guess = IdentityGuess.objects.create(
        guesser=guesser,
        post=post,
        guessed_user=guessed_user,
        is_correct=post.burner.user_id == guessed_user.id,
    )
    logger.info("User %s guessed user %s for post %s", guesser.pk, guessed_user.pk, post.pk)
    return guess


def list_guesses(post_id: int) -> QuerySet:
    if not Post.objects.filter(pk=post_id).exists():
        raise NotFound("Post not found.")
    return (
        IdentityGuess.objects.filter(post_id=post_id)
        .select_related("guesser", "guessed_user")
        .order_by("-created_at", "-id")
    )
