from django.conf import settings
from django.db import models

from burnernet.errors import ImmutableRecordError


class IdentityGuess(models.Model):
    """A user's attempt to name the real account behind a burner's post."""

    guesser = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="guesses_made",
    )
    post = models.ForeignKey(
        "burners.Post",
        on_delete=models.CASCADE,
        related_name="identity_guesses",
    )
    guessed_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="guesses_received",
    )
    is_correct = models.BooleanField(
        help_text="Whether the guessed user owns the post's burner profile, fixed at creation.",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "identity_guesses"
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:  # pragma: no cover - trivial representation
        return f"Guess #{self.pk} on post {self.post_id}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ImmutableRecordError("Identity guesses cannot be modified once created.")
        super().save(*args, **kwargs)

    def to_payload(self) -> dict:
        """Public view of the guess; the correctness flag is never included."""
        return {
            "id": self.id,
            "postId": self.post_id,
            "guesserId": self.guesser_id,
            "guesser": self.guesser.username,
            "guessedUserId": self.guessed_user_id,
            "guessedUsername": self.guessed_user.username,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
