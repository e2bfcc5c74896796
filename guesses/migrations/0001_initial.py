import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("burners", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="IdentityGuess",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "is_correct",
                    models.BooleanField(
                        help_text="Whether the guessed user owns the post's burner profile, fixed at creation.",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "guessed_user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="guesses_received",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "guesser",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="guesses_made",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "post",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="identity_guesses",
                        to="burners.post",
                    ),
                ),
            ],
            options={
                "db_table": "identity_guesses",
                "ordering": ["-created_at", "-id"],
            },
        ),
    ]
