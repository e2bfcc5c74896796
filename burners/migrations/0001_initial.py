import django.db.models.deletion
import django.db.models.functions.text
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="BurnerProfile",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "codename",
                    models.CharField(
                        help_text="Public handle of the persona; unique regardless of case.",
                        max_length=64,
                    ),
                ),
                ("personality", models.TextField()),
                ("background", models.TextField()),
                ("avatar", models.CharField(default="default_avatar.png", max_length=512)),
                ("is_active", models.BooleanField(default=True)),
                ("is_ai", models.BooleanField(default=False)),
                (
                    "is_archive",
                    models.BooleanField(
                        default=False,
                        help_text="Created by importing an external message archive.",
                    ),
                ),
                ("archive_account_id", models.CharField(blank=True, max_length=64)),
                ("post_count", models.PositiveIntegerField(default=0)),
                ("last_post_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="burner_profiles",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "burner_profiles",
                "ordering": ["-created_at", "-id"],
            },
        ),
        migrations.AddConstraint(
            model_name="burnerprofile",
            constraint=models.UniqueConstraint(
                django.db.models.functions.text.Lower("codename"),
                name="burner_profiles_codename_ci_uniq",
            ),
        ),
        migrations.CreateModel(
            name="Post",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("original_content", models.TextField(help_text="Text as submitted by the author.")),
                ("transformed_content", models.TextField(help_text="Text rewritten in the persona's voice.")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                (
                    "burner",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="posts",
                        to="burners.burnerprofile",
                    ),
                ),
            ],
            options={
                "db_table": "posts",
                "ordering": ["-created_at", "-id"],
            },
        ),
    ]
