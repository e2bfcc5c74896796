import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("burners", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="ArchiveImport",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("account_id", models.CharField(db_index=True, max_length=64)),
                ("username", models.CharField(blank=True, max_length=150)),
                (
                    "next_offset",
                    models.PositiveIntegerField(
                        default=0,
                        help_text="Offset of the first archive record not yet imported.",
                    ),
                ),
                ("imported_count", models.PositiveIntegerField(default=0)),
                ("skipped_count", models.PositiveIntegerField(default=0)),
                (
                    "status",
                    models.CharField(
                        choices=[("running", "Running"), ("completed", "Completed"), ("failed", "Failed")],
                        default="running",
                        max_length=16,
                    ),
                ),
                ("error", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "burner",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="archive_imports",
                        to="burners.burnerprofile",
                    ),
                ),
            ],
            options={
                "db_table": "archive_imports",
                "ordering": ["-created_at", "-id"],
            },
        ),
    ]
