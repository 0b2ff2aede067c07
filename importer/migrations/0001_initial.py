import uuid

import django.core.serializers.json
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Job",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("created", models.DateTimeField(auto_now_add=True)),
                ("modified", models.DateTimeField(auto_now=True)),
                ("job_id", models.CharField(max_length=1024, unique=True)),
                ("title", models.TextField()),
                ("company", models.TextField(default="Unknown")),
                ("location", models.TextField(blank=True, default="")),
                ("description", models.TextField(blank=True, default="")),
                ("job_type", models.TextField(blank=True, default="")),
                ("published_date", models.DateTimeField(blank=True, null=True)),
                (
                    "url",
                    models.TextField(blank=True, default="", verbose_name="Source URL"),
                ),
                ("source", models.CharField(blank=True, default="", max_length=255)),
                (
                    "category",
                    models.CharField(
                        blank=True, db_index=True, default="", max_length=255
                    ),
                ),
                ("salary", models.TextField(blank=True, default="")),
            ],
            options={
                "ordering": ["-published_date"],
            },
        ),
        migrations.CreateModel(
            name="ImportLog",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("created", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("modified", models.DateTimeField(auto_now=True)),
                (
                    "import_id",
                    models.UUIDField(default=uuid.uuid4, editable=False, unique=True),
                ),
                ("feed_url", models.URLField(max_length=2048)),
                ("category", models.CharField(blank=True, default="", max_length=255)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("processing", "Processing"),
                            ("completed", "Completed"),
                            ("failed", "Failed"),
                        ],
                        db_index=True,
                        default="pending",
                        max_length=20,
                    ),
                ),
                ("total_fetched", models.PositiveIntegerField(default=0)),
                ("new_jobs", models.PositiveIntegerField(default=0)),
                ("updated_jobs", models.PositiveIntegerField(default=0)),
                ("failed_count", models.PositiveIntegerField(default=0)),
                (
                    "failed_jobs",
                    models.JSONField(
                        blank=True,
                        default=list,
                        encoder=django.core.serializers.json.DjangoJSONEncoder,
                        help_text=(
                            "Feed items rejected by validation, as item_id/reason "
                            "pairs"
                        ),
                    ),
                ),
                (
                    "error",
                    models.TextField(
                        blank=True,
                        default="",
                        help_text="Message of the error which stopped the import, "
                        "if any",
                    ),
                ),
                (
                    "logs",
                    models.JSONField(
                        blank=True,
                        default=list,
                        encoder=django.core.serializers.json.DjangoJSONEncoder,
                        help_text="Narrative notes appended while the import ran",
                    ),
                ),
                (
                    "deliveries",
                    models.PositiveIntegerField(
                        default=0,
                        help_text="Number of times a worker picked up this import",
                    ),
                ),
                (
                    "started_at",
                    models.DateTimeField(
                        blank=True,
                        help_text=(
                            "Time when a worker first started processing this "
                            "import"
                        ),
                        null=True,
                    ),
                ),
                (
                    "completed_at",
                    models.DateTimeField(
                        blank=True,
                        help_text="Time when the import reached completed or failed",
                        null=True,
                    ),
                ),
            ],
            options={
                "ordering": ["-created"],
            },
        ),
    ]
