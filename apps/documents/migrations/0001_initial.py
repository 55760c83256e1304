import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="DocumentBatch",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                (
                    "ref_key",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Key returned to the caller inside the DataRef.",
                        unique=True,
                    ),
                ),
                (
                    "source",
                    models.CharField(
                        blank=True,
                        db_index=True,
                        default="",
                        help_text="Source tag of the documents (e.g., 'pagerduty').",
                        max_length=50,
                    ),
                ),
                ("document_count", models.PositiveIntegerField(default=0)),
                (
                    "documents",
                    models.JSONField(
                        blank=True,
                        default=list,
                        help_text="Serialized documents in the order they were stored.",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
            ],
            options={
                "verbose_name": "Document batch",
                "verbose_name_plural": "Document batches",
                "ordering": ["-created_at"],
            },
        ),
    ]
