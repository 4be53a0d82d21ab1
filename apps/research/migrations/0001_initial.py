from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies: list = []

    operations = [
        migrations.CreateModel(
            name="ResearchInterestJob",
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
                ("job_id", models.CharField(max_length=64, unique=True)),
                ("term", models.CharField(max_length=500)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("queued", "Queued"),
                            ("processing", "Processing"),
                            ("completed", "Completed"),
                            ("failed", "Failed"),
                        ],
                        db_index=True,
                        default="queued",
                        max_length=20,
                    ),
                ),
                ("vector_x", models.FloatField(blank=True, null=True)),
                ("vector_y", models.FloatField(blank=True, null=True)),
                ("embedding", models.BinaryField(blank=True, null=True)),
                ("embedding_dim", models.PositiveIntegerField(blank=True, null=True)),
                ("concepts_json", models.TextField(blank=True, default="[]")),
                ("error_message", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["-updated_at", "-id"],
                "indexes": [
                    models.Index(fields=["status", "term"], name="ri_job_status_term_idx"),
                    models.Index(fields=["status", "updated_at"], name="ri_job_status_ts_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=~models.Q(status="completed")
                        | (models.Q(vector_x__isnull=False) & models.Q(vector_y__isnull=False)),
                        name="ri_job_completed_has_vector",
                    )
                ],
            },
        ),
    ]
