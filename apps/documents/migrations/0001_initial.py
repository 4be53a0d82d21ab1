from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies: list = []

    operations = [
        migrations.CreateModel(
            name="Paper",
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
                ("origin_id", models.CharField(max_length=128, unique=True)),
                ("title", models.CharField(max_length=500)),
                ("summary", models.TextField(blank=True, default="")),
                ("short_summary", models.TextField(blank=True, default="")),
                ("journal", models.CharField(db_index=True, max_length=255)),
                ("published", models.DateTimeField(blank=True, db_index=True, null=True)),
                ("authors", models.JSONField(blank=True, default=list)),
                ("links", models.JSONField(blank=True, default=list)),
                ("concepts", models.JSONField(blank=True, default=list)),
                ("embedding", models.JSONField(blank=True, default=list)),
                ("two_dim_embedding", models.JSONField(blank=True, default=list)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["-published", "id"],
                "indexes": [
                    models.Index(fields=["journal", "published"], name="paper_journal_pub_idx"),
                ],
            },
        ),
    ]
