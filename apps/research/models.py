from __future__ import annotations

from django.db import models


class JobStatus(models.TextChoices):
    QUEUED = "queued", "Queued"
    PROCESSING = "processing", "Processing"
    COMPLETED = "completed", "Completed"
    FAILED = "failed", "Failed"


TERMINAL_STATUSES = (JobStatus.COMPLETED, JobStatus.FAILED)


class ResearchInterestJob(models.Model):
    job_id = models.CharField(max_length=64, unique=True)
    term = models.CharField(max_length=500)
    status = models.CharField(
        max_length=20,
        choices=JobStatus.choices,
        default=JobStatus.QUEUED,
        db_index=True,
    )
    vector_x = models.FloatField(null=True, blank=True)
    vector_y = models.FloatField(null=True, blank=True)
    embedding = models.BinaryField(null=True, blank=True)
    embedding_dim = models.PositiveIntegerField(null=True, blank=True)
    concepts_json = models.TextField(blank=True, default="[]")
    error_message = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-updated_at", "-id"]
        constraints = [
            models.CheckConstraint(
                condition=~models.Q(status=JobStatus.COMPLETED)
                | (models.Q(vector_x__isnull=False) & models.Q(vector_y__isnull=False)),
                name="ri_job_completed_has_vector",
            )
        ]
        indexes = [
            models.Index(fields=["status", "term"], name="ri_job_status_term_idx"),
            models.Index(fields=["status", "updated_at"], name="ri_job_status_ts_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.job_id} {self.status} {self.term!r}"
