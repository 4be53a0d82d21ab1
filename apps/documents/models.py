from __future__ import annotations

from django.db import models


class Paper(models.Model):
    origin_id = models.CharField(max_length=128, unique=True)
    title = models.CharField(max_length=500)
    summary = models.TextField(blank=True, default="")
    short_summary = models.TextField(blank=True, default="")
    journal = models.CharField(max_length=255, db_index=True)
    published = models.DateTimeField(null=True, blank=True, db_index=True)
    authors = models.JSONField(default=list, blank=True)
    links = models.JSONField(default=list, blank=True)
    concepts = models.JSONField(default=list, blank=True)
    embedding = models.JSONField(default=list, blank=True)
    two_dim_embedding = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-published", "id"]
        indexes = [
            models.Index(fields=["journal", "published"], name="paper_journal_pub_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.title} ({self.origin_id})"

    @property
    def pdf_url(self) -> str | None:
        return self._link_href("application/pdf")

    @property
    def html_url(self) -> str | None:
        return self._link_href("text/html")

    def _link_href(self, content_type: str) -> str | None:
        if not isinstance(self.links, list):
            return None
        for link in self.links:
            if isinstance(link, dict) and link.get("type") == content_type:
                href = link.get("href")
                if isinstance(href, str) and href.strip():
                    return href.strip()
        return None
