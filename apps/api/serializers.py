from __future__ import annotations

from typing import Any

from rest_framework import serializers


class RawValueField(serializers.Field):
    """Passes the submitted value through untouched."""

    def to_internal_value(self, data: Any) -> Any:
        return data

    def to_representation(self, value: Any) -> Any:
        return value


class ResearchInterestSubmitSerializer(serializers.Serializer):
    # Content checks live in apps.research.terms so they report their own error codes.
    term = RawValueField(required=False, allow_null=True, default="")


class CommaSeparatedListField(serializers.ListField):
    """Accepts ``?journals=a&journals=b`` as well as ``?journals=a,b``."""

    child = serializers.CharField(allow_blank=True, trim_whitespace=True)

    def to_internal_value(self, data: Any) -> list[str]:
        if isinstance(data, str):
            data = [data]
        items = super().to_internal_value(data)

        seen: list[str] = []
        for item in items:
            for part in item.split(","):
                name = part.strip()
                if name and name not in seen:
                    seen.append(name)
        return seen


class ListPapersQueryParamsSerializer(serializers.Serializer):
    journals = CommaSeparatedListField(required=False, default=list)
    page = serializers.IntegerField(min_value=1, default=1)
    request_id = serializers.CharField(max_length=64, required=False, allow_blank=True)
    job_id = serializers.CharField(max_length=64, required=False, allow_blank=True)
    top_n = serializers.CharField(required=False, allow_blank=True)
    n = serializers.CharField(required=False, allow_blank=True)
    min_date = serializers.DateField(required=False)
    max_date = serializers.DateField(required=False)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:
        min_date = attrs.get("min_date")
        max_date = attrs.get("max_date")
        if min_date and max_date and min_date > max_date:
            raise serializers.ValidationError("min_date must be on or before max_date.")

        attrs["request_id"] = (attrs.get("request_id") or attrs.get("job_id") or "").strip() or None
        top_n = attrs.get("top_n")
        if top_n is None or not top_n.strip():
            top_n = attrs.get("n")
        attrs["top_n"] = top_n.strip() if top_n and top_n.strip() else None
        attrs.pop("job_id", None)
        attrs.pop("n", None)
        return attrs


class PaperSerializer(serializers.Serializer):
    """Serializes a ``ScoredPaper``; paper fields are read through ``paper``."""

    origin_id = serializers.CharField(source="paper.origin_id")
    title = serializers.CharField(source="paper.title")
    journal = serializers.CharField(source="paper.journal")
    published = serializers.DateTimeField(source="paper.published", allow_null=True)
    summary = serializers.CharField(source="paper.summary")
    short_summary = serializers.CharField(source="paper.short_summary")
    authors = serializers.ListField(source="paper.authors", child=serializers.CharField())
    concepts = serializers.ListField(source="paper.concepts", child=serializers.CharField())
    pdf_url = serializers.CharField(source="paper.pdf_url", allow_null=True)
    html_url = serializers.CharField(source="paper.html_url", allow_null=True)
    two_dim_embedding = serializers.ListField(
        source="paper.two_dim_embedding", child=serializers.FloatField()
    )
    similarity_score = serializers.FloatField(allow_null=True)
