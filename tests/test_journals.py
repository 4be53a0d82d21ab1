from __future__ import annotations

from django.test import override_settings

from apps.documents.journals import load_journal_taxonomy


def test_journals_endpoint_returns_sorted_taxonomy(client) -> None:
    response = client.get("/api/v1/journals")

    assert response.status_code == 200
    domains = response.json()["data"]["domains"]
    assert domains == [
        {
            "key": "cs",
            "label": "computer science",
            "journals": ["Machine Learning", "Nature Machine Intelligence"],
            "subdomains": [
                {"key": "ai", "label": "AI", "journals": [], "subdomains": []},
                {
                    "key": "theory",
                    "label": "Theory",
                    "journals": ["Journal of the ACM"],
                    "subdomains": [],
                },
            ],
        },
        {
            "key": "physics",
            "label": "Physics",
            "journals": ["Astrophysical Journal", "Physical Review Letters"],
            "subdomains": [],
        },
    ]


def test_journals_endpoint_returns_empty_list_when_file_missing(client, tmp_path) -> None:
    with override_settings(JOURNALS_TAXONOMY_PATH=tmp_path / "missing.yml"):
        response = client.get("/api/v1/journals")

    assert response.status_code == 200
    assert response.json()["data"] == {"domains": []}


def test_journals_endpoint_reports_unparseable_file(client, tmp_path) -> None:
    broken = tmp_path / "journals.yml"
    broken.write_text("domains: [unclosed", encoding="utf-8")

    with override_settings(JOURNALS_TAXONOMY_PATH=broken):
        response = client.get("/api/v1/journals")

    assert response.status_code == 500


def test_loader_uses_key_when_label_missing(tmp_path) -> None:
    path = tmp_path / "journals.yml"
    path.write_text("domains:\n  biology:\n    journals: Cell\n", encoding="utf-8")

    assert load_journal_taxonomy(path) == [
        {"key": "biology", "label": "biology", "journals": ["Cell"], "subdomains": []}
    ]


def test_loader_ignores_documents_without_domains(tmp_path) -> None:
    path = tmp_path / "journals.yml"
    path.write_text("- just\n- a list\n", encoding="utf-8")

    assert load_journal_taxonomy(path) == []
