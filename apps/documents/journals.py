"""Journal taxonomy read from a YAML file.

Expected layout::

    domains:
      computer_science:
        label: Computer Science
        journals: [Nature Machine Intelligence, ...]
        subdomains:
          ai:
            label: Artificial Intelligence
            journals: [...]

Journal entries may be plain strings or mappings with a ``name`` key.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)


class JournalTaxonomyError(Exception):
    """Raised when the taxonomy file exists but cannot be read or parsed."""


def load_journal_taxonomy(path: str | Path) -> list[dict[str, Any]]:
    taxonomy_path = Path(path)
    if not taxonomy_path.is_file():
        logger.warning("Journal taxonomy file not found at %s", taxonomy_path)
        return []

    try:
        with open(taxonomy_path, encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise JournalTaxonomyError(f"Could not load journal taxonomy: {exc}") from exc

    domains = data.get("domains") if isinstance(data, dict) else None
    if not isinstance(domains, dict):
        return []

    return _sorted_nodes(domains)


def _sorted_nodes(nodes: dict[Any, Any]) -> list[dict[str, Any]]:
    built = [_build_node(key, node) for key, node in nodes.items()]
    return sorted(built, key=lambda item: item["label"].lower())


def _build_node(key: Any, node: Any) -> dict[str, Any]:
    if not isinstance(node, dict):
        node = {}

    subdomains = node.get("subdomains")
    return {
        "key": str(key),
        "label": str(node.get("label") or key),
        "journals": _journal_names(node.get("journals")),
        "subdomains": _sorted_nodes(subdomains) if isinstance(subdomains, dict) else [],
    }


def _journal_names(raw: Any) -> list[str]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raw = [raw]

    names: set[str] = set()
    for entry in raw:
        name = entry.get("name") if isinstance(entry, dict) else entry
        if name is None:
            continue
        text = str(name).strip()
        if text:
            names.add(text)
    return sorted(names)
