from __future__ import annotations

from collections import Counter
from typing import Any, Sequence

from .contracts.ids import INVENTORY
from .contracts.validate import validate
from .document.model import Document
from .document.values import coerce_bool, coerce_date


def _tags(doc: Document) -> list[str]:
    value = doc.get("tags")
    if not isinstance(value, (list, tuple)):
        return []
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


def build_inventory(documents: Sequence[Document], *, run_id: str = "") -> dict[str, Any]:
    by_source: Counter[str] = Counter()
    by_front_matter: Counter[str] = Counter()
    tags: Counter[str] = Counter()
    years: Counter[str] = Counter()
    drafts: list[str] = []
    undated: list[str] = []
    unparsed: list[str] = []
    for doc in documents:
        by_source[str(doc.source_format)] += 1
        by_front_matter[str(doc.front_matter.format)] += 1
        if not doc.parsed:
            unparsed.append(doc.rel_path)
            continue
        tags.update(_tags(doc))
        published = coerce_date(doc.get("date"))
        if published is None:
            undated.append(doc.rel_path)
        else:
            years[str(published.year)] += 1
        if coerce_bool(doc.get("draft")) is True:
            drafts.append(doc.rel_path)
    payload: dict[str, Any] = {
        "schema_name": INVENTORY,
        "schema_version": 1,
        "tool": "postlint",
        "kind": "inventory",
        "status": "ok",
        "run_id": run_id,
        "documents": len(documents),
        "by_source_format": dict(sorted(by_source.items())),
        "by_front_matter_format": dict(sorted(by_front_matter.items())),
        "tags": dict(sorted(tags.items(), key=lambda item: (-item[1], item[0]))),
        "years": dict(sorted(years.items())),
        "drafts": sorted(drafts),
        "undated": sorted(undated),
        "unparsed": sorted(unparsed),
    }
    return validate(INVENTORY, payload)


def render_inventory_text(payload: dict[str, Any], *, top_tags: int = 15) -> str:
    lines = [f"documents: {payload['documents']}"]
    formats = ", ".join(f"{name}={count}" for name, count in payload["by_front_matter_format"].items())
    sources = ", ".join(f"{name}={count}" for name, count in payload["by_source_format"].items())
    lines.append(f"source formats: {sources or '-'}")
    lines.append(f"front matter formats: {formats or '-'}")
    if payload["years"]:
        lines.append("posts per year:")
        for year, count in payload["years"].items():
            lines.append(f"  {year}: {count}")
    if payload["tags"]:
        lines.append("tags:")
        for tag, count in list(payload["tags"].items())[:top_tags]:
            lines.append(f"  {tag}: {count}")
    for key in ("drafts", "undated", "unparsed"):
        if payload[key]:
            lines.append(f"{key}:")
            lines.extend(f"  - {path}" for path in payload[key])
    return "\n".join(lines)
