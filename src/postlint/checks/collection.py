from __future__ import annotations

import posixpath
from collections import defaultdict
from typing import Sequence

from ..config.loader import LintConfig
from ..document.model import Document
from ..document.values import normalize_title
from .model import CheckDef, CollectionFinding, Scope

_BUNDLE_STEMS = frozenset({"index", "_index"})


def _eligible(documents: Sequence[Document]) -> list[Document]:
    return [doc for doc in documents if doc.parsed and doc.front_matter.present]


def _report_groups(groups: dict[object, list[tuple[Document, int]]], label: str, shown: dict[object, str]) -> list[CollectionFinding]:
    findings: list[CollectionFinding] = []
    for key in sorted(groups, key=str):
        members = groups[key]
        if len(members) < 2:
            continue
        paths = [doc.rel_path for doc, _line in members]
        for doc, line in members:
            others = ", ".join(path for path in paths if path != doc.rel_path)
            findings.append((doc.rel_path, line, f"{label} `{shown[key]}` also used by {others}"))
    return findings


def check_duplicate_titles(documents: Sequence[Document], config: LintConfig) -> list[CollectionFinding]:
    groups: dict[object, list[tuple[Document, int]]] = defaultdict(list)
    shown: dict[object, str] = {}
    for doc in _eligible(documents):
        title = doc.get("title")
        if not isinstance(title, str) or not title.strip():
            continue
        key = normalize_title(title)
        groups[key].append((doc, doc.line_of("title")))
        shown.setdefault(key, " ".join(title.split()))
    return _report_groups(groups, "title", shown)


def page_slug(doc: Document) -> tuple[str, str]:
    directory, filename = posixpath.split(doc.rel_path)
    stem = posixpath.splitext(filename)[0]
    if stem in _BUNDLE_STEMS and directory:
        directory, stem = posixpath.split(directory)
    slug = doc.get("slug")
    if isinstance(slug, str) and slug.strip():
        return directory, slug.strip().casefold()
    return directory, stem.casefold()


def check_duplicate_slugs(documents: Sequence[Document], config: LintConfig) -> list[CollectionFinding]:
    groups: dict[object, list[tuple[Document, int]]] = defaultdict(list)
    shown: dict[object, str] = {}
    for doc in _eligible(documents):
        key = page_slug(doc)
        line = doc.line_of("slug") if doc.has("slug") else doc.front_matter.start_line
        groups[key].append((doc, line))
        shown.setdefault(key, posixpath.join(key[0], key[1]) if key[0] else key[1])
    return _report_groups(groups, "slug", shown)


CHECKS: tuple[CheckDef, ...] = (
    CheckDef(
        "collection.duplicate_titles",
        "require post titles to be unique across the collection",
        check_duplicate_titles,
        scope=Scope.COLLECTION,
        fix_hint="Retitle one of the posts; feeds and archives cannot tell them apart.",
    ),
    CheckDef(
        "collection.duplicate_slugs",
        "require page slugs to be unique within a directory",
        check_duplicate_slugs,
        scope=Scope.COLLECTION,
        fix_hint="Set a distinct `slug` or rename one of the files.",
    ),
)
