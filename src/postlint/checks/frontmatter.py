from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

from ..config.loader import LintConfig
from ..contracts.ids import FRONT_MATTER
from ..contracts.validate import load_schema, schema_errors
from ..core.errors import ScriptError
from ..core.exit_codes import ERR_CONFIG
from ..document.model import Document
from ..document.values import as_day, coerce_bool, coerce_date, to_jsonable
from .model import CheckDef, Finding, Severity

DATE_KEYS = ("date", "publishdate", "pubdate", "lastmod", "updated", "expirydate")
LIST_KEYS = ("tags", "categories")
KNOWN_FIELDS = frozenset(
    {
        "title",
        "date",
        "layout",
        "tags",
        "categories",
        "draft",
        "description",
        "summary",
        "slug",
        "url",
        "aliases",
        "author",
        "authors",
        "keywords",
        "series",
        "weight",
        "toc",
        "math",
        "comments",
        "lastmod",
        "updated",
        "publishdate",
        "pubdate",
        "expirydate",
        "type",
        "permalink",
        "excerpt",
        "image",
        "images",
        "options",
        "startup",
        "language",
        "email",
    }
)


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict)):
        return not value
    return False


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, (list, tuple)):
        return "list"
    return type(value).__name__


def check_present(doc: Document, config: LintConfig) -> list[Finding]:
    if doc.front_matter.present:
        return []
    return [(1, "missing front matter block")]


def check_parses(doc: Document, config: LintConfig) -> list[Finding]:
    if doc.error is None:
        return []
    return [(doc.error.line, doc.error.message)]


def check_required_fields(doc: Document, config: LintConfig) -> list[Finding]:
    findings: list[Finding] = []
    for key in config.required_fields:
        if not doc.has(key):
            findings.append((doc.front_matter.start_line, f"missing required field `{key}`"))
        elif _is_blank(doc.get(key)):
            findings.append((doc.line_of(key), f"required field `{key}` is empty"))
    return findings


def check_title_type(doc: Document, config: LintConfig) -> list[Finding]:
    if not doc.has("title"):
        return []
    value = doc.get("title")
    if value is None and "title" in config.required_fields:
        return []
    if not isinstance(value, str):
        return [(doc.line_of("title"), f"`title` must be a string, got {_type_name(value)}")]
    if not value.strip() and "title" not in config.required_fields:
        return [(doc.line_of("title"), "`title` is empty")]
    return []


def check_date_valid(doc: Document, config: LintConfig) -> list[Finding]:
    findings: list[Finding] = []
    parsed: dict[str, Any] = {}
    for key in DATE_KEYS:
        if not doc.has(key):
            continue
        value = doc.get(key)
        if _is_blank(value):
            if key not in config.required_fields:
                findings.append((doc.line_of(key), f"`{key}` is empty"))
            continue
        coerced = coerce_date(value)
        if coerced is None:
            findings.append((doc.line_of(key), f"`{key}` is not a valid date: {value!r}"))
            continue
        parsed[key] = coerced
    published = parsed.get("date")
    if published is not None:
        for key in ("lastmod", "updated"):
            modified = parsed.get(key)
            if modified is not None and as_day(modified) < as_day(published):
                findings.append((doc.line_of(key), f"`{key}` ({as_day(modified)}) is earlier than `date` ({as_day(published)})"))
    return findings


def check_tags_sequence(doc: Document, config: LintConfig) -> list[Finding]:
    findings: list[Finding] = []
    for key in LIST_KEYS:
        if not doc.has(key):
            continue
        value = doc.get(key)
        line = doc.line_of(key)
        if value is None:
            findings.append((line, f"`{key}` has no value; use a list or remove the key"))
            continue
        if not isinstance(value, (list, tuple)):
            findings.append((line, f"`{key}` must be a sequence of strings, got {_type_name(value)}"))
            continue
        seen: dict[str, str] = {}
        for idx, item in enumerate(value):
            if not isinstance(item, str):
                findings.append((line, f"`{key}[{idx}]` must be a string, got {_type_name(item)}"))
                continue
            if not item.strip():
                findings.append((line, f"`{key}[{idx}]` is empty"))
                continue
            folded = item.strip().casefold()
            if folded in seen:
                findings.append((line, f"`{key}` repeats `{item}`"))
                continue
            seen[folded] = item
    return findings


def check_draft_bool(doc: Document, config: LintConfig) -> list[Finding]:
    if not doc.has("draft"):
        return []
    value = doc.get("draft")
    if coerce_bool(value) is None:
        return [(doc.line_of("draft"), f"`draft` must be a boolean, got {value!r}")]
    return []


def check_layout_allowed(doc: Document, config: LintConfig) -> list[Finding]:
    if not doc.has("layout"):
        return []
    value = doc.get("layout")
    line = doc.line_of("layout")
    if not isinstance(value, str) or not value.strip():
        return [(line, f"`layout` must be a non-empty string, got {value!r}")]
    if config.allowed_layouts and value not in config.allowed_layouts:
        allowed = ", ".join(config.allowed_layouts)
        return [(line, f"`layout` `{value}` is not one of: {allowed}")]
    return []


def check_duplicate_keys(doc: Document, config: LintConfig) -> list[Finding]:
    return [
        (line, f"key `{key}` is defined more than once; the last value wins")
        for key, line in doc.front_matter.repeat_lines
    ]


def check_known_fields(doc: Document, config: LintConfig) -> list[Finding]:
    known = {item.casefold() for item in (config.known_fields or KNOWN_FIELDS)}
    known.update(item.casefold() for item in config.required_fields)
    return [
        (doc.line_of(key), f"unknown field `{key}`")
        for key in doc.fields
        if key.casefold() not in known
    ]


@lru_cache(maxsize=8)
def _user_schema(path: str) -> dict[str, Any]:
    try:
        return json.loads(Path(path).read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ScriptError(f"front matter schema not found: {path}", ERR_CONFIG, kind="missing_schema") from exc
    except json.JSONDecodeError as exc:
        raise ScriptError(f"front matter schema is not valid JSON: {path}: {exc}", ERR_CONFIG, kind="invalid_schema") from exc


def check_schema(doc: Document, config: LintConfig) -> list[Finding]:
    payload = to_jsonable(doc.fields)
    schemas = [load_schema(FRONT_MATTER)]
    if config.schema is not None:
        schemas.append(_user_schema(str(config.schema)))
    findings: list[Finding] = []
    for schema in schemas:
        for pointer, message in schema_errors(schema, payload):
            top = pointer.split("/", 1)[0]
            line = doc.line_of(top) if top != "<root>" else doc.front_matter.start_line
            findings.append((line, f"{pointer}: {message}"))
    return findings


CHECKS: tuple[CheckDef, ...] = (
    CheckDef(
        "frontmatter.present",
        "require a front-matter block at the top of every document",
        check_present,
        fix_hint="Start the file with a `---` YAML block, a `+++` TOML block or `#+TITLE:` Org keywords.",
        skip_without_front_matter=False,
    ),
    CheckDef(
        "frontmatter.parses",
        "require the front-matter block to parse to a mapping",
        check_parses,
        fix_hint="Fix the syntax error at the reported line; check fences and indentation.",
        skip_unparsed=False,
        skip_without_front_matter=False,
    ),
    CheckDef(
        "frontmatter.required_fields",
        "require configured metadata keys to be present and non-empty",
        check_required_fields,
        fix_hint="Add the missing keys or adjust `required_fields` in the postlint config.",
    ),
    CheckDef(
        "frontmatter.title_type",
        "require `title` to be a non-empty string",
        check_title_type,
        fix_hint="Quote the title so it parses as a string.",
    ),
    CheckDef(
        "frontmatter.date_valid",
        "require date keys to hold valid dates and `lastmod` not to precede `date`",
        check_date_valid,
        fix_hint="Use ISO-8601 dates such as 2019-05-03 or 2019-05-03T10:00:00+02:00.",
    ),
    CheckDef(
        "frontmatter.tags_sequence",
        "require `tags` and `categories` to be sequences of unique non-empty strings",
        check_tags_sequence,
        fix_hint="Write tags as a list, for example `tags: [numpy, performance]`.",
    ),
    CheckDef(
        "frontmatter.draft_bool",
        "require `draft` to be a boolean",
        check_draft_bool,
        fix_hint="Use `draft: true` or `draft: false`.",
    ),
    CheckDef(
        "frontmatter.layout_allowed",
        "require `layout` to be a string from the allowed layouts",
        check_layout_allowed,
        fix_hint="Use one of the configured `allowed_layouts`.",
    ),
    CheckDef(
        "frontmatter.duplicate_keys",
        "forbid keys defined more than once in one block",
        check_duplicate_keys,
        fix_hint="Remove the repeated key; only the last value is kept by generators.",
    ),
    CheckDef(
        "frontmatter.known_fields",
        "warn about keys outside the known field vocabulary",
        check_known_fields,
        severity=Severity.WARN,
        fix_hint="Add the key to `known_fields` or fix its spelling.",
        enabled_by_default=False,
    ),
    CheckDef(
        "frontmatter.schema",
        "validate field shapes against the bundled and configured JSON Schemas",
        check_schema,
        fix_hint="Match the field types declared in the front matter schema.",
    ),
)
