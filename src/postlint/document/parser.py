from __future__ import annotations

import json
import re
import tomllib
from pathlib import Path
from typing import Any

import yaml

from ..core.errors import FrontMatterError, ScriptError
from ..core.fs import read_text
from .model import Document, EMPTY_FRONT_MATTER, FrontMatter, FrontMatterFormat, SourceFormat
from .values import coerce_bool

BOM = "\ufeff"

_YAML_OPEN = "---"
_YAML_CLOSE = frozenset({"---", "..."})
_TOML_FENCE = "+++"

_YAML_KEY_RE = re.compile(r"""^(?:"(?P<dq>[^"]+)"|'(?P<sq>[^']+)'|(?P<bare>[^\s#:'"\-?][^:#]*?))\s*:(?:\s|$)""")
_TOML_KEY_RE = re.compile(r"""^\s*(?:"(?P<dq>[^"]+)"|'(?P<sq>[^']+)'|(?P<bare>[A-Za-z0-9_-]+))\s*=""")
_TOML_TABLE_RE = re.compile(r"^\s*\[")
_TOML_ERROR_LINE_RE = re.compile(r"at line (\d+)")

_ORG_KEYWORD_RE = re.compile(r"^#\+(?P<key>[A-Za-z0-9_-]+):[ \t]*(?P<value>.*?)[ \t]*$")
_ORG_LIST_KEYS = frozenset({"tags", "categories", "aliases", "keywords"})
_ORG_KEY_ALIASES = {
    "filetags": "tags",
    "hugo_tags": "tags",
    "hugo_categories": "categories",
    "hugo_aliases": "aliases",
    "hugo_draft": "draft",
    "hugo_layout": "layout",
    "hugo_slug": "slug",
}
_ORG_BOOL_KEYS = frozenset({"draft", "toc", "math", "comments"})
_ORG_INT_RE = re.compile(r"^[+-]?\d+$")
_ORG_INT_KEYS = frozenset({"weight"})


def _strip_eol(line: str) -> str:
    return line.rstrip("\r\n")


def detect_format(text: str, source_format: SourceFormat) -> FrontMatterFormat:
    if source_format is SourceFormat.ORG:
        for line in text.splitlines():
            stripped = line.strip()
            if not stripped or stripped == "#" or stripped.startswith("# "):
                continue
            return FrontMatterFormat.ORG if _ORG_KEYWORD_RE.match(stripped) else FrontMatterFormat.NONE
        return FrontMatterFormat.NONE
    first = _strip_eol(text.split("\n", 1)[0]).rstrip()
    if first == _YAML_OPEN:
        return FrontMatterFormat.YAML
    if first == _TOML_FENCE:
        return FrontMatterFormat.TOML
    if text.startswith("{"):
        return FrontMatterFormat.JSON
    return FrontMatterFormat.NONE


def split_front_matter(text: str, source_format: SourceFormat) -> tuple[FrontMatter, str]:
    fmt = detect_format(text, source_format)
    if fmt is FrontMatterFormat.NONE:
        return EMPTY_FRONT_MATTER, text
    if fmt is FrontMatterFormat.ORG:
        return _split_org(text)
    if fmt is FrontMatterFormat.JSON:
        return _split_json(text)
    return _split_fenced(text, fmt)


def _split_fenced(text: str, fmt: FrontMatterFormat) -> tuple[FrontMatter, str]:
    lines = text.splitlines(keepends=True)
    closers = _YAML_CLOSE if fmt is FrontMatterFormat.YAML else frozenset({_TOML_FENCE})
    end = None
    for idx in range(1, len(lines)):
        if _strip_eol(lines[idx]).rstrip() in closers:
            end = idx
            break
    if end is None:
        fence = _YAML_OPEN if fmt is FrontMatterFormat.YAML else _TOML_FENCE
        raise FrontMatterError(f"unterminated {fmt} front matter: missing closing `{fence}`", 1)
    inner = "".join(lines[1:end])
    if fmt is FrontMatterFormat.YAML:
        fields = _load_yaml(inner)
        key_lines, duplicates, repeats = _scan_keys(lines[1:end], _YAML_KEY_RE, stop=None)
    else:
        fields = _load_toml(inner)
        key_lines, duplicates, repeats = _scan_keys(lines[1:end], _TOML_KEY_RE, stop=_TOML_TABLE_RE)
    front_matter = FrontMatter(
        format=fmt,
        fields=fields,
        raw="".join(lines[: end + 1]),
        start_line=1,
        end_line=end + 1,
        duplicate_keys=duplicates,
        repeat_lines=repeats,
        key_lines=key_lines,
    )
    return front_matter, "".join(lines[end + 1 :])


class _FrontMatterLoader(yaml.SafeLoader):
    pass


def _construct_timestamp(loader: _FrontMatterLoader, node: yaml.ScalarNode) -> Any:
    try:
        return loader.construct_yaml_timestamp(node)
    except ValueError:
        return loader.construct_scalar(node)


_FrontMatterLoader.add_constructor("tag:yaml.org,2002:timestamp", _construct_timestamp)


def _load_yaml(inner: str) -> dict[str, Any]:
    try:
        payload = yaml.load(inner, Loader=_FrontMatterLoader)  # noqa: S506
    except yaml.YAMLError as exc:
        mark = getattr(exc, "problem_mark", None) or getattr(exc, "context_mark", None)
        line = mark.line + 2 if mark is not None else 1
        problem = getattr(exc, "problem", None) or str(exc).splitlines()[0]
        raise FrontMatterError(f"invalid yaml front matter: {problem}", line) from exc
    except (TypeError, ValueError) as exc:
        # explicit tags such as `!!int abc` fail inside the constructors
        raise FrontMatterError(f"invalid yaml front matter: {exc}", 2) from exc
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise FrontMatterError(f"front matter must be a mapping, got {type(payload).__name__}", 2)
    return {str(key): value for key, value in payload.items()}


def _load_toml(inner: str) -> dict[str, Any]:
    try:
        return tomllib.loads(inner)
    except tomllib.TOMLDecodeError as exc:
        match = _TOML_ERROR_LINE_RE.search(str(exc))
        line = int(match.group(1)) + 1 if match else 1
        raise FrontMatterError(f"invalid toml front matter: {exc}", line) from exc


def _scan_keys(
    lines: list[str],
    key_re: re.Pattern[str],
    stop: re.Pattern[str] | None,
) -> tuple[dict[str, int], tuple[str, ...], tuple[tuple[str, int], ...]]:
    key_lines: dict[str, int] = {}
    duplicates: list[str] = []
    repeats: list[tuple[str, int]] = []
    for offset, raw in enumerate(lines):
        line = _strip_eol(raw)
        if stop is not None and stop.match(line):
            break
        match = key_re.match(line)
        if not match:
            continue
        key = (match.group("dq") or match.group("sq") or match.group("bare") or "").strip()
        if not key:
            continue
        if key in key_lines:
            if key not in duplicates:
                duplicates.append(key)
            repeats.append((key, offset + 2))
            continue
        key_lines[key] = offset + 2
    return key_lines, tuple(duplicates), tuple(repeats)


def _split_json(text: str) -> tuple[FrontMatter, str]:
    decoder = json.JSONDecoder()
    try:
        payload, end = decoder.raw_decode(text)
    except json.JSONDecodeError as exc:
        raise FrontMatterError(f"invalid json front matter: {exc.msg}", exc.lineno) from exc
    if text.startswith("\r\n", end):
        end += 2
    elif text.startswith("\n", end):
        end += 1
    raw = text[:end]
    end_line = raw.count("\n") if raw.endswith("\n") else raw.count("\n") + 1
    key_lines: dict[str, int] = {}
    for idx, line in enumerate(raw.splitlines(), start=1):
        for key in payload:
            if key not in key_lines and f'"{key}"' in line:
                key_lines[key] = idx
    front_matter = FrontMatter(
        format=FrontMatterFormat.JSON,
        fields=dict(payload),
        raw=raw,
        start_line=1,
        end_line=end_line,
        key_lines=key_lines,
    )
    return front_matter, text[end:]


def _org_values(key: str, value: str) -> list[str]:
    if key == "filetags":
        return [item for item in value.split(":") if item.strip()]
    return value.split()


def _split_org(text: str) -> tuple[FrontMatter, str]:
    lines = text.splitlines(keepends=True)
    last_keyword = -1
    fields: dict[str, Any] = {}
    key_lines: dict[str, int] = {}
    duplicates: list[str] = []
    repeats: list[tuple[str, int]] = []
    for idx, raw in enumerate(lines):
        stripped = _strip_eol(raw).strip()
        if not stripped or stripped == "#" or stripped.startswith("# "):
            continue
        match = _ORG_KEYWORD_RE.match(stripped)
        if not match:
            break
        last_keyword = idx
        source_key = match.group("key").lower()
        key = _ORG_KEY_ALIASES.get(source_key, source_key)
        value = (match.group("value") or "").strip()
        key_lines.setdefault(key, idx + 1)
        if key in _ORG_LIST_KEYS:
            bucket = fields.setdefault(key, [])
            bucket.extend(_org_values(source_key, value))
            continue
        if key in fields:
            if key not in duplicates:
                duplicates.append(key)
            repeats.append((key, idx + 1))
        if key in _ORG_BOOL_KEYS:
            coerced = coerce_bool(value)
            fields[key] = value if coerced is None else coerced
            continue
        if key in _ORG_INT_KEYS and _ORG_INT_RE.match(value):
            fields[key] = int(value)
            continue
        fields[key] = value
    front_matter = FrontMatter(
        format=FrontMatterFormat.ORG,
        fields=fields,
        raw="".join(lines[: last_keyword + 1]),
        start_line=1,
        end_line=last_keyword + 1,
        duplicate_keys=tuple(duplicates),
        repeat_lines=tuple(repeats),
        key_lines=key_lines,
    )
    return front_matter, "".join(lines[last_keyword + 1 :])


def relative_name(path: Path, root: Path | None) -> str:
    if root is not None:
        try:
            return path.resolve().relative_to(root.resolve()).as_posix()
        except ValueError:
            pass
    return path.as_posix()


def parse_text(text: str, path: Path, rel_path: str | None = None) -> Document:
    bom = text.startswith(BOM)
    if bom:
        text = text[len(BOM) :]
    source_format = SourceFormat.from_path(path)
    rel = rel_path or path.as_posix()
    try:
        front_matter, body = split_front_matter(text, source_format)
    except FrontMatterError as exc:
        failed = FrontMatter(format=detect_format(text, source_format), start_line=1, end_line=0)
        return Document(path=path, rel_path=rel, source_format=source_format, front_matter=failed, body=text, bom=bom, error=exc)
    return Document(path=path, rel_path=rel, source_format=source_format, front_matter=front_matter, body=body, bom=bom)


def parse_document(path: Path, root: Path | None = None) -> Document:
    rel = relative_name(path, root)
    try:
        text = read_text(path)
    except ScriptError as exc:
        cause = exc.__cause__
        if exc.kind != "decode_error" or not isinstance(cause, UnicodeDecodeError):
            raise
        error = FrontMatterError(f"file is not valid UTF-8 ({cause.reason} at byte {cause.start})", 1)
        return Document(
            path=path,
            rel_path=rel,
            source_format=SourceFormat.from_path(path),
            front_matter=FrontMatter(format=FrontMatterFormat.NONE, start_line=1, end_line=0),
            body="",
            error=error,
        )
    return parse_text(text, path, rel)
