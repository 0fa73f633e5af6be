"""Configuration loading for postlint.

Precedence, lowest first: built-in defaults, the discovered `postlint.toml` or
`[tool.postlint]` table in `pyproject.toml`, an explicit `--config` file, then
`POSTLINT_*` environment variables.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from ..contracts.ids import CONFIG
from ..contracts.validate import load_schema, schema_errors
from ..core.env import getenv, normalize_config_key, prefixed_env
from ..core.errors import ScriptError
from ..core.exit_codes import ERR_CONFIG

CONFIG_FILENAME = "postlint.toml"
CONFIG_PATH_ENV = "POSTLINT_CONFIG"

DEFAULTS: dict[str, Any] = {
    "content_dirs": ["."],
    "include": ["*.md", "*.markdown", "*.org"],
    "exclude": [],
    "required_fields": ["title", "date"],
    "known_fields": [],
    "allowed_layouts": [],
    "enable": [],
    "disable": [],
    "forbid_drafts": False,
    "strict": False,
}

_LIST_KEYS = frozenset(
    {"content_dirs", "include", "exclude", "required_fields", "known_fields", "allowed_layouts", "enable", "disable"}
)
_BOOL_KEYS = frozenset({"forbid_drafts", "strict"})
_STR_KEYS = frozenset({"schema"})
_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off", ""})


@dataclass(frozen=True)
class LintConfig:
    base_dir: Path
    source: str
    content_dirs: tuple[str, ...]
    include: tuple[str, ...]
    exclude: tuple[str, ...]
    required_fields: tuple[str, ...]
    known_fields: tuple[str, ...]
    allowed_layouts: tuple[str, ...]
    enable: tuple[str, ...]
    disable: tuple[str, ...]
    forbid_drafts: bool
    strict: bool
    schema: Path | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, base_dir: Path, source: str = "defaults") -> "LintConfig":
        merged = {**DEFAULTS, **dict(data)}
        _validate(merged, source)
        schema_raw = merged.get("schema")
        schema = None
        if schema_raw:
            schema_candidate = Path(schema_raw)
            schema = schema_candidate if schema_candidate.is_absolute() else (base_dir / schema_candidate).resolve()
        return cls(
            base_dir=base_dir.resolve(),
            source=source,
            content_dirs=tuple(merged["content_dirs"]),
            include=tuple(merged["include"]),
            exclude=tuple(merged["exclude"]),
            required_fields=tuple(merged["required_fields"]),
            known_fields=tuple(merged["known_fields"]),
            allowed_layouts=tuple(merged["allowed_layouts"]),
            enable=tuple(merged["enable"]),
            disable=tuple(merged["disable"]),
            forbid_drafts=bool(merged["forbid_drafts"]),
            strict=bool(merged["strict"]),
            schema=schema,
        )

    def content_roots(self) -> list[Path]:
        return [(self.base_dir / item).resolve() for item in self.content_dirs]

    def as_dict(self) -> dict[str, object]:
        return {
            "base_dir": str(self.base_dir),
            "source": self.source,
            "content_dirs": list(self.content_dirs),
            "include": list(self.include),
            "exclude": list(self.exclude),
            "required_fields": list(self.required_fields),
            "known_fields": list(self.known_fields),
            "allowed_layouts": list(self.allowed_layouts),
            "enable": list(self.enable),
            "disable": list(self.disable),
            "forbid_drafts": self.forbid_drafts,
            "strict": self.strict,
            "schema": str(self.schema) if self.schema else None,
        }


def _validate(data: Mapping[str, Any], source: str) -> None:
    errors = schema_errors(load_schema(CONFIG), dict(data))
    if errors:
        pointer, message = errors[0]
        raise ScriptError(f"invalid config ({source}) at {pointer}: {message}", ERR_CONFIG, kind="invalid_config")


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ScriptError(f"config file not found: {path}", ERR_CONFIG, kind="missing_config") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ScriptError(f"config file is not valid TOML: {path}: {exc}", ERR_CONFIG, kind="invalid_config") from exc


def _table_from_file(path: Path) -> dict[str, Any]:
    payload = _read_toml(path)
    if path.name == "pyproject.toml":
        table = payload.get("tool", {}).get("postlint", {})
        if not isinstance(table, dict):
            raise ScriptError(f"[tool.postlint] must be a table in {path}", ERR_CONFIG, kind="invalid_config")
        return table
    return payload


def find_config_file(start: Path) -> Path | None:
    cur = start.resolve()
    if cur.is_file():
        cur = cur.parent
    while True:
        candidate = cur / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        pyproject = cur / "pyproject.toml"
        if pyproject.is_file():
            try:
                payload = tomllib.loads(pyproject.read_text(encoding="utf-8"))
            except tomllib.TOMLDecodeError:
                payload = {}
            if isinstance(payload.get("tool"), dict) and "postlint" in payload["tool"]:
                return pyproject
        if cur.parent == cur:
            return None
        cur = cur.parent


def _coerce_env_value(key: str, raw: str) -> object:
    if key in _LIST_KEYS:
        return [item.strip() for item in raw.split(",") if item.strip()]
    if key in _BOOL_KEYS:
        value = raw.strip().lower()
        if value in _TRUE:
            return True
        if value in _FALSE:
            return False
        raise ScriptError(f"invalid boolean for POSTLINT_{key.upper()}: `{raw}`", ERR_CONFIG, kind="invalid_env")
    return raw.strip()


def env_overrides(env: Mapping[str, str] | None = None) -> dict[str, Any]:
    items = prefixed_env() if env is None else dict(env)
    out: dict[str, Any] = {}
    known = _LIST_KEYS | _BOOL_KEYS | _STR_KEYS
    for raw_key, raw_value in sorted(items.items()):
        try:
            normalized = normalize_config_key(raw_key)
        except ValueError as exc:
            raise ScriptError(str(exc), ERR_CONFIG, kind="invalid_env") from exc
        if normalized == "CONFIG":
            continue
        key = normalized.lower()
        if key not in known:
            raise ScriptError(f"unknown config environment variable: POSTLINT_{normalized}", ERR_CONFIG, kind="invalid_env")
        out[key] = _coerce_env_value(key, raw_value)
    return out


def _rebase_paths(table: dict[str, Any], directory: Path) -> dict[str, Any]:
    out = dict(table)
    dirs = out.get("content_dirs")
    if isinstance(dirs, list):
        out["content_dirs"] = [str((directory / item).resolve()) if isinstance(item, str) and item else item for item in dirs]
    schema = out.get("schema")
    if isinstance(schema, str) and schema:
        out["schema"] = str((directory / schema).resolve())
    return out


def load_config(
    cwd: Path,
    explicit: str | Path | None = None,
    env: Mapping[str, str] | None = None,
) -> LintConfig:
    explicit = explicit or getenv(CONFIG_PATH_ENV)
    data: dict[str, Any] = {}
    base_dir = cwd.resolve()
    sources: list[str] = []
    found = find_config_file(cwd)
    if explicit:
        path = Path(explicit)
        path = path if path.is_absolute() else (cwd / path)
        if found is not None and found != path.resolve():
            # discovered paths stay relative to their own file
            data.update(_rebase_paths(_table_from_file(found), found.parent))
            sources.append(str(found))
        data.update(_table_from_file(path))
        base_dir = path.resolve().parent
        sources.append(str(path))
    elif found is not None:
        data.update(_table_from_file(found))
        base_dir = found.parent
        sources.append(str(found))
    source = "+".join(sources) or "defaults"
    overrides = env_overrides(env)
    if overrides:
        data.update(overrides)
        source = f"{source}+env"
    return LintConfig.from_mapping(data, base_dir=base_dir, source=source)
