from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from ..core.errors import FrontMatterError

MARKDOWN_SUFFIXES = frozenset({".md", ".markdown"})
ORG_SUFFIXES = frozenset({".org"})


class SourceFormat(str, Enum):
    MARKDOWN = "markdown"
    ORG = "org"

    @classmethod
    def from_path(cls, path: Path) -> "SourceFormat":
        suffix = path.suffix.lower()
        if suffix in ORG_SUFFIXES:
            return cls.ORG
        return cls.MARKDOWN

    def __str__(self) -> str:
        return self.value


class FrontMatterFormat(str, Enum):
    YAML = "yaml"
    TOML = "toml"
    JSON = "json"
    ORG = "org"
    NONE = "none"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class FrontMatter:
    format: FrontMatterFormat
    fields: dict[str, Any] = field(default_factory=dict)
    raw: str = ""
    start_line: int = 0
    end_line: int = 0
    duplicate_keys: tuple[str, ...] = ()
    repeat_lines: tuple[tuple[str, int], ...] = ()
    key_lines: dict[str, int] = field(default_factory=dict)

    @property
    def present(self) -> bool:
        return self.format is not FrontMatterFormat.NONE

    def line_of(self, key: str) -> int:
        return self.key_lines.get(key, self.start_line)


EMPTY_FRONT_MATTER = FrontMatter(FrontMatterFormat.NONE)


@dataclass(frozen=True)
class Document:
    path: Path
    rel_path: str
    source_format: SourceFormat
    front_matter: FrontMatter
    body: str
    bom: bool = False
    error: FrontMatterError | None = None

    @property
    def fields(self) -> dict[str, Any]:
        return self.front_matter.fields

    @property
    def parsed(self) -> bool:
        return self.error is None

    @property
    def body_start_line(self) -> int:
        return self.front_matter.end_line + 1 if self.front_matter.present else 1

    def has(self, key: str) -> bool:
        return self._key(key) is not None

    def get(self, key: str, default: Any = None) -> Any:
        actual = self._key(key)
        if actual is None:
            return default
        return self.fields[actual]

    def line_of(self, key: str) -> int:
        actual = self._key(key)
        if actual is None:
            return self.front_matter.start_line
        return self.front_matter.line_of(actual)

    def _key(self, key: str) -> str | None:
        if key in self.fields:
            return key
        if self.source_format is SourceFormat.ORG:
            lowered = key.lower()
            for candidate in self.fields:
                if candidate.lower() == lowered:
                    return candidate
        return None

    def text(self) -> str:
        return ("\ufeff" if self.bom else "") + self.front_matter.raw + self.body
