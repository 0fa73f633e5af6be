from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping, Sequence

from ..config.loader import LintConfig
from ..document.model import Document

_CHECK_ID_PATTERN = re.compile(r"^(?P<domain>[a-z]+)\.[a-z][a-z0-9_]*$")
_DOMAIN_VOCAB = frozenset({"frontmatter", "content", "collection"})


class Severity(str, Enum):
    ERROR = "error"
    WARN = "warn"

    def __str__(self) -> str:
        return self.value


class Scope(str, Enum):
    DOCUMENT = "document"
    COLLECTION = "collection"

    def __str__(self) -> str:
        return self.value


class CheckStatus(str, Enum):
    PASS = "pass"
    FAIL = "fail"
    WARN = "warn"
    SKIP = "skip"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Violation:
    check_id: str
    message: str
    path: str = ""
    line: int = 0
    severity: Severity = Severity.ERROR
    hint: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "message", str(self.message).strip())
        object.__setattr__(self, "path", str(self.path).strip())
        object.__setattr__(self, "line", int(self.line or 0))

    @property
    def canonical_key(self) -> tuple[str, int, str, str]:
        return (self.path, self.line, self.check_id, self.message)

    def as_dict(self) -> dict[str, Any]:
        return {
            "check_id": self.check_id,
            "message": self.message,
            "path": self.path,
            "line": self.line,
            "severity": str(self.severity),
            "hint": self.hint,
        }


Finding = tuple[int, str]
CollectionFinding = tuple[str, int, str]
DocumentCheckFn = Callable[[Document, LintConfig], list[Finding]]
CollectionCheckFn = Callable[[Sequence[Document], LintConfig], list[CollectionFinding]]


@dataclass(frozen=True)
class CheckDef:
    check_id: str
    description: str
    fn: DocumentCheckFn | CollectionCheckFn
    scope: Scope = Scope.DOCUMENT
    severity: Severity = Severity.ERROR
    fix_hint: str = "Fix the reported front matter and rerun `postlint check`."
    enabled_by_default: bool = True
    skip_unparsed: bool = True
    skip_without_front_matter: bool = True

    def __post_init__(self) -> None:
        match = _CHECK_ID_PATTERN.fullmatch(self.check_id)
        if not match:
            raise ValueError(f"invalid check id `{self.check_id}`: expected <domain>.<snake_name>")
        if match.group("domain") not in _DOMAIN_VOCAB:
            raise ValueError(f"invalid check id `{self.check_id}`: domain must be one of {sorted(_DOMAIN_VOCAB)}")

    @property
    def domain(self) -> str:
        return self.check_id.split(".", 1)[0]

    def violation(self, message: str, *, path: str = "", line: int = 0, hint: str | None = None) -> Violation:
        return Violation(
            check_id=self.check_id,
            message=message,
            path=path,
            line=line,
            severity=self.severity,
            hint=self.fix_hint if hint is None else hint,
        )


@dataclass(frozen=True)
class CheckResult:
    check: CheckDef
    status: CheckStatus
    duration_ms: int
    violations: tuple[Violation, ...] = ()

    @property
    def id(self) -> str:
        return self.check.check_id


@dataclass(frozen=True)
class CheckRunReport:
    results: tuple[CheckResult, ...]
    documents: int
    status: CheckStatus
    strict: bool = False
    summary: Mapping[str, int] = field(default_factory=dict)
    paths: tuple[str, ...] = ()

    @property
    def violations(self) -> tuple[Violation, ...]:
        rows = [item for result in self.results for item in result.violations]
        return tuple(sorted(rows, key=lambda item: item.canonical_key))
