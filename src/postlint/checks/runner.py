from __future__ import annotations

import fnmatch
import time
from typing import Iterable, Sequence

from ..config.loader import LintConfig
from ..core.errors import ScriptError
from ..core.exit_codes import ERR_CONFIG, ERR_USAGE
from ..document.model import Document
from .model import CheckDef, CheckResult, CheckRunReport, CheckStatus, Scope, Severity, Violation
from .registry import list_checks

NO_DRAFTS_CHECK = "content.no_drafts"


def _match(patterns: Iterable[str], checks: Sequence[CheckDef], *, code: int, label: str) -> set[str]:
    matched: set[str] = set()
    for pattern in patterns:
        hits = {check.check_id for check in checks if fnmatch.fnmatchcase(check.check_id, pattern)}
        if not hits:
            raise ScriptError(f"unknown check {label} `{pattern}`", code, kind="unknown_check")
        matched.update(hits)
    return matched


def select_checks(
    config: LintConfig,
    select: Sequence[str] = (),
    skip: Sequence[str] = (),
    forbid_drafts: bool = False,
) -> list[CheckDef]:
    checks = list_checks()
    enabled = _match(config.enable, checks, code=ERR_CONFIG, label="in config `enable`")
    disabled = _match(config.disable, checks, code=ERR_CONFIG, label="in config `disable`")
    if select:
        chosen = _match(select, checks, code=ERR_USAGE, label="selector")
    else:
        chosen = {check.check_id for check in checks if check.enabled_by_default}
        chosen |= enabled
        if forbid_drafts or config.forbid_drafts:
            chosen.add(NO_DRAFTS_CHECK)
        chosen -= disabled
    chosen -= _match(skip, checks, code=ERR_USAGE, label="selector")
    return [check for check in checks if check.check_id in chosen]


def _applies(check: CheckDef, doc: Document) -> bool:
    if check.skip_unparsed and not doc.parsed:
        return False
    if check.skip_without_front_matter and not doc.front_matter.present:
        return False
    return True


def _run_one(check: CheckDef, documents: Sequence[Document], config: LintConfig) -> tuple[list[Violation], bool]:
    violations: list[Violation] = []
    if check.scope is Scope.COLLECTION:
        for path, line, message in check.fn(documents, config):
            violations.append(check.violation(message, path=path, line=line))
        return violations, bool(documents)
    applied = False
    for doc in documents:
        if not _applies(check, doc):
            continue
        applied = True
        for line, message in check.fn(doc, config):
            violations.append(check.violation(message, path=doc.rel_path, line=line))
    return violations, applied


def _status(check: CheckDef, violations: list[Violation], applied: bool, strict: bool) -> CheckStatus:
    if not applied:
        return CheckStatus.SKIP
    if not violations:
        return CheckStatus.PASS
    if check.severity is Severity.WARN and not strict:
        return CheckStatus.WARN
    return CheckStatus.FAIL


def run_checks(
    documents: Sequence[Document],
    checks: Sequence[CheckDef],
    config: LintConfig,
    *,
    fail_fast: bool = False,
    strict: bool = False,
) -> CheckRunReport:
    strict = strict or config.strict
    started = time.perf_counter()
    results: list[CheckResult] = []
    for check in checks:
        start = time.perf_counter()
        violations, applied = _run_one(check, documents, config)
        elapsed_ms = int((time.perf_counter() - start) * 1000)
        status = _status(check, violations, applied, strict)
        results.append(
            CheckResult(
                check=check,
                status=status,
                duration_ms=elapsed_ms,
                violations=tuple(sorted(violations, key=lambda item: item.canonical_key)),
            )
        )
        if status is CheckStatus.FAIL and fail_fast:
            break
    counts = {status: sum(1 for result in results if result.status is status) for status in CheckStatus}
    summary = {
        "passed": counts[CheckStatus.PASS],
        "failed": counts[CheckStatus.FAIL],
        "warned": counts[CheckStatus.WARN],
        "skipped": counts[CheckStatus.SKIP],
        "total": len(results),
        "documents": len(documents),
        "violations": sum(len(result.violations) for result in results),
        "duration_ms": int((time.perf_counter() - started) * 1000),
    }
    overall = CheckStatus.FAIL if counts[CheckStatus.FAIL] else CheckStatus.PASS
    return CheckRunReport(
        results=tuple(results),
        documents=len(documents),
        status=overall,
        strict=strict,
        summary=summary,
        paths=tuple(sorted(doc.rel_path for doc in documents)),
    )
