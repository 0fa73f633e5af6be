from __future__ import annotations

from .model import CheckDef, CheckResult, CheckRunReport, CheckStatus, Scope, Severity, Violation
from .registry import check_ids, get_check, list_checks
from .runner import run_checks, select_checks

__all__ = [
    "CheckDef",
    "CheckResult",
    "CheckRunReport",
    "CheckStatus",
    "Scope",
    "Severity",
    "Violation",
    "check_ids",
    "get_check",
    "list_checks",
    "run_checks",
    "select_checks",
]
