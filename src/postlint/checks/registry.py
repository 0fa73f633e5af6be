from __future__ import annotations

from .collection import CHECKS as COLLECTION_CHECKS
from .content import CHECKS as CONTENT_CHECKS
from .frontmatter import CHECKS as FRONTMATTER_CHECKS
from .model import CheckDef

CHECKS: tuple[CheckDef, ...] = (*FRONTMATTER_CHECKS, *CONTENT_CHECKS, *COLLECTION_CHECKS)


def _validate_unique(checks: tuple[CheckDef, ...]) -> None:
    seen: set[str] = set()
    for check in checks:
        if check.check_id in seen:
            raise ValueError(f"duplicate check id registered: {check.check_id}")
        seen.add(check.check_id)


_validate_unique(CHECKS)


def list_checks() -> list[CheckDef]:
    return sorted(CHECKS, key=lambda check: check.check_id)


def check_ids() -> list[str]:
    return [check.check_id for check in list_checks()]


def get_check(check_id: str) -> CheckDef | None:
    for check in CHECKS:
        if check.check_id == check_id:
            return check
    return None
