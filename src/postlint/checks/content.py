from __future__ import annotations

from datetime import date

from ..config.loader import LintConfig
from ..document.model import Document
from ..document.values import as_day, coerce_bool, coerce_date
from .model import CheckDef, Finding, Severity


def check_body_nonempty(doc: Document, config: LintConfig) -> list[Finding]:
    if doc.body.strip():
        return []
    return [(doc.body_start_line, "document body is empty")]


def check_no_drafts(doc: Document, config: LintConfig) -> list[Finding]:
    if coerce_bool(doc.get("draft")) is True:
        return [(doc.line_of("draft"), "draft documents are not allowed (draft: true)")]
    return []


def check_future_date(doc: Document, config: LintConfig, today: date | None = None) -> list[Finding]:
    published = coerce_date(doc.get("date"))
    if published is None:
        return []
    day = as_day(published)
    if day > (today or date.today()):
        return [(doc.line_of("date"), f"`date` {day.isoformat()} is in the future")]
    return []


CHECKS: tuple[CheckDef, ...] = (
    CheckDef(
        "content.body_nonempty",
        "require non-whitespace body text after the front matter",
        check_body_nonempty,
        fix_hint="Write the post body or remove the stub file.",
        skip_without_front_matter=False,
    ),
    CheckDef(
        "content.no_drafts",
        "forbid documents marked `draft: true`",
        check_no_drafts,
        fix_hint="Publish the draft (`draft: false`) or move it out of the content roots.",
        enabled_by_default=False,
    ),
    CheckDef(
        "content.future_date",
        "warn about documents dated in the future",
        check_future_date,
        severity=Severity.WARN,
        fix_hint="Check the year; generators hide future posts unless built with --buildFuture.",
        enabled_by_default=False,
    ),
)
