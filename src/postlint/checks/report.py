from __future__ import annotations

import json
from collections import defaultdict
from typing import Any
from xml.etree.ElementTree import Element, SubElement, tostring

from ..contracts.ids import LINT_RUN
from ..contracts.validate import validate
from .model import CheckDef, CheckResult, CheckRunReport


def results_as_rows(results: list[CheckResult]) -> list[dict[str, Any]]:
    rows: list[dict[str, Any]] = []
    for result in sorted(results, key=lambda row: row.id):
        rows.append(
            {
                "id": result.id,
                "domain": result.check.domain,
                "scope": str(result.check.scope),
                "severity": str(result.check.severity),
                "status": str(result.status).upper(),
                "duration_ms": int(result.duration_ms),
                "violations": len(result.violations),
                "hint": result.check.fix_hint,
                "detail": "; ".join(f"{item.path}:{item.line}: {item.message}" for item in result.violations[:3]),
            }
        )
    return rows


def build_report_payload(report: CheckRunReport, *, run_id: str = "") -> dict[str, Any]:
    payload: dict[str, Any] = {
        "schema_name": LINT_RUN,
        "schema_version": 1,
        "tool": "postlint",
        "kind": "lint-run",
        "run_id": run_id,
        "status": str(report.status),
        "strict": report.strict,
        "summary": dict(report.summary),
        "documents_checked": list(report.paths),
        "rows": results_as_rows(list(report.results)),
        "violations": [item.as_dict() for item in report.violations],
    }
    return validate(LINT_RUN, payload)


def render_json(payload: dict[str, Any]) -> str:
    return json.dumps(payload, sort_keys=True, ensure_ascii=False)


def render_jsonl(payload: dict[str, Any]) -> str:
    lines = [json.dumps({"kind": "violation", **row}, sort_keys=True, ensure_ascii=False) for row in payload.get("violations", [])]
    lines.append(
        json.dumps(
            {"kind": "summary", "status": payload.get("status"), "summary": payload.get("summary", {})},
            sort_keys=True,
        )
    )
    return "\n".join(lines)


def _summary_line(payload: dict[str, Any]) -> str:
    summary = payload.get("summary", {})
    return (
        f"summary: status={payload.get('status', 'unknown')} documents={int(summary.get('documents', 0))} "
        f"violations={int(summary.get('violations', 0))} passed={int(summary.get('passed', 0))} "
        f"failed={int(summary.get('failed', 0))} warned={int(summary.get('warned', 0))} "
        f"skipped={int(summary.get('skipped', 0))} duration_ms={int(summary.get('duration_ms', 0))}"
    )


def render_text(payload: dict[str, Any], *, quiet: bool = False, verbose: bool = False) -> str:
    violations = payload.get("violations", [])
    out: list[str] = []
    if quiet:
        for item in violations:
            if item["severity"] == "error" or payload.get("strict"):
                out.append(f"{item['path']}:{item['line']}: [{item['check_id']}] {item['message']}")
        return "\n".join(out) if out else "PASS"
    for item in violations:
        label = "warning" if item["severity"] == "warn" else "error"
        out.append(f"{item['path']}:{item['line']}: {label} [{item['check_id']}] {item['message']}")
        if verbose and item.get("hint"):
            out.append(f"  hint: {item['hint']}")
    if verbose:
        for row in payload.get("rows", []):
            out.append(f"{row['status']} {row['id']} ({row['duration_ms']}ms, {row['violations']} violations)")
    out.append(_summary_line(payload))
    return "\n".join(out)


def render_junit(payload: dict[str, Any]) -> str:
    by_path: dict[str, list[dict[str, Any]]] = defaultdict(list)
    for item in payload.get("violations", []):
        by_path[item["path"]].append(item)
    documents = sorted(set(payload.get("documents_checked", [])) | set(by_path))
    failures = sum(1 for path in documents if any(item["severity"] == "error" for item in by_path.get(path, [])))
    suite = Element(
        "testsuite",
        name="postlint",
        tests=str(len(documents)),
        failures=str(failures),
        errors="0",
        time=f"{int(payload.get('summary', {}).get('duration_ms', 0)) / 1000:.3f}",
    )
    for path in documents:
        case = SubElement(suite, "testcase", classname="postlint.content", name=path)
        items = by_path.get(path, [])
        errors = [item for item in items if item["severity"] == "error"]
        if errors:
            failure = SubElement(case, "failure", message=f"{len(errors)} front matter violation(s)")
            failure.text = "\n".join(f"{item['line']}: [{item['check_id']}] {item['message']}" for item in errors)
        warnings = [item for item in items if item["severity"] == "warn"]
        if warnings:
            system_out = SubElement(case, "system-out")
            system_out.text = "\n".join(f"{item['line']}: [{item['check_id']}] {item['message']}" for item in warnings)
    return tostring(suite, encoding="unicode")


def check_as_dict(check: CheckDef) -> dict[str, Any]:
    return {
        "id": check.check_id,
        "domain": check.domain,
        "scope": str(check.scope),
        "severity": str(check.severity),
        "enabled_by_default": check.enabled_by_default,
        "description": check.description,
        "fix_hint": check.fix_hint,
    }


def render_check_list(checks: list[CheckDef]) -> str:
    width = max((len(check.check_id) for check in checks), default=0)
    lines = []
    for check in checks:
        state = "on " if check.enabled_by_default else "off"
        lines.append(f"{check.check_id.ljust(width)}  {state}  {str(check.severity):5}  {check.description}")
    return "\n".join(lines)


def render_explain(check: CheckDef) -> str:
    lines = [
        f"{check.check_id} ({check.scope} check, severity {check.severity}, {'on' if check.enabled_by_default else 'off'} by default)",
        f"  {check.description}",
        f"  fix: {check.fix_hint}",
    ]
    return "\n".join(lines)


__all__ = [
    "build_report_payload",
    "check_as_dict",
    "render_check_list",
    "render_explain",
    "render_json",
    "render_jsonl",
    "render_junit",
    "render_text",
    "results_as_rows",
]
