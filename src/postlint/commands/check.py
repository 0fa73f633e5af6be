from __future__ import annotations

import argparse

from ..checks.model import CheckStatus
from ..checks.report import build_report_payload, render_json, render_jsonl, render_junit, render_text
from ..checks.runner import run_checks, select_checks
from ..core.context import RunContext
from ..core.exit_codes import ERR_LINT, OK
from ..core.fs import resolve_path, write_text
from ..core.logging import log_event
from .common import load_documents

REPORT_FORMATS = ("text", "json", "jsonl", "junit")


def configure_check_parser(sub: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    p = sub.add_parser("check", help="lint front matter of content documents")
    p.add_argument("paths", nargs="*", help="files or directories; defaults to configured content_dirs")
    p.add_argument("--select", action="append", default=[], metavar="ID", help="run only matching check ids (fnmatch)")
    p.add_argument("--skip", action="append", default=[], metavar="ID", help="skip matching check ids (fnmatch)")
    p.add_argument("--forbid-drafts", action="store_true", help="fail on documents marked draft: true")
    p.add_argument("--strict", action="store_true", help="treat warnings as failures")
    p.add_argument("--fail-fast", action="store_true", help="stop after the first failing check")
    p.add_argument("--report", choices=REPORT_FORMATS, help="report format; defaults to the global output format")
    p.add_argument("--out", help="write the report to this file instead of stdout")


def _render(payload: dict[str, object], report_format: str, ctx: RunContext) -> str:
    if report_format == "json":
        return render_json(payload)
    if report_format == "jsonl":
        return render_jsonl(payload)
    if report_format == "junit":
        return render_junit(payload)
    return render_text(payload, quiet=ctx.quiet, verbose=ctx.verbose)


def run_check_command(ctx: RunContext, ns: argparse.Namespace) -> int:
    checks = select_checks(ctx.config, ns.select, ns.skip, forbid_drafts=ns.forbid_drafts)
    documents = load_documents(ctx, ns.paths)
    log_event(ctx, "info", "check", "start", documents=len(documents), checks=len(checks))
    report = run_checks(documents, checks, ctx.config, fail_fast=ns.fail_fast, strict=ns.strict)
    payload = build_report_payload(report, run_id=ctx.run_id)
    report_format = ns.report or ("json" if ctx.as_json else "text")
    rendered = _render(payload, report_format, ctx)
    if ns.out:
        out_path = write_text(resolve_path(ctx.cwd, ns.out), rendered + "\n")
        log_event(ctx, "info", "check", "report-written", path=str(out_path), format=report_format)
        if not ctx.quiet and report_format != "text":
            print(render_text(payload, quiet=True))
    else:
        print(rendered)
    log_event(
        ctx,
        "info",
        "check",
        "done",
        status=payload["status"],
        violations=report.summary.get("violations", 0),
        duration_ms=report.summary.get("duration_ms", 0),
    )
    return OK if report.status is CheckStatus.PASS else ERR_LINT
