from __future__ import annotations

import argparse

from ..checks.registry import get_check, list_checks
from ..checks.report import check_as_dict, render_check_list, render_explain
from ..core.context import RunContext
from ..core.errors import ScriptError
from ..core.exit_codes import ERR_USAGE, OK
from ..core.serialize import dumps_json


def configure_catalog_parsers(sub: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    checks_p = sub.add_parser("checks", help="list registered checks")
    checks_p.add_argument("--json", action="store_true", help="emit JSON output")
    explain_p = sub.add_parser("explain", help="describe one check")
    explain_p.add_argument("check_id")
    explain_p.add_argument("--json", action="store_true", help="emit JSON output")


def run_checks_command(ctx: RunContext, ns: argparse.Namespace) -> int:
    checks = list_checks()
    if ctx.as_json or ns.json:
        print(dumps_json({"schema_version": 1, "tool": "postlint", "status": "ok", "checks": [check_as_dict(check) for check in checks]}))
    else:
        print(render_check_list(checks))
    return OK


def run_explain_command(ctx: RunContext, ns: argparse.Namespace) -> int:
    check = get_check(ns.check_id)
    if check is None:
        raise ScriptError(f"unknown check id `{ns.check_id}`; run `postlint checks` to list ids", ERR_USAGE, kind="unknown_check")
    if ctx.as_json or ns.json:
        print(dumps_json({"schema_version": 1, "tool": "postlint", "status": "ok", "check": check_as_dict(check)}))
    else:
        print(render_explain(check))
    return OK
