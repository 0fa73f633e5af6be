from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .. import __version__
from ..commands.catalog import configure_catalog_parsers, run_checks_command, run_explain_command
from ..commands.check import configure_check_parser, run_check_command
from ..commands.convert import configure_convert_parser, run_convert_command
from ..commands.inventory import configure_inventory_parser, run_inventory_command
from ..commands.show import configure_show_parser, run_show_command
from ..config.loader import load_config
from ..core.context import RunContext
from ..core.env import env_flag
from ..core.errors import ScriptError
from ..core.exit_codes import ERR_INTERNAL, ERR_USAGE, OK
from ..core.logging import log_event
from .output import emit, render_error, resolve_output_format

COMMANDS = {
    "check": run_check_command,
    "show": run_show_command,
    "convert": run_convert_command,
    "inventory": run_inventory_command,
    "checks": run_checks_command,
    "explain": run_explain_command,
}


def _version_string() -> str:
    return f"postlint {__version__}"


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="postlint", description="Lint front matter in Markdown and Org content collections.")
    p.add_argument("--version", action="version", version=_version_string())
    p.add_argument("--run-id", help="run identifier recorded in reports and logs")
    p.add_argument("--config", help="config file (postlint.toml or pyproject.toml)")
    p.add_argument("--format", choices=["text", "json"], default=None, help="output format")
    p.add_argument("--json", dest="global_json", action="store_true", help="shorthand for --format json")
    p.add_argument("--log-json", action="store_true", help="emit structured log events as JSON on stderr")
    vg = p.add_mutually_exclusive_group()
    vg.add_argument("--verbose", action="store_true", help="enable verbose diagnostics")
    vg.add_argument("--quiet", action="store_true", help="only emit errors")
    sub = p.add_subparsers(dest="cmd", required=True)

    configure_check_parser(sub)
    configure_show_parser(sub)
    configure_convert_parser(sub)
    configure_inventory_parser(sub)
    configure_catalog_parsers(sub)

    version_p = sub.add_parser("version", help="print the postlint version")
    version_p.add_argument("--json", action="store_true", help="emit JSON output")
    return p


def main(argv: list[str] | None = None) -> int:
    p = build_parser()
    try:
        ns = p.parse_args(argv)
    except SystemExit as exc:
        return int(exc.code) if isinstance(exc.code, int) else ERR_USAGE
    fmt = resolve_output_format(cli_json=ns.global_json or bool(getattr(ns, "json", False)), cli_format=ns.format, ci_present=env_flag("CI"))
    as_json = fmt == "json"
    try:
        if ns.cmd == "version":
            payload = {"schema_version": 1, "tool": "postlint", "status": "ok", "version": __version__}
            if as_json or ns.json:
                emit(payload, True)
            else:
                print(_version_string())
            return OK
        cwd = Path.cwd()
        config = load_config(cwd, ns.config)
        ctx = RunContext.from_args(
            ns.run_id,
            config,
            output_format="json" if as_json else "text",
            verbose=ns.verbose,
            quiet=ns.quiet,
            log_json=ns.log_json,
            cwd=cwd,
        )
        log_event(ctx, "debug", "cli", "start", cmd=ns.cmd, fmt=ctx.output_format, config=config.source)
        handler = COMMANDS.get(ns.cmd)
        if handler is None:
            return ERR_USAGE
        return handler(ctx, ns)
    except ScriptError as exc:
        print(render_error(as_json=as_json, message=str(exc), code=exc.code, kind=exc.kind), file=sys.stderr)
        return exc.code
    except Exception as exc:  # pragma: no cover
        print(render_error(as_json=as_json, message=f"internal error: {exc}", code=ERR_INTERNAL, kind="internal_error"), file=sys.stderr)
        return ERR_INTERNAL


if __name__ == "__main__":
    raise SystemExit(main())
