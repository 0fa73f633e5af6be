from __future__ import annotations

import argparse

from ..core.context import RunContext
from ..core.exit_codes import OK
from ..core.serialize import dumps_json
from ..inventory import build_inventory, render_inventory_text
from .common import load_documents


def configure_inventory_parser(sub: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    p = sub.add_parser("inventory", help="summarise the content collection")
    p.add_argument("paths", nargs="*", help="files or directories; defaults to configured content_dirs")
    p.add_argument("--json", action="store_true", help="emit JSON output")


def run_inventory_command(ctx: RunContext, ns: argparse.Namespace) -> int:
    documents = load_documents(ctx, ns.paths)
    payload = build_inventory(documents, run_id=ctx.run_id)
    if ctx.as_json or ns.json:
        print(dumps_json(payload))
    else:
        print(render_inventory_text(payload))
    return OK
