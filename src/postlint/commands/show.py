from __future__ import annotations

import argparse

from ..core.context import RunContext
from ..core.exit_codes import ERR_LINT, OK
from ..core.serialize import dumps_json
from ..document.values import to_jsonable
from .common import load_one


def configure_show_parser(sub: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    p = sub.add_parser("show", help="print the parsed front matter of one document")
    p.add_argument("file")
    p.add_argument("--json", action="store_true", help="emit JSON output")


def run_show_command(ctx: RunContext, ns: argparse.Namespace) -> int:
    doc = load_one(ctx, ns.file)
    payload: dict[str, object] = {
        "schema_version": 1,
        "tool": "postlint",
        "status": "ok" if doc.parsed else "error",
        "path": doc.rel_path,
        "source_format": str(doc.source_format),
        "front_matter_format": str(doc.front_matter.format),
        "lines": [doc.front_matter.start_line, doc.front_matter.end_line],
        "fields": to_jsonable(doc.fields),
        "duplicate_keys": list(doc.front_matter.duplicate_keys),
        "body_chars": len(doc.body),
        "bom": doc.bom,
    }
    if doc.error is not None:
        payload["error"] = {"line": doc.error.line, "message": doc.error.message}
    if ctx.as_json or ns.json:
        print(dumps_json(payload))
    else:
        print(f"{doc.rel_path}: {doc.source_format}, front matter {doc.front_matter.format} (lines {doc.front_matter.start_line}-{doc.front_matter.end_line})")
        if doc.error is not None:
            print(f"  error: {doc.error}")
        for key, value in payload["fields"].items():  # type: ignore[union-attr]
            print(f"  {key}: {dumps_json(value)}")
        print(f"  body: {len(doc.body)} chars")
    return OK if doc.parsed else ERR_LINT
