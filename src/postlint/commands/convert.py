from __future__ import annotations

import argparse
import sys

from ..core.context import RunContext
from ..core.exit_codes import OK
from ..core.fs import write_text
from ..core.logging import log_event
from ..document.model import FrontMatterFormat
from ..document.render import WRITABLE_FORMATS, convert_document
from .common import load_one


def configure_convert_parser(sub: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    p = sub.add_parser("convert", help="re-render a Markdown document's front matter in another format")
    p.add_argument("file")
    p.add_argument("--to", required=True, choices=[str(fmt) for fmt in WRITABLE_FORMATS], help="target front matter format")
    p.add_argument("--write", action="store_true", help="rewrite the file in place instead of printing")


def run_convert_command(ctx: RunContext, ns: argparse.Namespace) -> int:
    doc = load_one(ctx, ns.file)
    target = FrontMatterFormat(ns.to)
    if doc.front_matter.format is target:
        log_event(ctx, "info", "convert", "noop", path=doc.rel_path, format=str(target))
    converted = convert_document(doc, target)
    if ns.write:
        write_text(doc.path, converted)
        log_event(ctx, "info", "convert", "written", path=doc.rel_path, source=str(doc.front_matter.format), target=str(target))
        return OK
    sys.stdout.write(converted)
    return OK
