from __future__ import annotations

from pathlib import Path
from typing import Sequence

from ..core.context import RunContext
from ..core.fs import resolve_path
from ..core.logging import log_event
from ..discovery import discover
from ..document.model import Document
from ..document.parser import parse_document


def load_documents(ctx: RunContext, paths: Sequence[str]) -> list[Document]:
    if paths:
        roots = [resolve_path(ctx.cwd, raw) for raw in paths]
        display_root = ctx.cwd
    else:
        roots = ctx.config.content_roots()
        display_root = ctx.config.base_dir
    files = discover(roots, ctx.config.include, ctx.config.exclude)
    log_event(ctx, "debug", "discovery", "scan", roots=",".join(str(root) for root in roots), files=len(files))
    documents: list[Document] = []
    for path in files:
        doc = parse_document(path, display_root)
        if doc.error is not None:
            log_event(ctx, "debug", "parser", "malformed", path=doc.rel_path, line=doc.error.line)
        documents.append(doc)
    return documents


def load_one(ctx: RunContext, raw: str) -> Document:
    path: Path = resolve_path(ctx.cwd, raw)
    return parse_document(path, ctx.cwd)
