from __future__ import annotations

import json
from datetime import time
from typing import Any

import yaml

from ..core.errors import ScriptError
from ..core.exit_codes import ERR_USAGE
from .model import Document, FrontMatterFormat, SourceFormat
from .parser import BOM
from .values import to_jsonable

WRITABLE_FORMATS = (FrontMatterFormat.YAML, FrontMatterFormat.JSON)


def _yaml_ready(value: Any) -> Any:
    if isinstance(value, time):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(key): _yaml_ready(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_yaml_ready(item) for item in value]
    return value


def _newline_of(document: Document) -> str:
    return "\r\n" if "\r\n" in document.front_matter.raw else "\n"


def render_front_matter(fields: dict[str, Any], fmt: FrontMatterFormat, newline: str = "\n") -> str:
    if fmt is FrontMatterFormat.YAML:
        inner = ""
        if fields:
            inner = yaml.safe_dump(
                _yaml_ready(fields),
                sort_keys=False,
                allow_unicode=True,
                default_flow_style=False,
            )
        block = f"---\n{inner}---\n"
    elif fmt is FrontMatterFormat.JSON:
        block = json.dumps(to_jsonable(fields), indent=2, ensure_ascii=False) + "\n"
    else:
        allowed = ", ".join(str(item) for item in WRITABLE_FORMATS)
        raise ScriptError(f"cannot render {fmt} front matter; supported: {allowed}", ERR_USAGE, kind="unsupported_format")
    if newline != "\n":
        block = block.replace("\n", newline)
    return block


def convert_document(document: Document, fmt: FrontMatterFormat) -> str:
    if document.source_format is not SourceFormat.MARKDOWN:
        raise ScriptError(f"{document.rel_path}: convert supports Markdown documents only", ERR_USAGE, kind="unsupported_source")
    if document.error is not None:
        raise ScriptError(f"{document.rel_path}: cannot convert malformed front matter ({document.error})", ERR_USAGE, kind="malformed_front_matter")
    if not document.front_matter.present:
        raise ScriptError(f"{document.rel_path}: no front matter to convert", ERR_USAGE, kind="missing_front_matter")
    block = render_front_matter(document.fields, fmt, newline=_newline_of(document))
    return (BOM if document.bom else "") + block + document.body
