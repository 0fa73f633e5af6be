"""CLI payload output helpers."""

from __future__ import annotations

from ..contracts.ids import ERROR
from ..core.serialize import dumps_json


def emit(payload: dict[str, object], as_json: bool) -> None:
    print(dumps_json(payload, pretty=not as_json))


def resolve_output_format(*, cli_json: bool, cli_format: str | None, ci_present: bool) -> str:
    if cli_json:
        return "json"
    if cli_format:
        return cli_format
    return "json" if ci_present else "text"


def render_error(*, as_json: bool, message: str, code: int, kind: str = "generic_error") -> str:
    if as_json:
        return dumps_json(
            {
                "schema_name": ERROR,
                "schema_version": 1,
                "tool": "postlint",
                "status": "error",
                "errors": [{"code": code, "message": message, "kind": kind}],
            },
            pretty=False,
        )
    return f"postlint: error: {message}"
