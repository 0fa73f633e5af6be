from __future__ import annotations

from pathlib import Path

from .errors import ScriptError
from .exit_codes import ERR_IO


def resolve_path(base: Path, raw: str | Path) -> Path:
    path = Path(raw)
    return path.resolve() if path.is_absolute() else (base / path).resolve()


def read_text(path: Path) -> str:
    try:
        with path.open("r", encoding="utf-8", newline="") as handle:
            return handle.read()
    except FileNotFoundError as exc:
        raise ScriptError(f"file not found: {path}", ERR_IO, kind="missing_file") from exc
    except UnicodeDecodeError as exc:
        raise ScriptError(f"file is not valid UTF-8: {path} ({exc.reason} at byte {exc.start})", ERR_IO, kind="decode_error") from exc
    except OSError as exc:
        raise ScriptError(f"unable to read {path}: {exc}", ERR_IO, kind="read_error") from exc


def write_text(path: Path, content: str) -> Path:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8", newline="") as handle:
            handle.write(content)
    except OSError as exc:
        raise ScriptError(f"unable to write {path}: {exc}", ERR_IO, kind="write_error") from exc
    return path
