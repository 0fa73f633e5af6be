from __future__ import annotations

import fnmatch
import os
from pathlib import Path
from typing import Iterable

from .core.errors import ScriptError
from .core.exit_codes import ERR_USAGE


def _matches(rel: str, name: str, patterns: Iterable[str]) -> bool:
    return any(fnmatch.fnmatchcase(rel, pat) or fnmatch.fnmatchcase(name, pat) for pat in patterns)


def _walk(root: Path) -> Iterable[Path]:
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if not d.startswith("."))
        for filename in sorted(filenames):
            if filename.startswith("."):
                continue
            yield Path(dirpath) / filename


def discover(roots: Iterable[Path], include: Iterable[str], exclude: Iterable[str] = ()) -> list[Path]:
    include = tuple(include)
    exclude = tuple(exclude)
    found: set[Path] = set()
    for root in roots:
        if not root.exists():
            raise ScriptError(f"content path does not exist: {root}", ERR_USAGE, kind="missing_path")
        if root.is_file():
            found.add(root.resolve())
            continue
        for path in _walk(root):
            rel = path.relative_to(root).as_posix()
            if not _matches(rel, path.name, include):
                continue
            if _matches(rel, path.name, exclude):
                continue
            found.add(path.resolve())
    return sorted(found)
