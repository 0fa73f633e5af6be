from __future__ import annotations

from pathlib import Path

import pytest

from helpers import write
from postlint.core.errors import ScriptError
from postlint.core.exit_codes import ERR_USAGE
from postlint.discovery import discover

INCLUDE = ("*.md", "*.markdown", "*.org")


def _rel(paths: list[Path], root: Path) -> list[str]:
    return [path.relative_to(root.resolve()).as_posix() for path in paths]


def test_discover_walks_roots_and_filters_by_glob(tmp_path: Path) -> None:
    for rel in ("posts/b.md", "posts/a.org", "notes/c.markdown", "posts/image.png", "README.txt"):
        write(tmp_path, rel, "x\n")
    found = discover([tmp_path], INCLUDE)
    assert _rel(found, tmp_path) == ["notes/c.markdown", "posts/a.org", "posts/b.md"]


def test_discover_skips_hidden_entries(tmp_path: Path) -> None:
    write(tmp_path, ".git/COMMIT.md", "x\n")
    write(tmp_path, "posts/.draft.md", "x\n")
    write(tmp_path, "posts/live.md", "x\n")
    assert _rel(discover([tmp_path], INCLUDE), tmp_path) == ["posts/live.md"]


def test_exclude_matches_relative_path_or_name(tmp_path: Path) -> None:
    for rel in ("drafts/wip.md", "posts/_index.md", "posts/keep.md"):
        write(tmp_path, rel, "x\n")
    found = discover([tmp_path], INCLUDE, ["drafts/*", "_index.md"])
    assert _rel(found, tmp_path) == ["posts/keep.md"]


def test_explicit_files_bypass_globs_and_results_are_deduplicated(tmp_path: Path) -> None:
    notes = write(tmp_path, "notes.txt", "x\n")
    post = write(tmp_path, "post.md", "x\n")
    found = discover([notes, post, tmp_path], INCLUDE)
    assert _rel(found, tmp_path) == ["notes.txt", "post.md"]


def test_missing_root_is_a_usage_error(tmp_path: Path) -> None:
    with pytest.raises(ScriptError) as exc:
        discover([tmp_path / "missing"], INCLUDE)
    assert exc.value.code == ERR_USAGE
