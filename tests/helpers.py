from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

from postlint.config.loader import LintConfig
from postlint.document.model import Document
from postlint.document.parser import parse_text

ROOT = Path(__file__).resolve().parents[1]
FIXTURES = ROOT / "tests/fixtures"


def run_postlint(*args: str, cwd: Path | None = None, env: dict[str, str] | None = None) -> subprocess.CompletedProcess[str]:
    run_env = {name: value for name, value in os.environ.items() if not name.startswith("POSTLINT_") and name != "CI"}
    run_env["PYTHONPATH"] = str(ROOT / "src")
    run_env.setdefault("RUN_ID", "pytest-run")
    run_env.update(env or {})
    return subprocess.run(
        [sys.executable, "-m", "postlint", *args],
        cwd=(cwd or ROOT),
        env=run_env,
        text=True,
        capture_output=True,
        check=False,
    )


def make_config(base_dir: Path, **overrides: object) -> LintConfig:
    return LintConfig.from_mapping(overrides, base_dir=base_dir, source="test")


def doc_from_text(text: str, name: str = "post.md") -> Document:
    return parse_text(text, Path(name), name)


def write(root: Path, rel: str, text: str) -> Path:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(text.encode("utf-8"))
    return path
