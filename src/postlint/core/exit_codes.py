from __future__ import annotations

import json
from pathlib import Path

EXIT_CODE_REGISTRY = Path(__file__).resolve().parent / "exit-codes.json"


def _load_registry() -> dict[str, int]:
    payload = json.loads(EXIT_CODE_REGISTRY.read_text(encoding="utf-8"))
    mapping: dict[str, int] = {}
    for row in payload.get("codes", []):
        mapping[str(row["name"])] = int(row["code"])
    return mapping


_REG = _load_registry()

OK = _REG["OK"]
ERR_LINT = _REG["ERR_LINT"]
ERR_USAGE = _REG["ERR_USAGE"]
ERR_CONFIG = _REG["ERR_CONFIG"]
ERR_VALIDATION = _REG["ERR_VALIDATION"]
ERR_IO = _REG["ERR_IO"]
ERR_INTERNAL = _REG["ERR_INTERNAL"]


def registry() -> dict[str, int]:
    return dict(_REG)
