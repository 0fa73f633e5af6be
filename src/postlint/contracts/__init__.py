from __future__ import annotations

from .ids import CONFIG, ERROR, FRONT_MATTER, INVENTORY, LINT_RUN
from .validate import load_schema, schema_path, validate, validate_file

__all__ = [
    "CONFIG",
    "ERROR",
    "FRONT_MATTER",
    "INVENTORY",
    "LINT_RUN",
    "load_schema",
    "schema_path",
    "validate",
    "validate_file",
]
