from __future__ import annotations

CONFIG = "postlint.config.v1"
ERROR = "postlint.error.v1"
FRONT_MATTER = "postlint.front-matter.v1"
INVENTORY = "postlint.inventory.v1"
LINT_RUN = "postlint.lint-run.v1"
