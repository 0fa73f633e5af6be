from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Literal

from ..config.loader import LintConfig
from .env import getenv

OutputFormat = Literal["text", "json"]


@dataclass(frozen=True)
class RunContext:
    run_id: str
    cwd: Path
    output_format: OutputFormat
    verbose: bool
    quiet: bool
    log_json: bool
    config: LintConfig

    @property
    def as_json(self) -> bool:
        return self.output_format == "json"

    @classmethod
    def from_args(
        cls,
        run_id: str | None,
        config: LintConfig,
        output_format: OutputFormat = "text",
        verbose: bool = False,
        quiet: bool = False,
        log_json: bool = False,
        cwd: Path | None = None,
    ) -> "RunContext":
        default_run = f"postlint-{datetime.now(timezone.utc).strftime('%Y%m%d-%H%M%S')}"
        resolved_run_id = run_id or getenv("RUN_ID") or default_run
        return cls(
            run_id=resolved_run_id,
            cwd=(cwd or Path.cwd()).resolve(),
            output_format=output_format,
            verbose=verbose,
            quiet=quiet,
            log_json=log_json,
            config=config,
        )
