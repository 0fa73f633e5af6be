from __future__ import annotations

from .loader import DEFAULTS, LintConfig, find_config_file, load_config

__all__ = ["DEFAULTS", "LintConfig", "find_config_file", "load_config"]
