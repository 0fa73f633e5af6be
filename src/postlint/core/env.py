"""Environment access for postlint.

`os.environ` is only read through this module.
"""

from __future__ import annotations

import os
import re

ENV_PREFIX = "POSTLINT_"
_FALSE_FLAGS = frozenset({"", "0", "false", "no", "off"})
_KEY_RE = re.compile(r"[A-Z][A-Z0-9_]*")


def getenv(name: str, default: str | None = None) -> str | None:
    return os.environ.get(name, default)


def env_flag(name: str) -> bool:
    value = os.environ.get(name)
    return value is not None and value.strip().lower() not in _FALSE_FLAGS


def normalize_config_key(raw: str) -> str:
    key = raw.strip().replace("-", "_").upper()
    if not _KEY_RE.fullmatch(key):
        raise ValueError(f"invalid config key `{raw}`: expected a letter followed by letters, digits, `_` or `-`")
    return key


def prefixed_env(prefix: str = ENV_PREFIX) -> dict[str, str]:
    return {name[len(prefix) :]: value for name, value in sorted(os.environ.items()) if name.startswith(prefix)}
