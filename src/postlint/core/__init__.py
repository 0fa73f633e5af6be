from __future__ import annotations

from .errors import FrontMatterError, ScriptError

__all__ = ["FrontMatterError", "ScriptError"]
