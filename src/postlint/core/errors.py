from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScriptError(Exception):
    message: str
    code: int
    kind: str = "generic_error"

    def __str__(self) -> str:
        return self.message


@dataclass
class FrontMatterError(Exception):
    message: str
    line: int = 1

    def __str__(self) -> str:
        return f"line {self.line}: {self.message}"
