from __future__ import annotations

from .model import Document, FrontMatter, FrontMatterFormat, SourceFormat
from .parser import detect_format, parse_document, parse_text, split_front_matter
from .render import convert_document, render_front_matter

__all__ = [
    "Document",
    "FrontMatter",
    "FrontMatterFormat",
    "SourceFormat",
    "convert_document",
    "detect_format",
    "parse_document",
    "parse_text",
    "render_front_matter",
    "split_front_matter",
]
