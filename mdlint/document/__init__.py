"""Markdown document model and parser adapter."""

from .loader import Document
from .parser import parse_tree

__all__ = [
    "Document",
    "parse_tree",
]
