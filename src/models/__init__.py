"""
Models package for ofman

Contains data structures and type definitions for the conversion pipeline.
"""

from .state import ProgramState, pipeline
from .styles import StyleRule, StyleKind, ListContext
from .entry import Apii, ApiEntry, Category, Manpage
from .parser import TagMatch, TagSpan, PrototypeSplit

__all__ = [
    "ProgramState",
    "pipeline",
    "StyleRule",
    "StyleKind",
    "ListContext",
    "Apii",
    "ApiEntry",
    "Category",
    "Manpage",
    "TagMatch",
    "TagSpan",
    "PrototypeSplit",
]
