"""
ofman - Lua C API manpage generator

Converts "Our Format" annotated reference documents into ROFF manpages.
"""

__version__ = "1.0.0"

from .parser import Parser, entries_extract
from .compiler import Compiler
from .resolver import Resolver, ResolutionContext
from .styles import StyleRegistry
from .errors import EntryError
from .log import LOG, WARN, state_connectToLogger

__all__ = [
    "Parser",
    "entries_extract",
    "Compiler",
    "Resolver",
    "ResolutionContext",
    "StyleRegistry",
    "EntryError",
    "LOG",
    "WARN",
    "state_connectToLogger",
    "__version__",
]
