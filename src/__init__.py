"""
ofman - Lua C API manpage generator

Converts the @tag{} annotated reference format of the Lua manual into one
ROFF manpage per documented C API function or type.
"""

__version__ = "1.0.0"

from .lib import Parser, Compiler, StyleRegistry, EntryError, LOG, state_connectToLogger

__all__ = ["Parser", "Compiler", "StyleRegistry", "EntryError", "LOG", "state_connectToLogger", "__version__"]
