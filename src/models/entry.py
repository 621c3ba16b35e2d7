"""
API entry data models

Types produced while converting one @APIEntry{} block into a manpage.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import List, Optional


class Category(Enum):
    """Manpage category of an entry; the value is the file suffix"""
    FUNCTION = "3"
    TYPE = "3type"


@dataclass
class Apii:
    """
    API indicator of a callable, from @apii{pops,pushes,e}

    Attributes:
        pops: Readable count of values popped from the stack
        pushes: Readable count of values pushed onto the stack
        error: Error class character ('-', 'm', 'v' or 'e')
    """
    pops: str
    pushes: str
    error: str


@dataclass
class ApiEntry:
    """
    One documented API element, parsed but not yet formatted

    Attributes:
        prototype: Raw prototype text (before the first '|')
        description: Raw description text with @apii{} removed
        name: Name derived from the prototype
        category: FUNCTION or TYPE
        header: Include header shown in SYNOPSIS
        apii: Stack/error metadata, None when the entry has no @apii{}
    """
    prototype: str
    description: str
    name: str
    category: Category
    header: str
    apii: Optional[Apii] = None


@dataclass
class Manpage:
    """
    Result of converting one entry

    Attributes:
        name: Entry name
        category: Entry category
        text: Complete ROFF document
        see_also: Cross-referenced entry names, sorted
        warnings: Recoverable problems met during conversion
    """
    name: str
    category: Category
    text: str
    see_also: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def filename(self) -> str:
        """Output file name, e.g. lua_pushnil.3"""
        return f"{self.name}.{self.category.value}"
