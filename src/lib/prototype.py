"""
Entry prototype parsing and @apii{} extraction

An entry body looks like

    int lua_absindex (lua_State *L, int idx);|
    @apii{0,0,-}
    Converts the acceptable index @id{idx} ...

Everything before the first '|' is the C declaration; the name and the
manpage category are read off it with two ordered pattern rules per
category. The description carries at most one @apii{} tag, which is lifted
out as stack/error metadata.
"""

import re
from typing import List, Tuple

from ..config import appsettings
from ..models.entry import Apii, ApiEntry, Category
from ..models.parser import PrototypeSplit
from .errors import EntryError
from .parser import tags_replace


TERMINATED = re.compile(r'(.+);\s*$', re.DOTALL)
TYPEDEF = re.compile(r'\btypedef\b')

# typedef int (*lua_CFunction) (lua_State *L);
FUNCTION_POINTER_NAME = re.compile(r'\(\s*\*\s*([A-Za-z0-9_]+)')
# typedef struct lua_Debug lua_Debug;
TRAILING_NAME = re.compile(r'([A-Za-z0-9_]+)\s*$')
# int (lua_error) (lua_State *L);
PARENTHESIZED_NAME = re.compile(r'\(\s*([A-Za-z0-9_]+)\s*\)\s*\(')
# void *lua_touserdata (lua_State *L, int index);
FUNCTION_NAME = re.compile(r'([A-Za-z0-9_]+)\s*\(')

APII_FIELDS = re.compile(r'\s*([^,]+?)\s*,\s*([^,]+?)\s*,\s*(\S)', re.DOTALL)

ELLIPSIS_MACRO = '@ldots'
ELLIPSIS_TEXT = '/* ... */'


def prototype_split(body: str) -> PrototypeSplit:
    """
    Divide an entry body at its first '|'

    Raises:
        EntryError: If there is no separator or nothing before it
    """
    prototype, separator, description = body.partition('|')
    if not separator or not prototype.strip():
        head = body.strip().split('\n', 1)[0][:60]
        raise EntryError(f"entry has no 'prototype|description' separator: {head!r}")
    return PrototypeSplit(prototype=prototype, description=description)


def name_derive(declaration: str) -> Tuple[str, Category]:
    """
    Derive name and category from a declaration without its ';'

    Type aliases (anything mentioning typedef) are named by the
    pointer-to-function pattern first, then by the last identifier.
    Functions are named by the identifier right before the parameter
    list, accepting a name wrapped in its own parentheses.

    Raises:
        EntryError: If no name can be found

    Example:
        >>> name_derive("typedef void (*foo_t)(int)")
        ('foo_t', <Category.TYPE: '3type'>)
        >>> name_derive("void *foo(int x)")
        ('foo', <Category.FUNCTION: '3'>)
    """
    if TYPEDEF.search(declaration):
        category = Category.TYPE
        match = FUNCTION_POINTER_NAME.search(declaration) or TRAILING_NAME.search(declaration)
    else:
        category = Category.FUNCTION
        match = PARENTHESIZED_NAME.search(declaration) or FUNCTION_NAME.search(declaration)

    if not match:
        raise EntryError(f"cannot derive a name from prototype {declaration.strip()!r}")

    return match.group(1), category


def prototype_parse(body: str) -> ApiEntry:
    """
    Parse one entry body into an ApiEntry

    The returned entry's description still contains its @apii{} tag;
    see apii_extract().

    Args:
        body: Content of one @APIEntry{} block

    Returns:
        ApiEntry with name, category, header and display prototype

    Raises:
        EntryError: Missing separator, missing terminating ';' or no name
    """
    split = prototype_split(body)

    terminated = TERMINATED.match(split.prototype)
    if not terminated:
        raise EntryError(f"prototype does not end with ';': {split.prototype.strip()!r}")

    name, category = name_derive(terminated.group(1))

    return ApiEntry(
        prototype=split.prototype.replace(ELLIPSIS_MACRO, ELLIPSIS_TEXT),
        description=split.description,
        name=name,
        category=category,
        header=appsettings.header_select(name),
    )


def stackUsage_readable(count: str) -> str:
    """
    Spell out stack counts: '|' means "or", '?' means unknown

    Example:
        >>> stackUsage_readable("0|1")
        '0 or 1'
    """
    return count.replace('|', ' or ').replace('?', 'unknown')


def apii_extract(description: str) -> Tuple[str, List[Apii]]:
    """
    Lift @apii{pops,pushes,e} tags out of a description

    Returns:
        Description with the tags removed, and the indicators found in
        document order (normally zero or one)

    Raises:
        EntryError: If a tag lacks one of its three fields
        SyntaxError: If a tag has unbalanced braces
    """
    found: List[Apii] = []

    def apii_store(content: str) -> str:
        match = APII_FIELDS.match(content)
        if not match:
            raise EntryError(f"@apii{{{content}}} needs pops, pushes and an error class")
        found.append(Apii(
            pops=stackUsage_readable(match.group(1)),
            pushes=stackUsage_readable(match.group(2)),
            error=match.group(3),
        ))
        return ""

    return tags_replace(description, 'apii', apii_store), found
