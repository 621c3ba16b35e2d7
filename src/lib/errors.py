"""
Exceptions raised while converting API entries
"""


class EntryError(Exception):
    """
    Raised when an entry cannot be converted

    Covers malformed prototypes, misplaced list items, incomplete @apii{}
    tags, unknown error classes, and (in strict mode) any warning.
    Unbalanced braces are reported as SyntaxError by the parser instead.
    """
    pass
