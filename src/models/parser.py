"""
Parser-specific data models

Type-safe structures for parser operations and return values.
"""

from dataclasses import dataclass


@dataclass
class TagMatch:
    """
    Result of finding a tag pattern in source text

    Returned by Parser.tag_find() when an @tag{ pattern is located.

    Attributes:
        name: The tag name (e.g., "emph", "seeC", "verbatim")
        position: Character position in source where the '@' is
        brace: Character position of the opening '{'

    Example:
        For source "see @id{x}" at position 0:
        TagMatch(name="id", position=4, brace=7)
    """
    name: str
    position: int
    brace: int


@dataclass
class TagSpan:
    """
    A complete @tag{content} occurrence with its braces matched

    Returned by tags_find() for the pre-passes that work on raw text
    (entry extraction, @apii{}, @verbatim{}, @rep{}).

    Attributes:
        start: Position of the '@'
        end: Position just past the closing '}'
        content: Text between the braces
    """
    start: int
    end: int
    content: str


@dataclass
class PrototypeSplit:
    """
    An entry body divided at its first '|'

    Attributes:
        prototype: Declaration text, e.g. "int lua_gettop (lua_State *L);"
        description: Everything after the separator
    """
    prototype: str
    description: str
