"""
Style rule and list context models

Defines how each @tag{} of the source format is resolved, and the list
rendering modes that @item{} depends on.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Callable, List, Optional


class StyleKind(Enum):
    """
    Resolution behaviour bound to a tag name

    The set is closed: the resolver dispatches on every member.
    """
    MACRO = "macro"              # @id{}, @emph{} -> "\n.B content\n"
    TRANSFORM = "transform"      # @Char{}, @item{}, @seeC{} -> handler decides
    SUPPRESS = "suppress"        # @apii{} -> ""
    PASSTHROUGH = "passthrough"  # @x{}, @N{} -> resolved content, unwrapped


class ListContext(Enum):
    """Active list rendering mode for @item{}"""
    NONE = "none"
    NAME_DESC = "name-desc"      # @description{}
    UNORDERED = "unordered"      # @itemize{}


@dataclass
class StyleRule:
    """
    Rule for one tag of the source format

    Attributes:
        name: Tag name (without leading @)
        kind: How the tag is resolved
        description: Human-readable description
        macro: Typesetting directive wrapping the content (MACRO only)
        handler: Transform function (node, resolver, context) -> str
                 (TRANSFORM only)
        examples: Example usage strings
    """
    name: str
    kind: StyleKind
    description: str
    macro: Optional[str] = None
    handler: Optional[Callable] = None
    examples: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.kind is StyleKind.MACRO and not self.macro:
            raise ValueError(f"Style '{self.name}' is a macro rule without a macro")
        if self.kind is StyleKind.TRANSFORM and self.handler is None:
            raise ValueError(f"Style '{self.name}' is a transform rule without a handler")
