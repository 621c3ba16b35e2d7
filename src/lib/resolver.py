"""
Recursive tag resolution

Turns parsed description nodes into ROFF text using the style registry.
All per-entry mutable state (list context, cross-references, warnings)
lives on a ResolutionContext owned by the caller.
"""

import re
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Set

from ..models.styles import StyleKind, ListContext
from .errors import EntryError
from .log import LOG, WARN
from .parser import Parser, Node, TextNode
from .styles import StyleRegistry


ENTITY = re.compile(r'@([A-Za-z]+)')


def entities_embolden(text: str) -> str:
    """
    Render bare entities such as @nil, @false or @fail in bold

    Example:
        >>> entities_embolden("returns @nil")
        'returns \\n.B nil\\n'
    """
    return ENTITY.sub(r'\n.B \1\n', text)


@dataclass
class ResolutionContext:
    """
    Mutable state of one entry's resolution

    Attributes:
        entry: Entry name, for messages
        strict: Raise on warnings instead of recording them
        list_context: Active list mode for @item{}
        see_also: Names collected from @seeC{}
        warnings: Recoverable problems met so far
    """
    entry: str = ""
    strict: bool = False
    list_context: ListContext = ListContext.NONE
    see_also: Set[str] = field(default_factory=set)
    warnings: List[str] = field(default_factory=list)

    @contextmanager
    def list_enter(self, kind: ListContext) -> Iterator[None]:
        """
        Make kind the list context while the block runs

        Raises:
            EntryError: If a list is already active (lists do not nest)
        """
        if self.list_context is not ListContext.NONE:
            raise EntryError(
                f"nested lists are not supported ({kind.value} inside {self.list_context.value})"
            )
        previous = self.list_context
        self.list_context = kind
        try:
            yield
        finally:
            self.list_context = previous

    def warning_record(self, message: str) -> None:
        """Record a recoverable problem, or raise it in strict mode"""
        if self.strict:
            raise EntryError(message)
        if self.entry:
            message = f"{self.entry}: {message}"
        self.warnings.append(message)
        WARN(message)


class Resolver:
    """
    Resolves @tag{} markup to ROFF text

    Example:
        >>> resolver = Resolver()
        >>> resolver.resolve("@emph{@id{foo}}", ResolutionContext())
        '\\n.I \\n.B foo\\n\\n'
    """

    def __init__(self, styles: Optional[StyleRegistry] = None, debug: bool = False) -> None:
        """
        Args:
            styles: Style registry (default: built-in)
            debug: Log every tag span found by the parser
        """
        self.styles = styles if styles is not None else StyleRegistry()
        self.debug = debug

    def resolve(self, source: str, context: ResolutionContext) -> str:
        """
        Resolve all tags of a text, then embolden the remaining entities

        Raises:
            SyntaxError: On unbalanced tag braces
            EntryError: On a fatal tag problem (see the list handlers)
        """
        return entities_embolden(self.text_resolve(source, context))

    def text_resolve(self, source: str, context: ResolutionContext) -> str:
        """Parse and resolve a text fragment (no entity pass)"""
        return self.nodes_resolve(Parser(source, debug=self.debug).parse(), context)

    def nodes_resolve(self, nodes: List[Node], context: ResolutionContext) -> str:
        """Resolve a sequence of sibling nodes, left to right"""
        return ''.join(self.node_resolve(node, context) for node in nodes)

    def node_resolve(self, node: Node, context: ResolutionContext) -> str:
        """
        Resolve a single node

        Unknown tags are reported and replaced by their raw content, which
        is not resolved any further.
        """
        if isinstance(node, TextNode):
            return node.text

        rule = self.styles.get(node.name)
        if rule is None:
            context.warning_record(f"@{node.name}{{}} at line {node.line_number} is not handled")
            return node.raw

        LOG(f"@{node.name}{{}} -> {rule.kind.value}", level=3)

        if rule.kind is StyleKind.MACRO:
            content = self.nodes_resolve(node.children, context)
            return f"\n{rule.macro} {content}\n"
        if rule.kind is StyleKind.PASSTHROUGH:
            return self.nodes_resolve(node.children, context)
        if rule.kind is StyleKind.SUPPRESS:
            return ""
        if rule.kind is StyleKind.TRANSFORM:
            return rule.handler(node, self, context)

        raise ValueError(f"Unhandled style kind {rule.kind!r} for @{node.name}{{}}")
