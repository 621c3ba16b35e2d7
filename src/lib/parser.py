"""
Parser for @tag{} syntax

Transforms description markup into an abstract syntax tree (AST) of text
and tag nodes, and provides the brace-aware scanning helpers used by the
raw-text passes (entry extraction, @apii{}, @verbatim{}).

The parser operates in two phases:
1. Scanning: Locate @tag{ patterns in source text
2. Processing: Match braces, recurse into content, create AST nodes

Key features:
- Recursive descent over nested tags
- Brace depth tracking for proper nesting
- Raw content kept on every tag node for transforms that need it
- Line number tracking for error reporting

Example:
    >>> nodes = Parser("see @emph{@id{foo}}").parse()
    >>> nodes[1].name
    'emph'
    >>> nodes[1].children[0].name
    'id'
"""

import re
from typing import Callable, Iterator, List, Optional, Union
from dataclasses import dataclass

from ..config import appsettings
from ..models.parser import TagMatch, TagSpan


TAG_PATTERN = re.compile(r'@([A-Za-z]+)\{')


@dataclass
class TextNode:
    """Literal text between tags"""
    text: str


@dataclass
class TagNode:
    """
    Represents one @tag{} in the source

    Attributes:
        name: Tag name (e.g., "emph", "item", "seeC")
        raw: Content between the braces, unparsed
        children: Parsed content as text and tag nodes
        line_number: Source line number where the tag appears

    Example:
        For source "@emph{a @id{b}}" at line 1:
        TagNode(
            name="emph",
            raw="a @id{b}",
            children=[
                TextNode(text="a "),
                TagNode(name="id", raw="b", children=[TextNode(text="b")], line_number=1)
            ],
            line_number=1
        )
    """
    name: str
    raw: str
    children: List['Node']
    line_number: int


Node = Union[TextNode, TagNode]


def braces_match(source: str, start_pos: int, end_pos: Optional[int] = None) -> int:
    """
    Find the closing brace matching the opening brace at start_pos

    Scans forward tracking nesting depth: increments on '{', decrements on
    '}', and returns the position where depth reaches 0.

    Args:
        source: Text being scanned
        start_pos: Position of the opening '{'
        end_pos: Position to stop scanning at (default: end of source)

    Returns:
        Position of the matching '}'

    Raises:
        SyntaxError: If the scan ends before depth returns to 0

    Example:
        For "@Char{{}}" with start_pos=5: returns 8
        Depth tracking: {1 {2 }1 }0
    """
    if end_pos is None:
        end_pos = len(source)

    depth = 1
    pos = start_pos + 1

    while pos < end_pos and depth > 0:
        if source[pos] == '{':
            depth += 1
        elif source[pos] == '}':
            depth -= 1
        pos += 1

    if depth != 0:
        line = source.count('\n', 0, start_pos) + 1
        raise SyntaxError(f"Unmatched brace at line {line}, position {start_pos}")

    return pos - 1


def tags_find(source: str, name: str) -> Iterator[TagSpan]:
    """
    Yield every top-level @name{...} occurrence in document order

    Occurrences nested inside another @name{} are part of the outer
    span's content and are not yielded separately.

    Raises:
        SyntaxError: If an occurrence has no matching closing brace
    """
    pattern = re.compile(r'@' + re.escape(name) + r'\{')
    pos = 0

    while True:
        match = pattern.search(source, pos)
        if not match:
            return
        brace_start = match.end() - 1
        brace_end = braces_match(source, brace_start)
        yield TagSpan(
            start=match.start(),
            end=brace_end + 1,
            content=source[brace_start + 1:brace_end],
        )
        pos = brace_end + 1


def tags_replace(source: str, name: str, replace: Callable[[str], str]) -> str:
    """
    Replace every @name{content} with replace(content)

    Example:
        >>> tags_replace("a @rep{b} c", "rep", lambda c: c)
        'a b c'
    """
    result = []
    pos = 0
    for span in tags_find(source, name):
        result.append(source[pos:span.start])
        result.append(replace(span.content))
        pos = span.end
    result.append(source[pos:])
    return ''.join(result)


def entries_extract(source: str, tag: Optional[str] = None) -> List[str]:
    """
    Split a source document into the bodies of its entry blocks

    Args:
        source: Complete source document
        tag: Entry wrapper tag (default: appsettings.entry_tag, "APIEntry")

    Returns:
        Content of each @APIEntry{...} block, in document order. An empty
        list when the document has none.

    Raises:
        SyntaxError: If an entry block has unbalanced braces
    """
    if tag is None:
        tag = appsettings.entry_tag
    return [span.content for span in tags_find(source, tag)]


class Parser:
    """
    Parser for @tag{content} syntax

    Handles:
    - Nested tags of the same or different names
    - Literal braces inside tag content (kept balanced)
    - Bare @word entities (left as text for the resolver)
    - Error reporting with line numbers
    """

    def __init__(self, source: str, debug: bool = False) -> None:
        """
        Initialize parser with source text

        Args:
            source: Description text, already normalized
            debug: Enable debug output for parser operations
        """
        self.source = source
        self.debug = debug
        self.position = 0

    def parse(self) -> List[Node]:
        """
        Parse source text into a list of nodes

        Returns:
            Text and tag nodes covering the whole source. Returns an empty
            list for empty source.

        Raises:
            SyntaxError: If a tag's braces are unbalanced

        Example:
            >>> Parser("a @id{b}").parse()
            [TextNode(text='a '), TagNode(name='id', raw='b', ...)]
        """
        if not self.source:
            return []
        return self.nodes_parse(0, len(self.source))

    def nodes_parse(self, start: int, end: int) -> List[Node]:
        """
        Recursively parse source[start:end] into nodes

        Each tag's content is parsed by a recursive call over the span
        between its braces, so depth of recursion equals tag nesting depth.
        """
        nodes: List[Node] = []
        pos = start

        while pos < end:
            self.position = pos
            match = self.tag_find(pos, end)
            if not match:
                nodes.append(TextNode(text=self.source[pos:end]))
                break

            if match.position > pos:
                nodes.append(TextNode(text=self.source[pos:match.position]))

            close_pos = self.brace_findMatching(match.brace, end)

            if self.debug:
                from .log import LOG
                LOG(f"@{match.name}{{}} at {match.position}..{close_pos}", level=3)

            nodes.append(TagNode(
                name=match.name,
                raw=self.source[match.brace + 1:close_pos],
                children=self.nodes_parse(match.brace + 1, close_pos),
                line_number=self.line_at(match.position),
            ))
            pos = close_pos + 1

        return nodes

    def tag_find(self, start: int, end: int) -> Optional[TagMatch]:
        """
        Find next @tag{ pattern in source[start:end]

        Tag names are ASCII letters only; '@' followed by letters but no
        opening brace is an entity, not a tag.

        Returns:
            TagMatch with name and positions, or None if no more tags

        Example:
            For source "text @emph{hi}" at start 0:
            Returns TagMatch(name="emph", position=5, brace=10)
        """
        match = TAG_PATTERN.search(self.source, start, end)
        if not match:
            return None
        return TagMatch(name=match.group(1), position=match.start(), brace=match.end() - 1)

    def brace_findMatching(self, start_pos: int, end_pos: Optional[int] = None) -> int:
        """
        Find matching closing brace, raising a contextual SyntaxError

        Args:
            start_pos: Character position of opening '{' in source
            end_pos: Limit of the enclosing span

        Returns:
            Character position of matching closing '}'
        """
        try:
            return braces_match(self.source, start_pos, end_pos)
        except SyntaxError as e:
            self.position = start_pos
            self.error(str(e))
            raise

    def line_at(self, position: int) -> int:
        """Line number (1-based) of a source position"""
        return self.source.count('\n', 0, position) + 1

    def error(self, message: str) -> None:
        """
        Report parser error with source context

        Raises SyntaxError with the message, line number, ±40 characters of
        context and a caret pointing at the error position.

        Raises:
            SyntaxError: Always (this is an error reporting function)
        """
        context_start = max(0, self.position - 40)
        context_end = min(len(self.source), self.position + 40)
        context = self.source[context_start:context_end]

        raise SyntaxError(
            f"\n{message}\n"
            f"Line {self.line_at(self.position)}, position {self.position}\n"
            f"Context: ...{context}...\n"
            f"         {' ' * (self.position - context_start)}^"
        )
