"""
Verbatim block protection and line normalization

@verbatim{} blocks are taken out of a description before anything else
touches it and put back, untouched, after tag resolution. The text around
them is reflowed: single newlines are soft wraps, the rest become
paragraph breaks.
"""

import re
from typing import List

from ..config import appsettings
from .parser import tags_replace


SOFT_NEWLINE = re.compile(r'(?<!\n)\n')
LINE_INDENT = re.compile(r'\n\s+', re.ASCII)
DOT_LINE = re.compile(r'\n(\.\s)', re.ASCII)
EXAMPLE_END_TRAILER = re.compile(r'(\n\.EE\n)\s+', re.ASCII)


def newlines_normalize(text: str) -> str:
    r"""
    Turn source line structure into paragraph directives

    A newline not preceded by another newline is soft wrapping and becomes
    a space; every other newline becomes a paragraph break.

    Example:
        >>> newlines_normalize("one\ntwo\n\nthree")
        'one two \n.P\nthree'
    """
    text = SOFT_NEWLINE.sub(' ', text)
    return text.replace('\n', '\n.P\n')


def lines_tidy(text: str) -> str:
    """
    Clean up resolved output line by line

    Strips whitespace at the start of every line (which also drops blank
    lines), and shields lines starting with ". " so troff does not read
    them as requests.
    """
    text = LINE_INDENT.sub('\n', text)
    return DOT_LINE.sub(r'\n.R \1', text)


class VerbatimBlocks:
    """
    Store of the verbatim blocks of one description

    Example:
        >>> blocks = VerbatimBlocks()
        >>> text = blocks.verbatim_protect("x @verbatim{a @rep{b}} y")
        >>> blocks.blocks
        ['a b']
        >>> blocks.verbatim_expand(text)
        'x \\n.EX\\na b\\n.EE\\ny'
    """

    def __init__(self) -> None:
        self.blocks: List[str] = []
        self.placeholder = re.compile(
            re.escape(appsettings.placeholder_prefix)
            + r'\d+'
            + re.escape(appsettings.placeholder_suffix)
        )

    def verbatim_protect(self, source: str) -> str:
        """
        Replace @verbatim{} blocks with placeholders

        Inside a block, @rep{x} is reduced to x; nothing else in the block
        is interpreted.

        Returns:
            Source with each block replaced by its placeholder

        Raises:
            SyntaxError: If a block has unbalanced braces
        """
        return tags_replace(source, 'verbatim', self.block_store)

    def block_store(self, content: str) -> str:
        """Store one block's content and return its placeholder"""
        content = tags_replace(content, 'rep', lambda rep: rep)
        self.blocks.append(content)
        return appsettings.placeHolder_make(len(self.blocks) - 1)

    def verbatim_expand(self, text: str) -> str:
        """
        Restore stored blocks as example blocks

        Each placeholder becomes "\\n.EX\\n<block>\\n.EE\\n"; whitespace right
        after a restored block is dropped so no blank paragraph follows it.
        """
        def block_restore(match: re.Match[str]) -> str:
            index = appsettings.verbatimIndex_extract(match.group(0))
            if index is None or index >= len(self.blocks):
                return match.group(0)
            return f"\n.EX\n{self.blocks[index]}\n.EE\n"

        text = self.placeholder.sub(block_restore, text)
        return EXAMPLE_END_TRAILER.sub(r'\1', text)
