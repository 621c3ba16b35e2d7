"""
Compiler for API entries to manpages

Converts each @APIEntry{} block of a source document into a complete
ROFF manpage.
"""

import re
import datetime
from typing import List, Optional
from pathlib import Path

from ..config import appsettings
from ..models.entry import Apii, ApiEntry, Manpage
from .errors import EntryError
from .log import LOG
from .parser import entries_extract
from .prototype import prototype_parse, apii_extract
from .resolver import Resolver, ResolutionContext
from .styles import StyleRegistry
from .verbatim import VerbatimBlocks, newlines_normalize, lines_tidy


ERROR_DESCRIPTIONS = {
    '-': "This function never raises any error.",
    'm': "This function only raises out-of-memory error.",
    'v': "Errors that could be raised are described in DESCRIPTION.",
    'e': "This function can run arbitrary Lua code, any error could be raised.",
}

PROTOTYPE_LINE = re.compile(r'\n+([^\n]+)')


class Compiler:
    """
    Compiles a source document to one manpage per entry

    Responsibilities:
    - Split the document into entries
    - Parse prototypes and @apii{} metadata
    - Format descriptions (verbatim, paragraphs, tags, entities)
    - Assemble the manpage sections
    """

    def __init__(
        self,
        source: str = "",
        date: Optional[str] = None,
        strict: Optional[bool] = None,
        styles: Optional[StyleRegistry] = None,
        debug: bool = False,
    ) -> None:
        """
        Initialize compiler

        Args:
            source: Complete source document
            date: Date for the .TH line (default: today in appsettings.date_format)
            strict: Treat warnings as errors (default: appsettings.strict_mode)
            styles: Style registry to resolve tags with (default: built-in)
            debug: Enable parser debug output
        """
        self.source = source
        self.date = date if date is not None else datetime.date.today().strftime(appsettings.date_format)
        self.strict = appsettings.strict_mode if strict is None else strict
        self.resolver = Resolver(styles, debug=debug)

    def compile(self) -> List[Manpage]:
        """
        Convert every entry of the source document, in document order

        Returns:
            One Manpage per entry (empty list when there are none)

        Raises:
            SyntaxError: If an entry block itself is unbalanced
            EntryError: On the first entry that cannot be converted
        """
        bodies = entries_extract(self.source)
        LOG(f"Found {len(bodies)} entries", level=2)
        return [self.entry_convert(body, index) for index, body in enumerate(bodies, start=1)]

    def entry_convert(self, body: str, index: int = 1) -> Manpage:
        """
        Convert one entry body to a manpage

        Args:
            body: Content of one @APIEntry{} block
            index: Position of the entry in the document, for messages

        Returns:
            Manpage with text, sorted cross-references and warnings

        Raises:
            EntryError: Any fatal condition, prefixed with the entry's name
                        (or its position when no name could be derived)
        """
        label = f"entry #{index}"
        try:
            entry = prototype_parse(body)
            label = entry.name
            LOG(f"Converting {entry.name} ({entry.category.value})", level=2)

            context = ResolutionContext(entry=entry.name, strict=self.strict)

            entry.description, indicators = apii_extract(entry.description)
            if not indicators:
                context.warning_record("misses an apii tag")
            else:
                if len(indicators) > 1:
                    context.warning_record(f"has {len(indicators)} apii tags, the last one is used")
                entry.apii = indicators[-1]

            description = self.description_format(entry.description, context)
            see_also = sorted(context.see_also)
            text = self.manpage_assemble(entry, description, see_also)
        except (EntryError, SyntaxError) as e:
            raise EntryError(f"{label}: {str(e).strip()}") from e

        return Manpage(
            name=entry.name,
            category=entry.category,
            text=text,
            see_also=see_also,
            warnings=context.warnings,
        )

    def description_format(self, description: str, context: ResolutionContext) -> str:
        """
        Format a description as ROFF text

        Order matters: verbatim blocks are protected before newlines are
        normalized, and newlines are normalized before tags are resolved so
        the directives emitted by tags keep their own line breaks.
        """
        blocks = VerbatimBlocks()
        text = blocks.verbatim_protect(description)
        text = newlines_normalize(text)
        text = self.resolver.resolve(text, context)
        text = lines_tidy(text)
        return blocks.verbatim_expand(text)

    def manpage_assemble(self, entry: ApiEntry, description: str, see_also: List[str]) -> str:
        """
        Assemble the sections of one manpage

        Sections: title, NAME, SYNOPSIS, DESCRIPTION, then ERRORS and STACK
        USAGE when the entry has an @apii{}, then SEE ALSO when it refers to
        other entries. The text always ends with a newline.
        """
        lines = [
            self.header_generate(entry),
            f".SH NAME\n{entry.name}",
        ]
        lines.extend(self.synopsis_generate(entry))
        lines.append(".SH DESCRIPTION\n")
        lines.append(description)

        if entry.apii is not None:
            lines.extend(self.errors_generate(entry.apii))
            lines.extend(self.stackUsage_generate(entry.apii))

        if see_also:
            lines.extend(self.seeAlso_generate(see_also))

        # avoid a missing newline at the end of file
        lines.append("")

        return '\n'.join(lines)

    def header_generate(self, entry: ApiEntry) -> str:
        """Title line"""
        return (
            f'.TH {entry.name} {entry.category.value} "{self.date}" "" '
            f'"{appsettings.manual_title}"'
        )

    def synopsis_generate(self, entry: ApiEntry) -> List[str]:
        """Include line and the prototype, one bold line per source line"""
        prototype = PROTOTYPE_LINE.sub(
            lambda match: f'\n.B "{match.group(1)}"', '\n' + entry.prototype
        )
        return [
            ".SH SYNOPSIS",
            ".nf",
            f".B #include <{entry.header}>",
            ".P" + prototype,
            ".fi",
        ]

    def errors_generate(self, apii: Apii) -> List[str]:
        """
        ERRORS section for an error class

        Raises:
            EntryError: If the class has no description
        """
        try:
            text = ERROR_DESCRIPTIONS[apii.error]
        except KeyError:
            raise EntryError(f"unknown error class {apii.error!r} in @apii{{}}") from None
        return [".SH ERRORS", f".P\n{text}"]

    def stackUsage_generate(self, apii: Apii) -> List[str]:
        """STACK USAGE section"""
        return [
            ".SH STACK USAGE",
            f".TP\n.B Push\n{apii.pushes}",
            f".TP\n.B Pop\n{apii.pops}",
        ]

    def seeAlso_generate(self, see_also: List[str]) -> List[str]:
        """SEE ALSO section; see_also must be sorted and non-empty"""
        lines = [".SH SEE ALSO"]
        lines.extend(f".BR {ref} (3)," for ref in see_also[:-1])
        lines.append(f".BR {see_also[-1]} (3)")
        return lines


def manpage_write(page: Manpage, output_dir: Path) -> Path:
    """
    Write one manpage as <name>.<category> into output_dir

    Returns:
        Path of the written file
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / page.filename
    print(f"writing {page.name} to {path}")
    path.write_text(page.text, encoding='utf-8')
    LOG(f"Wrote {len(page.text)} characters to {path}", level=3)
    return path
