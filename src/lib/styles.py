"""
Style rules for the tags of the source format

Each rule turns one @tag{} into ROFF text. Rules are grouped the way the
Lua reference manual uses its tags: inline styles, lists, references and
entry metadata.
"""

import re
from typing import Any, Dict, Optional

from ..config import appsettings
from ..models.styles import StyleRule, StyleKind, ListContext
from .errors import EntryError


ITEM_TERM = re.compile(r'([^|]+)\|(.+)', re.DOTALL)
WHITESPACE = re.compile(r'\s', re.ASCII)


class StyleRegistry:
    """
    Registry of style rules

    Maps tag names to StyleRule objects. Built once per run and only read
    afterwards.
    """

    def __init__(self) -> None:
        """Initialize the registry and register all built-in styles"""
        self.specs: Dict[str, StyleRule] = {}
        self.macroStyles_register()
        self.passthroughStyles_register()
        self.listStyles_register()
        self.referenceStyles_register()
        self.metadataStyles_register()

    def register(self, spec: StyleRule) -> None:
        """Register a style rule"""
        self.specs[spec.name] = spec

    def get(self, name: str) -> Optional[StyleRule]:
        """
        Get the style rule for a tag name

        Args:
            name: Tag name to look up (case sensitive: Char, not char)

        Returns:
            StyleRule or None if the tag is unknown
        """
        return self.specs.get(name)

    def macroStyles_register(self) -> None:
        """Register tags that wrap their resolved content in a font macro"""

        macro_specs = [
            ('id', '.B', 'Identifier', ['@id{lua_State}']),
            ('defid', '.B', 'Identifier being defined', ['@defid{LUA_OK}']),
            ('Lid', '.B', 'Lua library identifier', ['@Lid{print}']),
            ('idx', '.B', 'Indexed term', ['@idx{metatable}']),
            ('T', '.B', 'Type or code fragment', ['@T{lua_Integer}']),
            ('emph', '.I', 'Emphasized text', ['@emph{not}']),
            ('def', '.I', 'Term being defined', ['@def{upvalue}']),
            ('Q', '.I', 'Quoted text', ['@Q{n}']),
        ]

        for name, macro, desc, examples in macro_specs:
            self.register(StyleRule(
                name=name,
                kind=StyleKind.MACRO,
                description=desc,
                macro=macro,
                examples=examples
            ))

        def char_handler(node: Any, resolver: Any, context: Any) -> str:
            """Handle @Char{} - a literal character, quoted and bold"""
            return f"\n.B \"'{node.raw}'\"\n"

        self.register(StyleRule(
            name='Char',
            kind=StyleKind.TRANSFORM,
            description='Literal character',
            handler=char_handler,
            examples=['@Char{\\0}']
        ))

    def passthroughStyles_register(self) -> None:
        """Register tags whose content is kept without any wrapping"""

        self.register(StyleRule(
            name='x',
            kind=StyleKind.PASSTHROUGH,
            description='Plain text',
            examples=['@x{lua_Integer}']
        ))

        self.register(StyleRule(
            name='N',
            kind=StyleKind.PASSTHROUGH,
            description='Text kept on one line',
            examples=['@N{Lua 5.4}']
        ))

    def listStyles_register(self) -> None:
        """
        Register list tags

        @description{} and @itemize{} set the list context for the extent
        of their content; @item{} renders according to it.
        """

        def description_handler(node: Any, resolver: Any, context: Any) -> str:
            """Handle @description{} - name/description list"""
            with context.list_enter(ListContext.NAME_DESC):
                content = resolver.nodes_resolve(node.children, context)
            return content + "\n.P\n"

        def itemize_handler(node: Any, resolver: Any, context: Any) -> str:
            """Handle @itemize{} - unordered list, emulated with an indented block"""
            with context.list_enter(ListContext.UNORDERED):
                content = resolver.nodes_resolve(node.children, context)
            return "\n.RS\n" + content + "\n.RE\n.P\n"

        def item_handler(node: Any, resolver: Any, context: Any) -> str:
            """Handle @item{} - one entry of the enclosing list"""
            if context.list_context is ListContext.NAME_DESC:
                # A pipe splits the name and the description
                match = ITEM_TERM.search(node.raw)
                if not match:
                    raise EntryError(
                        f"@item{{}} at line {node.line_number} has no '|' "
                        f"between name and description"
                    )
                name = resolver.text_resolve(match.group(1), context)
                desc = resolver.text_resolve(match.group(2), context)
                return f"\n.TP\n{name}\n{desc}\n"
            if context.list_context is ListContext.UNORDERED:
                return "\n.P\n" + resolver.nodes_resolve(node.children, context)
            raise EntryError(f"Item outside a list at line {node.line_number}")

        self.register(StyleRule(
            name='description',
            kind=StyleKind.TRANSFORM,
            description='Name/description list',
            handler=description_handler,
            examples=['@description{@item{@defid{LUA_OK}| no errors.}}']
        ))

        self.register(StyleRule(
            name='itemize',
            kind=StyleKind.TRANSFORM,
            description='Unordered list',
            handler=itemize_handler,
            examples=['@itemize{@item{first} @item{second}}']
        ))

        self.register(StyleRule(
            name='item',
            kind=StyleKind.TRANSFORM,
            description='List item',
            handler=item_handler,
            examples=['@item{@id{LUA_TNIL}| the nil type}', '@item{plain item}']
        ))

    def referenceStyles_register(self) -> None:
        """Register cross-reference tags"""

        def external_handler(node: Any, resolver: Any, context: Any) -> str:
            """Handle @see{}/@seeF{} - reference into the reference manual"""
            return f"(see \n.I {node.raw}\nin {appsettings.reference_manual})"

        def api_handler(node: Any, resolver: Any, context: Any) -> str:
            """Handle @seeC{} - reference to another C API manpage"""
            ref = WHITESPACE.sub('', node.raw)
            if ref:
                context.see_also.add(ref)
            else:
                context.warning_record(f"empty @seeC{{}} at line {node.line_number}")
            return f"(see \n.BR {ref}(3) )\n"

        self.register(StyleRule(
            name='see',
            kind=StyleKind.TRANSFORM,
            description='Reference to a section of the Lua manual',
            handler=external_handler,
            examples=['@see{metatable}']
        ))

        # @seeF{} may name a C function too; it is still rendered as external
        self.register(StyleRule(
            name='seeF',
            kind=StyleKind.TRANSFORM,
            description='Reference to a Lua function in the manual',
            handler=external_handler,
            examples=['@seeF{pcall}']
        ))

        self.register(StyleRule(
            name='seeC',
            kind=StyleKind.TRANSFORM,
            description='Reference to a C API entry (collected for SEE ALSO)',
            handler=api_handler,
            examples=['@seeC{lua_pushnil}']
        ))

    def metadataStyles_register(self) -> None:
        """
        Register metadata tags

        @apii{} is lifted out of the description before resolution; the
        rule only guarantees that a stray one leaves no trace.
        """

        self.register(StyleRule(
            name='apii',
            kind=StyleKind.SUPPRESS,
            description='API indicator: pops, pushes, error class',
            examples=['@apii{0,1,m}']
        ))
