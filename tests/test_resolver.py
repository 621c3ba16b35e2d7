"""
Resolver tests - style rules applied to parsed markup

Covers macro, pass-through, suppressed and transform rules, unknown tags,
entities and cross-reference collection.
"""

import pytest

from ofman.lib.compiler import Compiler
from ofman.lib.errors import EntryError
from ofman.lib.resolver import Resolver, ResolutionContext, entities_embolden
from ofman.lib.styles import StyleRegistry
from ofman.models.styles import StyleKind


@pytest.fixture
def resolver():
    return Resolver()


@pytest.fixture
def context():
    return ResolutionContext(entry="lua_test")


class TestStyleRules:
    """Test each kind of style rule"""

    def test_passthrough_round_trip(self, resolver, context):
        """Pass-through on plain content returns it unchanged"""
        assert resolver.resolve("@x{plain text}", context) == "plain text"

    def test_macro_bold(self, resolver, context):
        """@id{} is wrapped in a bold directive"""
        assert resolver.resolve("@id{foo}", context) == "\n.B foo\n"

    def test_macro_italic(self, resolver, context):
        """@emph{} is wrapped in an italic directive"""
        assert resolver.resolve("@emph{foo}", context) == "\n.I foo\n"

    def test_nested_macros(self, resolver, context):
        """Italic wraps bold wraps foo"""
        assert resolver.resolve("@emph{@id{foo}}", context) == "\n.I \n.B foo\n\n"

    def test_suppressed(self, resolver, context):
        """A stray @apii{} leaves no trace"""
        assert resolver.resolve("a@apii{0,0,-}b", context) == "ab"

    def test_char(self, resolver, context):
        """@Char{} quotes its raw content"""
        assert resolver.resolve("@Char{%}", context) == "\n.B \"'%'\"\n"

    def test_text_untouched(self, resolver, context):
        """Text without tags or entities is returned as is"""
        assert resolver.resolve("no markup here", context) == "no markup here"


class TestUnknownTags:
    """Test the fallback for tags without a rule"""

    def test_raw_content_substituted(self, resolver, context):
        """Unknown tag yields its raw content, unresolved"""
        assert resolver.text_resolve("@bogus{@id{x}}", context) == "@id{x}"

    def test_warning_recorded(self, resolver, context):
        """Unknown tag is recorded as a warning naming the entry"""
        resolver.resolve("@bogus{x}", context)

        assert len(context.warnings) == 1
        assert context.warnings[0].startswith("lua_test: ")
        assert "@bogus{}" in context.warnings[0]

    def test_strict_mode_raises(self, resolver):
        """Strict mode turns the warning into an error"""
        strict = ResolutionContext(entry="lua_test", strict=True)
        with pytest.raises(EntryError, match="not handled"):
            resolver.resolve("@bogus{x}", strict)


class TestEntities:
    """Test bare @word entities"""

    def test_entity_bold(self, resolver, context):
        """@nil becomes a bold word"""
        assert resolver.resolve("returns @nil.", context) == "returns \n.B nil\n."

    def test_entities_embolden_function(self):
        """The entity pass works on plain strings"""
        assert entities_embolden("@true or @false") == "\n.B true\n or \n.B false\n"


class TestReferences:
    """Test external and C API references"""

    def test_external_reference(self, resolver, context):
        """@see{} points into the Lua manual"""
        assert resolver.resolve("@see{lua_newstate}", context) == "(see \n.I lua_newstate\nin Lua manual)"
        assert context.see_also == set()

    def test_function_reference_is_external(self, resolver, context):
        """@seeF{} renders like @see{}"""
        assert resolver.resolve("@seeF{pcall}", context) == "(see \n.I pcall\nin Lua manual)"

    def test_api_reference(self, resolver, context):
        """@seeC{} strips whitespace and collects the name"""
        assert resolver.resolve("@seeC{ lua_pop }", context) == "(see \n.BR lua_pop(3) )\n"
        assert context.see_also == {"lua_pop"}

    def test_api_reference_dedup(self, resolver, context):
        """Repeated references are collected once"""
        resolver.resolve("@seeC{lua_pushnil} @seeC{lua_pop} @emph{@seeC{lua_pushnil}}", context)
        assert sorted(context.see_also) == ["lua_pop", "lua_pushnil"]

    def test_references_are_per_context(self, resolver):
        """Each context owns its own references"""
        first = ResolutionContext(entry="a")
        second = ResolutionContext(entry="b")
        resolver.resolve("@seeC{lua_pop}", first)
        resolver.resolve("@seeC{lua_settop}", second)

        assert first.see_also == {"lua_pop"}
        assert second.see_also == {"lua_settop"}

    def test_api_reference_keeps_non_breaking_space(self, resolver, context):
        """Only ASCII whitespace is stripped from @seeC{}"""
        resolver.resolve("@seeC{lua_\u00a0pop}", context)
        assert context.see_also == {"lua_\u00a0pop"}

    def test_empty_api_reference_warns(self, resolver, context):
        """An empty @seeC{} is not collected"""
        resolver.resolve("@seeC{ }", context)
        assert context.see_also == set()
        assert len(context.warnings) == 1


class TestRegistry:
    """Test the style table itself"""

    def test_known_kinds(self):
        """Every tag of the vocabulary has the expected kind"""
        styles = StyleRegistry()
        expected = {
            "id": StyleKind.MACRO,
            "defid": StyleKind.MACRO,
            "Lid": StyleKind.MACRO,
            "idx": StyleKind.MACRO,
            "T": StyleKind.MACRO,
            "emph": StyleKind.MACRO,
            "def": StyleKind.MACRO,
            "Q": StyleKind.MACRO,
            "x": StyleKind.PASSTHROUGH,
            "N": StyleKind.PASSTHROUGH,
            "apii": StyleKind.SUPPRESS,
            "Char": StyleKind.TRANSFORM,
            "description": StyleKind.TRANSFORM,
            "itemize": StyleKind.TRANSFORM,
            "item": StyleKind.TRANSFORM,
            "see": StyleKind.TRANSFORM,
            "seeF": StyleKind.TRANSFORM,
            "seeC": StyleKind.TRANSFORM,
        }
        for name, kind in expected.items():
            assert styles.get(name).kind is kind, name

    def test_unknown_is_none(self):
        """Lookups are case sensitive"""
        assert StyleRegistry().get("char") is None


class TestDebug:
    """Test parser debug output"""

    @pytest.fixture
    def logged(self, monkeypatch):
        messages = []
        monkeypatch.setattr("ofman.lib.log.LOG", lambda message, level=1: messages.append(message))
        return messages

    def test_debug_logs_tag_spans(self, logged, context):
        """With debug on, every tag span found is logged"""
        Resolver(debug=True).resolve("@id{x}", context)
        assert "@id{} at 0..5" in logged

    def test_quiet_by_default(self, logged, context):
        Resolver().resolve("@id{x}", context)
        assert logged == []

    def test_compiler_passes_debug(self):
        assert Compiler(debug=True).resolver.debug is True
        assert Compiler().resolver.debug is False
