"""
List tests - @description{}, @itemize{} and @item{}

Validates that list context is set for the extent of a list tag, restored
afterwards, never leaks to siblings, and that misplaced items are fatal.
"""

import pytest

from ofman.lib.errors import EntryError
from ofman.lib.resolver import Resolver, ResolutionContext
from ofman.models.styles import ListContext


@pytest.fixture
def resolver():
    return Resolver()


@pytest.fixture
def context():
    return ResolutionContext(entry="lua_test")


class TestNameDescriptionList:
    """Test @description{} lists"""

    def test_single_item(self, resolver, context):
        """Term and definition are split on the first pipe"""
        result = resolver.text_resolve("@description{@item{@id{a}|first}}", context)
        assert result == "\n.TP\n\n.B a\n\nfirst\n\n.P\n"

    def test_definition_keeps_later_pipes(self, resolver, context):
        """Only the first pipe separates"""
        result = resolver.text_resolve("@description{@item{a|b|c}}", context)
        assert result == "\n.TP\na\nb|c\n\n.P\n"

    def test_definition_resolved(self, resolver, context):
        """Tags in the definition are resolved too"""
        result = resolver.text_resolve("@description{@item{n|see @seeC{lua_pop}}}", context)
        assert "\n.TP\nn\nsee (see \n.BR lua_pop(3) )\n" in result
        assert context.see_also == {"lua_pop"}

    def test_item_without_pipe(self, resolver, context):
        """A name/description item needs a pipe"""
        with pytest.raises(EntryError, match="no '\\|'"):
            resolver.text_resolve("@description{@item{just text}}", context)


class TestUnorderedList:
    """Test @itemize{} lists"""

    def test_items(self, resolver, context):
        """Items become paragraphs inside an indented block"""
        result = resolver.text_resolve("@itemize{@item{one}@item{@emph{two}}}", context)
        assert result == "\n.RS\n\n.P\none\n.P\n\n.I two\n\n.RE\n.P\n"

    def test_pipe_is_text(self, resolver, context):
        """A pipe has no meaning in an unordered item"""
        result = resolver.text_resolve("@itemize{@item{a|b}}", context)
        assert "\n.P\na|b" in result


class TestListContext:
    """Test context handling around list tags"""

    def test_item_outside_list(self, resolver, context):
        """An item with no enclosing list is fatal"""
        with pytest.raises(EntryError, match="Item outside a list"):
            resolver.resolve("@item{orphan}", context)

    def test_item_inside_other_tag_outside_list(self, resolver, context):
        """Wrapping an item in a non-list tag does not make a list"""
        with pytest.raises(EntryError, match="Item outside a list"):
            resolver.resolve("@emph{@item{orphan}}", context)

    def test_context_restored(self, resolver, context):
        """List context is NONE again after the list"""
        resolver.resolve("@itemize{@item{a}}", context)
        assert context.list_context is ListContext.NONE

    def test_no_leak_to_sibling(self, resolver, context):
        """An item after a closed list is outside any list"""
        with pytest.raises(EntryError, match="Item outside a list"):
            resolver.resolve("@itemize{@item{a}} @item{b}", context)

    def test_sibling_lists(self, resolver, context):
        """Consecutive lists each get their own context"""
        result = resolver.text_resolve(
            "@description{@item{a|b}}@itemize{@item{c}}", context
        )
        assert "\n.TP\na\nb\n" in result
        assert "\n.RS\n\n.P\nc\n.RE\n" in result

    def test_nested_lists_rejected(self, resolver, context):
        """Lists do not nest"""
        with pytest.raises(EntryError, match="nested lists"):
            resolver.resolve("@description{@item{a|@itemize{@item{b}}}}", context)

    def test_context_restored_after_error(self, resolver, context):
        """A failing list still restores the context"""
        with pytest.raises(EntryError):
            resolver.resolve("@itemize{@description{@item{a|b}}}", context)
        assert context.list_context is ListContext.NONE
