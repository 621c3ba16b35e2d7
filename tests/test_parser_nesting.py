"""
Nesting parser tests - verify nested tag structure

Tests nested tags at various depths and validates that:
- Children hold the parsed content in order
- raw keeps the unparsed content for transforms
- Brace balance is respected when locating a tag's end
"""

import pytest

from ofman.lib.parser import Parser, TextNode, TagNode


class TestSingleLevelNesting:
    """Test tags with one level of nesting"""

    def test_single_child(self):
        """Single nested tag"""
        nodes = Parser("@emph{Hello @id{world}!}").parse()

        assert len(nodes) == 1
        emph = nodes[0]

        # Parent structure
        assert emph.name == "emph"
        assert emph.raw == "Hello @id{world}!"
        assert len(emph.children) == 3
        assert emph.children[0] == TextNode(text="Hello ")
        assert emph.children[2] == TextNode(text="!")

        # Child structure
        child = emph.children[1]
        assert child.name == "id"
        assert child.raw == "world"
        assert child.children == [TextNode(text="world")]

    def test_multiple_children_sequential(self):
        """Multiple nested tags in sequence"""
        nodes = Parser("@x{@id{one} @emph{two} @T{three}}").parse()

        tags = [c for c in nodes[0].children if isinstance(c, TagNode)]
        assert [t.name for t in tags] == ["id", "emph", "T"]
        assert [t.raw for t in tags] == ["one", "two", "three"]

    def test_same_name_nesting(self):
        """A tag nested in a tag of the same name does not close it early"""
        nodes = Parser("@emph{a @emph{b} c}").parse()

        assert len(nodes) == 1
        assert nodes[0].raw == "a @emph{b} c"
        assert nodes[0].children[1].name == "emph"
        assert nodes[0].children[2] == TextNode(text=" c")


class TestDeepNesting:
    """Test multiple levels of nesting"""

    def test_three_levels(self):
        """description > item > defid"""
        nodes = Parser("@description{@item{@defid{LUA_OK}| no errors}}").parse()

        description = nodes[0]
        item = description.children[0]
        defid = item.children[0]

        assert description.name == "description"
        assert item.name == "item"
        assert item.raw == "@defid{LUA_OK}| no errors"
        assert defid.name == "defid"
        assert defid.raw == "LUA_OK"

    def test_literal_braces_in_nested_tag(self):
        """Balanced braces inside a nested tag belong to that tag"""
        nodes = Parser("@item{@T{{}}| empty table}").parse()

        item = nodes[0]
        assert item.raw == "@T{{}}| empty table"
        assert item.children[0].name == "T"
        assert item.children[0].raw == "{}"
        assert item.children[1] == TextNode(text="| empty table")

    def test_nested_line_numbers(self):
        """Nested tags report their own line"""
        nodes = Parser("@itemize{\n@item{a}\n@item{b}}").parse()

        items = [c for c in nodes[0].children if isinstance(c, TagNode)]
        assert [i.line_number for i in items] == [2, 3]


class TestNestingErrors:
    """Test unbalanced nesting"""

    def test_unclosed_outer(self):
        """Outer tag missing its brace"""
        with pytest.raises(SyntaxError, match="Unmatched brace"):
            Parser("@emph{@id{x}").parse()

    def test_unclosed_inner_reported(self):
        """An inner tag that cannot close within its parent is fatal"""
        with pytest.raises(SyntaxError, match="Unmatched brace"):
            Parser("@emph{a @id{b} @T{c").parse()
