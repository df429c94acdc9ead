"""Tests for the immutable syntax tree."""

import dataclasses

import pytest

from sharpdoc.syntax.tree import SyntaxNode, SyntaxTree, replace_at
from sharpdoc.syntax.trivia import end_of_line, line_comment, whitespace


class TestSyntaxNode:
    def test_text_with_and_without_trivia(self):
        node = SyntaxNode(
            kind="field_declaration",
            parts=("int x;",),
            leading_trivia=(end_of_line(), whitespace("  ")),
        )
        assert node.to_string() == "int x;"
        assert node.to_full_string() == "\n  int x;"

    def test_nested_text(self, simple_tree):
        assert simple_tree.to_full_string() == "class A\n{\n    int x;\n}\n"

    def test_frozen(self):
        node = SyntaxNode(kind="x")
        with pytest.raises(dataclasses.FrozenInstanceError):
            node.kind = "y"

    def test_with_leading_trivia_copies(self):
        node = SyntaxNode(kind="x", parts=("a",))
        updated = node.with_leading_trivia([line_comment("// c"), end_of_line()])
        assert node.leading_trivia == ()
        assert updated.to_full_string() == "// c\na"

    def test_children(self, simple_tree):
        (cls,) = simple_tree.root.children
        assert cls.kind == "class_declaration"
        assert [child.kind for child in cls.children] == ["field_declaration"]


class TestReplaceAt:
    def test_empty_path_replaces_root(self):
        root = SyntaxNode(kind="a")
        new = SyntaxNode(kind="b")
        assert replace_at(root, (), new) is new

    def test_raw_text_part_raises(self, simple_tree):
        with pytest.raises(KeyError):
            replace_at(simple_tree.root, (1,), SyntaxNode(kind="x"))

    def test_structural_sharing(self):
        left = SyntaxNode(kind="left", parts=("L",))
        target = SyntaxNode(kind="target", parts=("T",))
        right = SyntaxNode(kind="right", parts=("R",))
        inner = SyntaxNode(kind="inner", parts=(target, right))
        root = SyntaxNode(kind="root", parts=(left, inner))

        new_root = replace_at(root, (1, 0), target.with_leading_trivia([whitespace(" ")]))

        assert new_root is not root
        assert new_root.parts[0] is left
        assert new_root.parts[1] is not inner
        assert new_root.parts[1].parts[1] is right
        assert new_root.to_full_string() == "L TR"
        assert root.to_full_string() == "LTR"


class TestSyntaxTree:
    def test_node_at(self, simple_tree):
        assert simple_tree.node_at((0, 1)).kind == "field_declaration"

    def test_with_leading_trivia_rebuilds_ancestors(self, simple_tree):
        trivia = (end_of_line(), line_comment("    /// x"), end_of_line(), whitespace("    "))
        updated = simple_tree.with_leading_trivia((0, 1), trivia)
        assert updated.to_full_string() == "class A\n{\n    /// x\n    int x;\n}\n"
        assert simple_tree.to_full_string() == "class A\n{\n    int x;\n}\n"
        assert updated.source == simple_tree.source

    def test_walk_is_preorder(self, simple_tree):
        kinds = [node.kind for _, node in simple_tree.walk()]
        assert kinds == ["compilation_unit", "class_declaration", "field_declaration"]

    def test_indentation_of(self, simple_tree):
        assert simple_tree.indentation_of(simple_tree.node_at((0, 1))) == "    "
        assert simple_tree.indentation_of(simple_tree.node_at((0,))) == ""

    def test_indentation_ignores_carriage_return(self):
        node = SyntaxNode(kind="x", line=1, column=1)
        tree = SyntaxTree(root=SyntaxNode(kind="root"), source="a\r\n\tb\r\n", newline="\r\n")
        assert tree.indentation_of(node) == "\t"

    def test_begins_line(self, simple_tree):
        assert simple_tree.begins_line(simple_tree.node_at((0, 1)))
        same_line = SyntaxNode(kind="x", line=0, column=10)
        tree = SyntaxTree(root=SyntaxNode(kind="root"), source="class A { int x; }")
        assert not tree.begins_line(same_line)

    @pytest.mark.parametrize(
        ("source", "unit"),
        [
            ("class A\n{\n  int x;\n}\n", "  "),
            ("class A\n{\n\tint x;\n}\n", "\t"),
            ("/**\n * Header\n */\nclass A\n{\n    int x;\n}\n", "    "),
            ("class A { }", "    "),
        ],
    )
    def test_indent_unit(self, source, unit):
        assert SyntaxTree(root=SyntaxNode(kind="root"), source=source).indent_unit == unit

    def test_replace_shares_line_index(self, simple_tree):
        path = (0, 1)
        updated = simple_tree.with_leading_trivia(path, ())
        assert updated._index is simple_tree._index
        assert updated.indentation_of(updated.node_at(path)) == "    "

    def test_offset_of(self, simple_tree):
        assert simple_tree.offset_of(simple_tree.node_at((0, 1))) == len("class A\n{\n    ")

    def test_trivia_starts_line(self, simple_tree):
        assert simple_tree.trivia_starts_line(simple_tree.node_at((0,)))
        assert not simple_tree.trivia_starts_line(simple_tree.node_at((0, 1)))
