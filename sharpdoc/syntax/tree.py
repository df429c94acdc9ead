"""Immutable, lossless syntax tree.

Nodes never change after creation. Replacing a node produces a new root
that shares every subtree outside the path to the replaced node.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Union

from sharpdoc.syntax.trivia import Trivia, render_trivia

NodePath = tuple[int, ...]


@dataclass(frozen=True)
class SyntaxNode:
    """A node of the tree.

    ``parts`` holds raw text segments and child nodes in source order; the
    node's text is their concatenation. ``line``/``column`` locate the node's
    first token in the original source (0-based).
    """

    kind: str
    parts: tuple[Union[str, "SyntaxNode"], ...] = ()
    leading_trivia: tuple[Trivia, ...] = ()
    line: int = 0
    column: int = 0

    def to_string(self) -> str:
        """Node text without its leading trivia."""
        return "".join(
            part if isinstance(part, str) else part.to_full_string()
            for part in self.parts
        )

    def to_full_string(self) -> str:
        """Node text including its leading trivia."""
        return render_trivia(self.leading_trivia) + self.to_string()

    def with_leading_trivia(self, trivia: Sequence[Trivia]) -> SyntaxNode:
        return replace(self, leading_trivia=tuple(trivia))

    def with_parts(self, parts: Sequence[Union[str, SyntaxNode]]) -> SyntaxNode:
        return replace(self, parts=tuple(parts))

    def iter_children(self) -> Iterator[tuple[int, SyntaxNode]]:
        """Yield ``(index_in_parts, child)`` for every child node."""
        for index, part in enumerate(self.parts):
            if isinstance(part, SyntaxNode):
                yield index, part

    @property
    def children(self) -> tuple[SyntaxNode, ...]:
        return tuple(child for _, child in self.iter_children())


def replace_at(root: SyntaxNode, path: NodePath, new_node: SyntaxNode) -> SyntaxNode:
    """Return a copy of *root* with the node at *path* swapped for *new_node*.

    Only the ancestors on *path* are rebuilt.
    """
    if not path:
        return new_node
    index, rest = path[0], path[1:]
    child = root.parts[index]
    if not isinstance(child, SyntaxNode):
        raise KeyError(f"No node at part {index} of {root.kind}")
    parts = list(root.parts)
    parts[index] = replace_at(child, rest, new_node)
    return root.with_parts(parts)


DEFAULT_INDENT = "    "


def _indentation(text: str) -> str:
    return text[: len(text) - len(text.lstrip(" \t"))]


@dataclass(frozen=True)
class LineIndex:
    """Line table of a source text, built once and shared by derived trees."""

    lines: tuple[str, ...]
    offsets: tuple[int, ...]
    indent_unit: str = DEFAULT_INDENT

    @classmethod
    def of(cls, source: str) -> LineIndex:
        lines = source.split("\n")
        offsets = [0]
        for line in lines[:-1]:
            offsets.append(offsets[-1] + len(line) + 1)
        return cls(lines=tuple(lines), offsets=tuple(offsets), indent_unit=_guess_unit(lines))


def _guess_unit(lines: Sequence[str]) -> str:
    # The first indented line of a C# file sits one level deep.
    for line in lines:
        # Blank lines and block comment bodies say nothing about nesting.
        if not line.strip() or line.lstrip().startswith("*"):
            continue
        indent = _indentation(line)
        if indent.startswith("\t"):
            return "\t"
        if indent and " " * len(indent) == indent:
            return indent
    return DEFAULT_INDENT


@dataclass(frozen=True)
class SyntaxTree:
    """A parsed source file: root node plus the original text it came from."""

    root: SyntaxNode
    source: str
    newline: str = "\n"
    path: Path | None = None
    bom: bool = False
    _index: LineIndex | None = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self._index is None:
            object.__setattr__(self, "_index", LineIndex.of(self.source))

    @property
    def indent_unit(self) -> str:
        """One indentation level as the file writes it."""
        return self._index.indent_unit

    def node_at(self, path: NodePath) -> SyntaxNode:
        node = self.root
        for index in path:
            child = node.parts[index]
            if not isinstance(child, SyntaxNode):
                raise KeyError(f"No node at path {path}")
            node = child
        return node

    def replace_node(self, path: NodePath, new_node: SyntaxNode) -> SyntaxTree:
        # The source is unchanged, so the line index carries over.
        return replace(self, root=replace_at(self.root, path, new_node), _index=self._index)

    def with_leading_trivia(self, path: NodePath, trivia: Sequence[Trivia]) -> SyntaxTree:
        """Give the node at *path* new leading trivia and rebuild its ancestors."""
        return self.replace_node(path, self.node_at(path).with_leading_trivia(trivia))

    def walk(self) -> Iterator[tuple[NodePath, SyntaxNode]]:
        """Pre-order traversal in document order."""
        stack: list[tuple[NodePath, SyntaxNode]] = [((), self.root)]
        while stack:
            path, node = stack.pop()
            yield path, node
            children = [(path + (index,), child) for index, child in node.iter_children()]
            stack.extend(reversed(children))

    def line_text(self, line: int) -> str:
        lines = self._index.lines
        if 0 <= line < len(lines):
            return lines[line].rstrip("\r")
        return ""

    def indentation_of(self, node: SyntaxNode) -> str:
        """Leading whitespace of the source line the node starts on."""
        return _indentation(self.line_text(node.line))

    def begins_line(self, node: SyntaxNode) -> bool:
        """True when only whitespace precedes the node's first token on its line."""
        return not self.line_text(node.line)[: node.column].strip(" \t")

    def offset_of(self, node: SyntaxNode) -> int:
        """Character offset of the node's first token in the original source."""
        offsets = self._index.offsets
        if node.line >= len(offsets):
            return len(self.source)
        return offsets[node.line] + node.column

    def trivia_starts_line(self, node: SyntaxNode) -> bool:
        """True when the node's leading trivia begins at the start of a line."""
        start = self.offset_of(node) - len(render_trivia(node.leading_trivia))
        return start <= 0 or self.source[start - 1] == "\n"

    def to_full_string(self) -> str:
        return self.root.to_full_string()
